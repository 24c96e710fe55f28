# backend/pos/services/business_day.py
import logging
from datetime import date, timedelta
from typing import Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from restopos.metrics import track_business_day_advance

from ..models import AppSetting
from . import errors

logger = logging.getLogger(__name__)

BUSINESS_DAY_SETTING_KEY = "current_business_day"
BUSINESS_DAY_FORMAT = "%Y-%m-%d"


def parse_business_day(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value.strip()) != 10:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def require_business_day(value) -> date:
    day = parse_business_day(value)
    if day is None:
        raise errors.InvalidBusinessDay(f"Business day {value!r} is not a valid YYYY-MM-DD date.")
    return day


def _today() -> str:
    return timezone.localdate().strftime(BUSINESS_DAY_FORMAT)


def _write(value: str) -> None:
    AppSetting.objects.update_or_create(
        setting_key=BUSINESS_DAY_SETTING_KEY,
        defaults={"value": value, "updated_at": timezone.now()},
    )


def get_current_business_day() -> str:
    """
    Read the open business day. A missing or unreadable value is repaired
    to today's date and written back.
    """
    setting = AppSetting.objects.filter(setting_key=BUSINESS_DAY_SETTING_KEY).first()
    stored = parse_business_day(setting.value) if setting else None
    if stored:
        return stored.strftime(BUSINESS_DAY_FORMAT)

    today = _today()
    if setting is None or not setting.value:
        logger.warning("Business day not set, initializing to %s", today)
    else:
        logger.warning("Invalid business day %r in settings, resetting to %s", setting.value, today)
    try:
        _write(today)
    except DatabaseError as exc:
        logger.exception("Failed to initialize business day")
        raise errors.PersistenceError(f"Failed to initialize business day setting: {exc}") from exc
    return today


def advance_business_day() -> str:
    """Move the open business day forward by one. Not idempotent: two calls move two days."""
    try:
        with transaction.atomic():
            current = get_current_business_day()
            setting = AppSetting.objects.select_for_update().get(setting_key=BUSINESS_DAY_SETTING_KEY)
            day = require_business_day(setting.value or current)
            new_day = (day + timedelta(days=1)).strftime(BUSINESS_DAY_FORMAT)
            setting.value = new_day
            setting.updated_at = timezone.now()
            setting.save(update_fields=["value", "updated_at"])
    except DatabaseError as exc:
        logger.exception("Failed to advance business day")
        raise errors.PersistenceError(f"Failed to advance business day: {exc}") from exc

    track_business_day_advance()
    logger.info("Business day advanced from %s to %s", day.strftime(BUSINESS_DAY_FORMAT), new_day)
    return new_day


def reset_business_day() -> str:
    today = _today()
    try:
        _write(today)
    except DatabaseError as exc:
        raise errors.PersistenceError(f"Failed to reset business day: {exc}") from exc
    return today
