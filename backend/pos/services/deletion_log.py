# backend/pos/services/deletion_log.py
import logging
from datetime import datetime, time

from django.db import DatabaseError
from django.utils import timezone

from restopos.metrics import track_bill_line_removed

from ..models import DeletedItemLog
from . import errors
from .bill import RemovedLine

logger = logging.getLogger(__name__)


def _check_operator(operator, removed_by_id):
    if operator is None or not operator.is_authenticated:
        raise errors.Unauthorized("Not authenticated.")
    if str(operator.pk) != str(removed_by_id):
        raise errors.Unauthorized("Operation not allowed: cashier ID mismatch for logging.")


def log_deleted_item(
    operator,
    *,
    removed_by_id,
    item_name,
    item_code="",
    menu_item_id=None,
    quantity_removed,
    price_per_item,
    reason="",
    bill_id=None,
    is_deal_item=False,
    deal_name="",
) -> DeletedItemLog:
    _check_operator(operator, removed_by_id)
    if quantity_removed < 1:
        raise errors.ValidationError("quantity_removed must be at least 1.")
    if price_per_item < 0:
        raise errors.ValidationError("price_per_item must be non-negative.")
    try:
        entry = DeletedItemLog.objects.create(
            menu_item_id=menu_item_id,
            item_name=item_name,
            item_code=item_code or "",
            quantity_removed=quantity_removed,
            price_per_item=price_per_item,
            removed_by=operator,
            bill_id=bill_id,
            reason=reason or "",
            is_deal_item=is_deal_item,
            deal_name=deal_name or "",
        )
    except DatabaseError as exc:
        logger.exception("Failed to save deleted item log for %s", item_name)
        raise errors.PersistenceError(f"Failed to save deleted item log: {exc}") from exc
    track_bill_line_removed(reason)
    return entry


def record_removed_line(removed: RemovedLine, operator, bill_id=None) -> DeletedItemLog:
    item = removed.item
    return log_deleted_item(
        operator,
        removed_by_id=operator.pk if operator is not None else None,
        item_name=item.name,
        item_code=item.code,
        menu_item_id=item.menu_item_id,
        quantity_removed=removed.quantity_removed,
        price_per_item=item.price,
        reason=removed.reason,
        bill_id=bill_id,
        is_deal_item=item.is_deal_item,
        deal_name=item.deal_context.deal_name if item.deal_context else "",
    )


def list_deleted_items(start=None, end=None):
    qs = DeletedItemLog.objects.select_related("removed_by")
    tz = timezone.get_current_timezone()
    if start:
        qs = qs.filter(timestamp__gte=timezone.make_aware(datetime.combine(start, time.min), tz))
    if end:
        qs = qs.filter(timestamp__lte=timezone.make_aware(datetime.combine(end, time.max), tz))
    return qs.order_by("-timestamp")


def clear_deleted_items() -> int:
    deleted, _ = DeletedItemLog.objects.all().delete()
    logger.info("Deleted item log purged (%s rows)", deleted)
    return deleted
