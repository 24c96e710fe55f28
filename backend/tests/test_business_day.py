import pytest
from django.utils import timezone

from pos.models import AppSetting
from pos.services import errors
from pos.services.business_day import (
    BUSINESS_DAY_SETTING_KEY,
    advance_business_day,
    get_current_business_day,
    parse_business_day,
    require_business_day,
)


def _set_day(value):
    AppSetting.objects.update_or_create(setting_key=BUSINESS_DAY_SETTING_KEY, defaults={"value": value})


@pytest.mark.django_db
def test_missing_business_day_heals_to_today():
    today = timezone.localdate().strftime("%Y-%m-%d")

    assert get_current_business_day() == today
    assert AppSetting.objects.get(setting_key=BUSINESS_DAY_SETTING_KEY).value == today


@pytest.mark.django_db
def test_garbage_business_day_heals_to_today():
    _set_day("not-a-date")

    assert get_current_business_day() == timezone.localdate().strftime("%Y-%m-%d")


@pytest.mark.django_db
def test_valid_business_day_is_kept():
    _set_day("2024-03-10")

    assert get_current_business_day() == "2024-03-10"


@pytest.mark.django_db
def test_padded_business_day_is_returned_normalized():
    _set_day(" 2024-03-10 ")

    assert get_current_business_day() == "2024-03-10"


@pytest.mark.django_db
def test_advance_twice_moves_two_days():
    _set_day("2024-03-10")

    assert advance_business_day() == "2024-03-11"
    assert advance_business_day() == "2024-03-12"
    assert get_current_business_day() == "2024-03-12"


@pytest.mark.django_db
def test_advance_crosses_month_end():
    _set_day("2024-02-29")

    assert advance_business_day() == "2024-03-01"


def test_parse_business_day_is_strict():
    assert parse_business_day("2024-03-10").isoformat() == "2024-03-10"
    assert parse_business_day("2024-02-30") is None
    assert parse_business_day("2024-3-10") is None
    with pytest.raises(errors.InvalidBusinessDay):
        require_business_day("20240310")
