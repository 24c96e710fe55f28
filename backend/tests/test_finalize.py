from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from pos.models import Sale
from pos.services import errors
from pos.services.bill import BillItem, DealContext
from pos.services.sales import finalize_sale, purge_sales_before, return_sale, stamp_sale_time
from .factories import CashierFactory


def _line(bill_item_id="billItem_1", price="250", quantity=2, deal=False):
    return BillItem(
        bill_item_id=bill_item_id,
        menu_item_id="m1",
        code="M001",
        name="Burger",
        price=Decimal(price),
        quantity=quantity,
        deal_context=DealContext(deal_id="d1", deal_name="Duo", original_price_per_item=Decimal("300")) if deal else None,
    )


def test_stamp_keeps_clock_time_on_business_day_date():
    now = datetime(2024, 3, 11, 2, 15, 0, 123000, tzinfo=dt_timezone.utc)

    stamped = stamp_sale_time(date(2024, 3, 10), now)

    assert stamped.date() == date(2024, 3, 10)
    assert (stamped.hour, stamped.minute, stamped.second, stamped.microsecond) == (2, 15, 0, 123000)


@pytest.mark.django_db
def test_finalize_after_midnight_stamps_open_business_day():
    cashier = CashierFactory()
    now = datetime(2024, 3, 11, 2, 15, 0, tzinfo=dt_timezone.utc)

    sale = finalize_sale(
        [_line(), _line("billItem_2", price="120", quantity=1, deal=True)],
        cashier_id=cashier.pk,
        operator=cashier,
        open_business_day="2024-03-10",
        table_number="7",
        now=now,
    )

    sale.refresh_from_db()
    created = timezone.localtime(sale.created_at)
    assert created.date() == date(2024, 3, 10)
    assert created.strftime("%H:%M:%S") == "02:15:00"
    assert sale.business_day == date(2024, 3, 10)
    assert sale.subtotal == sale.total_amount == Decimal("620.00")
    assert sale.cashier_id == cashier.pk
    assert sale.table_number == "7"
    assert sale.items[0]["totalPrice"] == 500
    assert sale.items[1]["dealContext"]["dealName"] == "Duo"


@pytest.mark.django_db
def test_empty_bill_fails_without_touching_the_store():
    cashier = CashierFactory()

    with mock.patch.object(Sale.objects, "create") as create:
        with pytest.raises(errors.EmptyBill):
            finalize_sale([], cashier_id=cashier.pk, operator=cashier, open_business_day="2024-03-10")

    create.assert_not_called()
    assert Sale.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("business_day", ["", None, "2024-13-01", "10/03/2024", "2024-3-1"])
def test_invalid_business_day_is_fatal(business_day):
    cashier = CashierFactory()

    with pytest.raises(errors.InvalidBusinessDay):
        finalize_sale([_line()], cashier_id=cashier.pk, operator=cashier, open_business_day=business_day)

    assert Sale.objects.count() == 0


@pytest.mark.django_db
def test_cashier_identity_must_match_operator():
    cashier = CashierFactory()
    other = CashierFactory()

    with pytest.raises(errors.Unauthorized):
        finalize_sale([_line()], cashier_id=other.pk, operator=cashier, open_business_day="2024-03-10")

    assert Sale.objects.count() == 0


@pytest.mark.django_db
def test_store_failure_becomes_persistence_error():
    cashier = CashierFactory()

    with mock.patch.object(Sale.objects, "create", side_effect=DatabaseError("disk full")):
        with pytest.raises(errors.PersistenceError) as exc:
            finalize_sale([_line()], cashier_id=cashier.pk, operator=cashier, open_business_day="2024-03-10")

    assert "disk full" in exc.value.detail


@pytest.mark.django_db
def test_return_deletes_the_sale():
    cashier = CashierFactory()
    sale = finalize_sale([_line()], cashier_id=cashier.pk, operator=cashier, open_business_day="2024-03-10")

    returned = return_sale(sale.id)

    assert returned.total_amount == Decimal("500.00")
    assert not Sale.objects.filter(id=sale.id).exists()
    with pytest.raises(errors.NotFound):
        return_sale(sale.id)


@pytest.mark.django_db
def test_purge_removes_sales_before_cutoff_only():
    cashier = CashierFactory()
    for day in ("2024-03-08", "2024-03-09", "2024-03-10"):
        finalize_sale([_line()], cashier_id=cashier.pk, operator=cashier, open_business_day=day)

    assert purge_sales_before("2024-03-10") == 2
    assert list(Sale.objects.values_list("business_day", flat=True)) == [date(2024, 3, 10)]

    with pytest.raises(errors.InvalidBusinessDay):
        purge_sales_before("yesterday")
