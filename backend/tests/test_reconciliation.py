from datetime import date
from decimal import Decimal

import pytest

from pos.services.bill import BillItem
from pos.services.reconciliation import fetch_system_sales, reconcile
from pos.services.sales import finalize_sale
from .factories import CashierFactory


def test_reconcile_reference_example():
    result = reconcile("10000.00", physical_cash="9500", return_amount="200", online_bills="800", expenses="150", others="-50")

    assert result.net_physical_balance == Decimal("9900")
    assert result.difference == Decimal("-100.00")
    assert result.is_balanced is False
    assert result.as_dict()["difference"] == "-100.00"
    assert result.as_dict()["net_physical_balance"] == "9900.00"


def test_reconcile_treats_garbage_as_zero():
    result = reconcile("50", physical_cash="abc", return_amount="", online_bills=None, expenses="  ", others="50")

    assert result.physical_cash == Decimal("0")
    assert result.net_physical_balance == Decimal("50")
    assert result.is_balanced is True


def test_reconcile_has_no_float_drift():
    # 0.1 + 0.2 style inputs must still balance exactly
    result = reconcile("0.30", physical_cash="0.10", return_amount="0", online_bills="0.20", expenses="0", others="0")

    assert result.difference == Decimal("0")
    assert result.is_balanced is True


def test_reconcile_accepts_comma_decimal_separator():
    result = reconcile("1 250,50", physical_cash="1 250,50", return_amount=0, online_bills=0, expenses=0, others=0)

    assert result.system_sales_total == Decimal("1250.50")
    assert result.is_balanced is True


@pytest.mark.parametrize(
    "typed, expected",
    [
        ("1,000", Decimal("1000")),
        ("12,500,000", Decimal("12500000")),
        ("1,250.50", Decimal("1250.50")),
        ("1250,50", Decimal("1250.50")),
        ("-1,000", Decimal("-1000")),
    ],
)
def test_reconcile_reads_thousands_separators(typed, expected):
    result = reconcile(typed, physical_cash=typed, return_amount=0, online_bills=0, expenses=0, others=0)

    assert result.system_sales_total == expected
    assert result.is_balanced is True


def _line(price):
    return BillItem(
        bill_item_id="billItem_1",
        menu_item_id="m1",
        code="M001",
        name="Burger",
        price=Decimal(price),
        quantity=1,
    )


@pytest.mark.django_db
def test_fetch_system_sales_filters_cashier_and_inclusive_range():
    cashier = CashierFactory()
    other = CashierFactory()
    for day, price in (("2024-03-09", "100"), ("2024-03-10", "250.50"), ("2024-03-11", "49.50"), ("2024-03-12", "999")):
        finalize_sale([_line(price)], cashier_id=cashier.pk, operator=cashier, open_business_day=day)
    finalize_sale([_line("500")], cashier_id=other.pk, operator=other, open_business_day="2024-03-10")

    sales = fetch_system_sales(cashier.pk, date(2024, 3, 10), date(2024, 3, 11))

    assert sales.total == Decimal("300.00")
    assert sales.count == 2


@pytest.mark.django_db
def test_fetch_system_sales_without_sales_is_zero():
    sales = fetch_system_sales(CashierFactory().pk, date(2024, 3, 10), date(2024, 3, 10))

    assert sales.total == Decimal("0")
    assert sales.count == 0
