# backend/pos/services/reconciliation.py
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db.models import Count, Sum

from utils.money import ZERO, format_amount, parse_amount

from ..models import Sale


@dataclass(frozen=True)
class SystemSales:
    cashier_id: int
    start: date
    end: date
    total: Decimal
    count: int


@dataclass(frozen=True)
class Reconciliation:
    system_sales_total: Decimal
    physical_cash: Decimal
    return_amount: Decimal
    online_bills: Decimal
    expenses: Decimal
    others: Decimal

    @property
    def net_physical_balance(self) -> Decimal:
        return (self.physical_cash + self.online_bills + self.others) - (self.return_amount + self.expenses)

    @property
    def difference(self) -> Decimal:
        return self.net_physical_balance - self.system_sales_total

    @property
    def is_balanced(self) -> bool:
        return self.difference == 0

    def as_dict(self) -> dict:
        return {
            "system_sales_total": format_amount(self.system_sales_total),
            "physical_cash": format_amount(self.physical_cash),
            "return_amount": format_amount(self.return_amount),
            "online_bills": format_amount(self.online_bills),
            "expenses": format_amount(self.expenses),
            "others": format_amount(self.others),
            "net_physical_balance": format_amount(self.net_physical_balance),
            "difference": format_amount(self.difference),
            "is_balanced": self.is_balanced,
        }


def reconcile(system_sales_total, physical_cash, return_amount, online_bills, expenses, others) -> Reconciliation:
    """
    Compare counted money against recorded sales. Hand-typed inputs are
    parsed leniently (blank or garbage -> 0) and kept as Decimal; rounding
    only happens in as_dict().
    """
    return Reconciliation(
        system_sales_total=parse_amount(system_sales_total),
        physical_cash=parse_amount(physical_cash),
        return_amount=parse_amount(return_amount),
        online_bills=parse_amount(online_bills),
        expenses=parse_amount(expenses),
        others=parse_amount(others),
    )


def fetch_system_sales(cashier_id, start: date, end: date) -> SystemSales:
    totals = Sale.objects.filter(
        cashier_id=cashier_id,
        business_day__gte=start,
        business_day__lte=end,
    ).aggregate(total=Sum("total_amount"), count=Count("id"))
    return SystemSales(
        cashier_id=cashier_id,
        start=start,
        end=end,
        total=totals.get("total") or ZERO,
        count=int(totals.get("count") or 0),
    )
