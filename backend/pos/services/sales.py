# backend/pos/services/sales.py
import logging
from datetime import datetime
from typing import Iterable, Optional

from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from menu.models import Deal, MenuItem
from restopos.metrics import track_sale_finalized
from utils.money import ZERO

from ..models import DeletedItemLog, Sale
from . import errors
from .bill import BillItem
from .business_day import require_business_day, reset_business_day

logger = logging.getLogger(__name__)


def stamp_sale_time(business_day, now: datetime) -> datetime:
    """Keep the clock time of ``now`` but put it on the business day's date."""
    local_now = timezone.localtime(now) if timezone.is_aware(now) else now
    return local_now.replace(year=business_day.year, month=business_day.month, day=business_day.day)


def finalize_sale(
    items: Iterable[BillItem],
    *,
    cashier_id,
    operator,
    open_business_day,
    table_number: str = "",
    customer_name: str = "",
    waiter_name: str = "",
    now: Optional[datetime] = None,
) -> Sale:
    items = list(items)
    if not items:
        raise errors.EmptyBill()
    business_day = require_business_day(open_business_day)
    if operator is None or not operator.is_authenticated or str(operator.pk) != str(cashier_id):
        raise errors.Unauthorized("Operation not allowed: cashier ID mismatch or not authenticated.")

    subtotal = sum((item.total_price for item in items), ZERO)
    created_at = stamp_sale_time(business_day, now or timezone.now())

    try:
        with transaction.atomic():
            sale = Sale.objects.create(
                table_number=table_number or "",
                customer_name=customer_name or "",
                waiter_name=waiter_name or "",
                items=[item.to_blob() for item in items],
                subtotal=subtotal,
                total_amount=subtotal,
                created_at=created_at,
                business_day=business_day,
                cashier=operator,
            )
    except DatabaseError as exc:
        logger.exception("Failed to save sale for cashier %s", cashier_id)
        raise errors.PersistenceError(f"Failed to save sale: {exc}") from exc

    track_sale_finalized()
    logger.info(
        "Sale %s recorded: %s lines, total %s, business day %s, cashier %s",
        sale.id,
        len(items),
        subtotal,
        business_day,
        cashier_id,
    )
    return sale


def sale_bill_items(sale: Sale):
    try:
        return [BillItem.from_blob(entry) for entry in sale.items or []]
    except (ValueError, TypeError) as exc:
        raise errors.ValidationError(f"Sale {sale.id} holds malformed items: {exc}") from exc


def list_sales(start=None, end=None, cashier_id=None, search: str = ""):
    qs = Sale.objects.select_related("cashier")
    if start:
        qs = qs.filter(business_day__gte=start)
    if end:
        qs = qs.filter(business_day__lte=end)
    if cashier_id:
        qs = qs.filter(cashier_id=cashier_id)
    search = (search or "").strip()
    if search:
        qs = qs.filter(
            Q(id__icontains=search)
            | Q(customer_name__icontains=search)
            | Q(waiter_name__icontains=search)
            | Q(table_number__icontains=search)
            | Q(cashier__username__icontains=search)
        )
    return qs.order_by("-created_at")


def get_sale(sale_id) -> Sale:
    sale = Sale.objects.filter(id=sale_id).select_related("cashier").first()
    if not sale:
        raise errors.NotFound(f"Sale {sale_id} not found.")
    return sale


def return_sale(sale_id) -> Sale:
    """A returned bill is deleted outright; no void flag and no extra audit row."""
    with transaction.atomic():
        sale = Sale.objects.select_for_update().filter(id=sale_id).first()
        if not sale:
            raise errors.NotFound(f"Sale {sale_id} not found.")
        returned = Sale(**{f.attname: getattr(sale, f.attname) for f in Sale._meta.concrete_fields})
        sale.delete()
    logger.info("Sale %s returned (deleted), amount %s", returned.id, returned.total_amount)
    return returned


def clear_all_sales() -> int:
    deleted, _ = Sale.objects.all().delete()
    logger.info("All sales cleared (%s rows)", deleted)
    return deleted


def purge_sales_before(cutoff) -> int:
    day = require_business_day(cutoff)
    deleted, _ = Sale.objects.filter(business_day__lt=day).delete()
    logger.info("Sales before %s purged (%s rows)", day, deleted)
    return deleted


def reset_all_data() -> str:
    with transaction.atomic():
        DeletedItemLog.objects.all().delete()
        Sale.objects.all().delete()
        Deal.objects.all().delete()
        MenuItem.objects.all().delete()
        today = reset_business_day()
    logger.warning("All application data reset, business day set to %s", today)
    return today
