import logging
import uuid
from datetime import datetime

from django.conf import settings
from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.response import Response

from accounts.permissions import AdminPermission, StaffPermission
from accounts.utils import display_name_for, get_cashier_display_name, is_admin
from menu.models import Deal, MenuItem
from restopos.metrics import track_deal_expansion_skipped
from utils.money import ZERO, format_amount
from utils.renderers import CSVRenderer, XLSXRenderer

from .serializers import (
    BillAddDealSerializer,
    BillAddItemSerializer,
    BillQuantitySerializer,
    DeletedItemCreateSerializer,
    DeletedItemLogSerializer,
    FinalizeSaleSerializer,
    PurgeSalesSerializer,
    SaleSerializer,
)
from .services import errors
from .services.bill import BillComposer
from .services.bill_store import claimed_bill, discard_bill, load_bill, save_bill
from .services.business_day import advance_business_day, get_current_business_day
from .services.deals import add_deal_to_bill
from .services.deletion_log import (
    clear_deleted_items,
    list_deleted_items,
    log_deleted_item,
    record_removed_line,
)
from .services.reconciliation import fetch_system_sales, reconcile
from .services.sales import (
    clear_all_sales,
    finalize_sale,
    get_sale,
    list_sales,
    purge_sales_before,
    reset_all_data,
    return_sale,
)

logger = logging.getLogger(__name__)

SALES_EXPORT_HEADERS = ["Bill ID", "Date", "Cashier", "Customer", "Waiter", "Table", "Total"]


def _parse_date(value: str):
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_int(value):
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def _resolve_menu_item(menu_item_id):
    try:
        key = uuid.UUID(str(menu_item_id))
    except ValueError:
        return None
    return MenuItem.objects.filter(id=key).first()


def _bill_payload(composer: BillComposer):
    return {
        "items": composer.to_blob(),
        "subtotal": format_amount(composer.subtotal()),
        "item_count": sum(item.quantity for item in composer.items),
        "currency": settings.POS_CURRENCY,
    }


# --------------------------------
# In-progress bill
# --------------------------------

@api_view(["GET", "DELETE"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_bill(request):
    if request.method == "DELETE":
        # abandoning a bill is not a removal: nothing goes to the deleted item log
        discard_bill(request.user)
        return Response(_bill_payload(BillComposer()))
    return Response(_bill_payload(load_bill(request.user)))


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_bill_add_item(request):
    serializer = BillAddItemSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    menu_item_id = serializer.validated_data["menu_item_id"]

    menu_item = _resolve_menu_item(menu_item_id)
    if menu_item is None:
        raise errors.ReferenceNotFound(str(menu_item_id))

    composer = load_bill(request.user)
    line = composer.add_menu_item(menu_item)
    save_bill(request.user, composer)
    payload = _bill_payload(composer)
    payload["line"] = line.to_blob()
    return Response(payload)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_bill_add_deal(request):
    serializer = BillAddDealSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    deal_id = serializer.validated_data["deal_id"]

    deal = Deal.objects.filter(id=deal_id).first()
    if deal is None:
        raise errors.ReferenceNotFound(str(deal_id))

    composer = load_bill(request.user)
    expansion = add_deal_to_bill(composer, deal, _resolve_menu_item)
    if expansion.skipped:
        track_deal_expansion_skipped(len(expansion.skipped))
    save_bill(request.user, composer)

    payload = _bill_payload(composer)
    payload.update(
        {
            "deal_id": expansion.deal_id,
            "deal_name": expansion.deal_name,
            "added": [line.to_blob() for line in expansion.lines],
            "skipped": [item.to_blob() for item in expansion.skipped],
            "notice": expansion.skipped_notice(),
        }
    )
    return Response(payload)


@api_view(["PATCH", "DELETE"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_bill_item(request, bill_item_id):
    composer = load_bill(request.user)

    if request.method == "DELETE":
        removed = composer.remove_item(bill_item_id)
    else:
        serializer = BillQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        removed = composer.update_quantity(bill_item_id, serializer.validated_data["quantity"])

    if composer.get(bill_item_id) is None and removed is None:
        # unknown line: ignored, the bill is returned unchanged
        payload = _bill_payload(composer)
        payload["detail"] = "Bill item not found, ignored."
        return Response(payload)

    if removed is not None:
        # the log row is written before the stored bill changes
        record_removed_line(removed, request.user)
    save_bill(request.user, composer)
    return Response(_bill_payload(composer))


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_bill_finalize(request):
    serializer = FinalizeSaleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    cashier_id = data.get("cashier_id")
    if cashier_id is None:
        cashier_id = request.user.pk

    # the claimed draft comes back if anything below fails
    with claimed_bill(request.user) as composer:
        if composer.is_empty:
            raise errors.EmptyBill()
        sale = finalize_sale(
            composer.items,
            cashier_id=cashier_id,
            operator=request.user,
            open_business_day=get_current_business_day(),
            table_number=data.get("table_number", ""),
            customer_name=data.get("customer_name", ""),
            waiter_name=data.get("waiter_name", ""),
        )
    return Response(
        {"sale": SaleSerializer(sale).data, "currency": settings.POS_CURRENCY},
        status=status.HTTP_201_CREATED,
    )


# --------------------------------
# Sales
# --------------------------------

@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_sales(request):
    qs = list_sales(
        start=_parse_date(request.query_params.get("from")),
        end=_parse_date(request.query_params.get("to")),
        cashier_id=_parse_int(request.query_params.get("cashier")),
        search=request.query_params.get("q", ""),
    )
    totals = qs.aggregate(total_revenue=Sum("total_amount"), total_transactions=Count("id"))
    return Response(
        {
            "results": SaleSerializer(qs, many=True).data,
            "total_revenue": format_amount(totals.get("total_revenue") or ZERO),
            "total_transactions": totals.get("total_transactions") or 0,
        }
    )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_my_sales(request):
    business_day = get_current_business_day()
    qs = list_sales(start=business_day, end=business_day, cashier_id=request.user.pk)
    totals = qs.aggregate(total_revenue=Sum("total_amount"), total_transactions=Count("id"))
    return Response(
        {
            "business_day": business_day,
            "results": SaleSerializer(qs, many=True).data,
            "total_revenue": format_amount(totals.get("total_revenue") or ZERO),
            "total_transactions": totals.get("total_transactions") or 0,
        }
    )


@api_view(["GET", "DELETE"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_sale_detail(request, sale_id):
    if request.method == "DELETE":
        returned = return_sale(sale_id)
        return Response(
            {
                "id": str(returned.id),
                "returned_amount": format_amount(returned.total_amount),
                "detail": "Sale returned and removed.",
            }
        )
    return Response(SaleSerializer(get_sale(sale_id)).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_sales_clear(request):
    deleted = clear_all_sales()
    return Response({"deleted": deleted})


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_sales_purge(request):
    serializer = PurgeSalesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    deleted = purge_sales_before(serializer.validated_data["before"])
    return Response({"deleted": deleted})


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
@renderer_classes([XLSXRenderer, CSVRenderer])
def pos_sales_export(request):
    qs = list_sales(
        start=_parse_date(request.query_params.get("from")),
        end=_parse_date(request.query_params.get("to")),
        cashier_id=_parse_int(request.query_params.get("cashier")),
    )
    rows = [
        [
            str(sale.id),
            timezone.localtime(sale.created_at).strftime("%Y-%m-%d %H:%M"),
            display_name_for(sale.cashier),
            sale.customer_name,
            sale.waiter_name,
            sale.table_number,
            format_amount(sale.total_amount),
        ]
        for sale in qs
    ]
    stamp = timezone.localdate().strftime("%Y-%m-%d")
    # ?format=csv|xlsx picks the renderer, xlsx by default
    extension = request.accepted_renderer.format

    resp = Response({"headers": SALES_EXPORT_HEADERS, "rows": rows, "title": "Sales"})
    resp["Content-Disposition"] = f'attachment; filename="sales_{stamp}.{extension}"'
    return resp


# --------------------------------
# Deleted item log
# --------------------------------

@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_deleted_items(request):
    if request.method == "GET":
        if not is_admin(request):
            raise errors.Unauthorized("Admin role required.")
        qs = list_deleted_items(
            start=_parse_date(request.query_params.get("from")),
            end=_parse_date(request.query_params.get("to")),
        )
        return Response(DeletedItemLogSerializer(qs, many=True).data)

    serializer = DeletedItemCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    entry = log_deleted_item(
        request.user,
        removed_by_id=data["removed_by_cashier_id"],
        item_name=data["item_name"],
        item_code=data["item_code"],
        menu_item_id=data.get("menu_item_id") or None,
        quantity_removed=data["quantity_removed"],
        price_per_item=data["price_per_item"],
        reason=data["reason"],
        bill_id=data.get("bill_id"),
        is_deal_item=data["is_deal_item"],
        deal_name=data["deal_name"],
    )
    return Response(DeletedItemLogSerializer(entry).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_deleted_items_clear(request):
    deleted = clear_deleted_items()
    return Response({"deleted": deleted})


# --------------------------------
# Business day
# --------------------------------

@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def pos_business_day(request):
    return Response({"business_day": get_current_business_day()})


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_business_day_advance(request):
    return Response({"business_day": advance_business_day()})


# --------------------------------
# Cashier report / reconciliation
# --------------------------------

def _report_criteria(params):
    cashier = params.get("cashier")
    start = _parse_date(params.get("from"))
    end = _parse_date(params.get("to"))
    if not cashier or start is None or end is None:
        raise errors.ValidationError(
            "Select a cashier and a valid date range (from, to as YYYY-MM-DD).",
            code="missing_criteria",
        )
    try:
        cashier_id = int(cashier)
    except (TypeError, ValueError):
        raise errors.ValidationError("Cashier must be a user id.", code="missing_criteria")
    if start > end:
        raise errors.ValidationError("Start date must not be after end date.", code="invalid_range")
    return cashier_id, start, end


def _report_payload(system_sales):
    return {
        "cashier_id": system_sales.cashier_id,
        "cashier_name": get_cashier_display_name(system_sales.cashier_id),
        "from": system_sales.start.isoformat(),
        "to": system_sales.end.isoformat(),
        "sale_count": system_sales.count,
        "system_sales_total": format_amount(system_sales.total),
        "currency": settings.POS_CURRENCY,
    }


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_cashier_report(request):
    cashier_id, start, end = _report_criteria(request.query_params)
    return Response(_report_payload(fetch_system_sales(cashier_id, start, end)))


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_cashier_reconcile(request):
    cashier_id, start, end = _report_criteria(request.data)
    system_sales = fetch_system_sales(cashier_id, start, end)
    result = reconcile(
        system_sales.total,
        physical_cash=request.data.get("physical_cash"),
        return_amount=request.data.get("return_amount"),
        online_bills=request.data.get("online_bills"),
        expenses=request.data.get("expenses"),
        others=request.data.get("others"),
    )
    logger.info(
        "Reconciliation for cashier %s %s..%s: difference %s",
        cashier_id,
        start,
        end,
        format_amount(result.difference),
    )
    payload = _report_payload(system_sales)
    payload.update(result.as_dict())
    return Response(payload)


# --------------------------------
# Admin utilities
# --------------------------------

@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, AdminPermission])
def pos_reset_all(request):
    business_day = reset_all_data()
    return Response({"detail": "All sales, deleted item logs, deals and menu items were removed.", "business_day": business_day})
