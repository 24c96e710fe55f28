from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

SALES_FINALIZED = Counter(
    "restopos_sales_finalized_total",
    "Sales finalized and stored",
)
BILL_LINES_REMOVED = Counter(
    "restopos_bill_lines_removed_total",
    "Bill lines removed before finalization",
    ["reason"],
)
DEAL_EXPANSIONS_SKIPPED = Counter(
    "restopos_deal_expansion_skipped_items_total",
    "Deal sub-items skipped because their menu item no longer exists",
)
IMPORT_ROWS = Counter(
    "restopos_import_rows_total",
    "Bulk import rows",
    ["entity", "outcome"],
)
BUSINESS_DAY_ADVANCES = Counter(
    "restopos_business_day_advances_total",
    "Business day advances",
)


def metrics_view(request):
    payload = generate_latest()
    return HttpResponse(payload, content_type=CONTENT_TYPE_LATEST)


def track_sale_finalized():
    SALES_FINALIZED.inc()


def track_bill_line_removed(reason):
    BILL_LINES_REMOVED.labels(reason=reason or "unknown").inc()


def track_deal_expansion_skipped(count=1):
    if count:
        DEAL_EXPANSIONS_SKIPPED.inc(count)


def track_import_row(entity, outcome):
    IMPORT_ROWS.labels(entity=entity or "unknown", outcome=outcome or "unknown").inc()


def track_business_day_advance():
    BUSINESS_DAY_ADVANCES.inc()
