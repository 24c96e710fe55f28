# backend/menu/imports.py
import csv
import io
import json
import logging
from dataclasses import dataclass

from django.db import DatabaseError, IntegrityError, transaction
from rest_framework import exceptions

from restopos.metrics import track_import_row
from utils.exports import build_csv_bytes
from utils.money import format_amount

from .deal_items import deal_items_from_blob
from .models import Deal, MenuItem
from .serializers import MenuItemSerializer

logger = logging.getLogger(__name__)

IMPORT_MAX_ROWS = 2000
IMPORT_MAX_FILE_MB = 5

MENU_ITEM_HEADERS = ["Code", "Name", "Price", "Category"]
DEAL_HEADERS = ["Deal Number", "Name", "Description", "Items (JSON)", "Total Price", "Is Active"]


@dataclass
class ImportSummary:
    added: int = 0
    updated: int = 0
    failed: int = 0

    def as_dict(self):
        return {"added": self.added, "updated": self.updated, "failed": self.failed}


def _normalize_header(value) -> str:
    return " ".join(str(value or "").replace("\ufeff", "").split()).lower()


def _cell(row: dict, header: str) -> str:
    wanted = _normalize_header(header)
    for key, value in row.items():
        if _normalize_header(key) == wanted:
            return "" if value is None else str(value).strip()
    return ""


def _load_csv_rows(file_obj):
    raw_bytes = file_obj.read()
    if not raw_bytes:
        return []
    try:
        raw = raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError:
        raw = raw_bytes.decode("latin-1")
    if raw.lower().startswith("sep="):
        raw = raw.split("\n", 1)[1] if "\n" in raw else ""
    # sniff the header line only: JSON cells in the body confuse the sniffer
    header = raw.splitlines()[0] if raw.strip() else ""
    try:
        delimiter = csv.Sniffer().sniff(header, delimiters=",;").delimiter
    except csv.Error:
        delimiter = ","
    reader = csv.DictReader(io.StringIO(raw), delimiter=delimiter)
    return [row for row in reader if any((value or "").strip() for value in row.values() if isinstance(value, str))]


def _load_xlsx_rows(file_obj):
    import openpyxl

    wb = openpyxl.load_workbook(file_obj, read_only=True, data_only=True)
    sheet = wb.active
    rows = list(sheet.iter_rows(values_only=True))
    if not rows:
        return []
    headers = [str(h or "").strip() for h in rows[0]]
    data_rows = []
    for row in rows[1:]:
        if not any(cell not in (None, "") for cell in row):
            continue
        data_rows.append({header: row[idx] if idx < len(row) else "" for idx, header in enumerate(headers)})
    return data_rows


def parse_upload(upload):
    if upload is None:
        raise exceptions.ValidationError({"file": "A CSV or XLSX file is required."})
    if getattr(upload, "size", 0) > IMPORT_MAX_FILE_MB * 1024 * 1024:
        raise exceptions.ValidationError({"file": f"File too large (max {IMPORT_MAX_FILE_MB} MB)."})
    file_name = (getattr(upload, "name", "") or "").lower()
    if file_name.endswith(".csv"):
        rows = _load_csv_rows(upload)
    elif file_name.endswith(".xlsx"):
        rows = _load_xlsx_rows(upload)
    else:
        raise exceptions.ValidationError({"file": "Unsupported format (CSV or XLSX)."})
    if len(rows) > IMPORT_MAX_ROWS:
        raise exceptions.ValidationError({"file": f"Too many rows (max {IMPORT_MAX_ROWS})."})
    return rows


def import_menu_items(rows) -> ImportSummary:
    """Upsert menu items by code. Each row stands alone: a bad row is counted and skipped."""
    summary = ImportSummary()
    for line_no, row in enumerate(rows, start=2):
        code = _cell(row, "Code")
        name = _cell(row, "Name")
        price = _cell(row, "Price").replace(",", ".")
        category = _cell(row, "Category")
        if not code or not name or not price:
            logger.warning("Menu import line %s skipped: missing Code, Name or Price", line_no)
            summary.failed += 1
            track_import_row("menu_item", "failed")
            continue

        existing = MenuItem.objects.filter(code=code).first()
        serializer = MenuItemSerializer(
            existing,
            data={"code": code, "name": name, "price": price, "category": category or None},
        )
        if not serializer.is_valid():
            logger.warning("Menu import line %s (%s) skipped: %s", line_no, code, serializer.errors)
            summary.failed += 1
            track_import_row("menu_item", "failed")
            continue
        try:
            with transaction.atomic():
                serializer.save()
        except (IntegrityError, DatabaseError):
            logger.exception("Menu import line %s (%s) failed to save", line_no, code)
            summary.failed += 1
            track_import_row("menu_item", "failed")
            continue

        if existing:
            summary.updated += 1
            track_import_row("menu_item", "updated")
        else:
            summary.added += 1
            track_import_row("menu_item", "added")

    logger.info("Menu items import: %s", summary.as_dict())
    return summary


def import_deals(rows) -> ImportSummary:
    """Upsert deals by deal number; the total is always recomputed from the items."""
    summary = ImportSummary()
    for line_no, row in enumerate(rows, start=2):
        deal_number = _cell(row, "Deal Number")
        name = _cell(row, "Name")
        description = _cell(row, "Description")
        items_json = _cell(row, "Items (JSON)")
        is_active = _cell(row, "Is Active").upper() in ("TRUE", "1")

        if not deal_number or not name or not items_json:
            logger.warning("Deal import line %s skipped: missing Deal Number, Name or Items (JSON)", line_no)
            summary.failed += 1
            track_import_row("deal", "failed")
            continue
        try:
            deal_items = deal_items_from_blob(json.loads(items_json))
            if not deal_items:
                raise ValueError("A deal needs at least one item.")
        except (ValueError, TypeError) as exc:
            logger.warning("Deal import line %s (%s) skipped: invalid Items (JSON): %s", line_no, deal_number, exc)
            summary.failed += 1
            track_import_row("deal", "failed")
            continue

        existing = Deal.objects.filter(deal_number=deal_number).first()
        deal = existing or Deal(deal_number=deal_number)
        deal.name = name
        deal.description = description
        deal.is_active = is_active
        deal.set_deal_items(deal_items)
        try:
            with transaction.atomic():
                deal.save()
        except (IntegrityError, DatabaseError):
            logger.exception("Deal import line %s (%s) failed to save", line_no, deal_number)
            summary.failed += 1
            track_import_row("deal", "failed")
            continue

        if existing:
            summary.updated += 1
            track_import_row("deal", "updated")
        else:
            summary.added += 1
            track_import_row("deal", "added")

    logger.info("Deals import: %s", summary.as_dict())
    return summary


def export_menu_items_csv() -> bytes:
    rows = [
        [item.code, item.name, format_amount(item.price), item.category or ""]
        for item in MenuItem.objects.order_by("name")
    ]
    return build_csv_bytes(MENU_ITEM_HEADERS, rows)


def export_deals_csv() -> bytes:
    rows = [
        [
            deal.deal_number,
            deal.name,
            deal.description or "",
            json.dumps(deal.items),
            format_amount(deal.calculated_total_deal_price),
            "TRUE" if deal.is_active else "FALSE",
        ]
        for deal in Deal.objects.order_by("name")
    ]
    return build_csv_bytes(DEAL_HEADERS, rows)
