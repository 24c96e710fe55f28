# backend/utils/exports.py
import csv
import io

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

EXPORT_HEADER_FONT = Font(bold=True, color="FFFFFF")
EXPORT_HEADER_FILL = PatternFill("solid", fgColor="1F2937")


def build_csv_bytes(headers, rows, delimiter=",", title=None) -> bytes:
    """UTF-8 with BOM so spreadsheet apps pick the right encoding."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter)
    if title:
        writer.writerow([title] + [""] * (len(headers) - 1))
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return ("\ufeff" + buffer.getvalue()).encode("utf-8")


def _apply_sheet_style(ws, headers):
    ws.freeze_panes = "A2"
    ws.auto_filter.ref = f"A1:{get_column_letter(len(headers))}{ws.max_row}"
    ws.row_dimensions[1].height = 22
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = EXPORT_HEADER_FONT
        cell.fill = EXPORT_HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        ws.column_dimensions[get_column_letter(col_idx)].width = max(12, len(str(header)) + 4)


def build_xlsx_bytes(headers, rows, sheet_title="Export") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]
    ws.append(headers)
    for row in rows:
        ws.append(["" if value is None else value for value in row])
    _apply_sheet_style(ws, headers)

    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()
