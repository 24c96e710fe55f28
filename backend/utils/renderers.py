# backend/utils/renderers.py
import json

from rest_framework.renderers import BaseRenderer

from .exports import build_csv_bytes, build_xlsx_bytes


def _is_table(data):
    return isinstance(data, dict) and "headers" in data and "rows" in data


def _fallback(data):
    # error payloads (detail/code dicts) still reach the client readable
    if isinstance(data, (dict, list)):
        return json.dumps(data, default=str).encode("utf-8")
    return str(data).encode("utf-8")


class TableRenderer(BaseRenderer):
    """
    Renders ``{"headers": [...], "rows": [[...]], "title": "..."}`` payloads
    into a file. Pre-built bytes pass through untouched.
    """

    def build(self, table):
        raise NotImplementedError

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if data is None:
            return b""
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        if _is_table(data):
            return self.build(data)
        return _fallback(data)


class XLSXRenderer(TableRenderer):
    media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    format = "xlsx"
    charset = None  # binary

    def build(self, table):
        return build_xlsx_bytes(table["headers"], table["rows"], sheet_title=table.get("title") or "Export")


class CSVRenderer(TableRenderer):
    media_type = "text/csv"
    format = "csv"
    charset = "utf-8"

    def build(self, table):
        return build_csv_bytes(table["headers"], table["rows"])
