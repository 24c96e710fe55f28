# backend/utils/money.py
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")
THOUSANDS_GROUPS = re.compile(r"^[+-]?\d{1,3}(,\d{3})+$")


def to_decimal(value) -> Decimal:
    """
    Strict conversion for amounts coming from the store or a payload.
    Floats go through str() so 12.1 stays 12.1 and not 12.0999999...
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not an amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not an amount: {value!r}") from exc
    else:
        raise ValueError(f"Not an amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not an amount: {value!r}")
    return result


def _normalize_separators(raw: str) -> str:
    if "," not in raw:
        return raw
    if "." in raw or THOUSANDS_GROUPS.match(raw):
        return raw.replace(",", "")
    return raw.replace(",", ".")


def parse_amount(value) -> Decimal:
    """
    Forgiving parse for hand-typed amounts: anything unreadable counts as zero.

    Spaces are ignored. A comma is a thousands separator when the value also
    has a dot ("1,250.50") or when it only splits groups of three digits
    ("1,000", "12,500,000"); otherwise it is the decimal mark ("1250,50").
    """
    if value in ("", None) or isinstance(value, bool):
        return ZERO
    if isinstance(value, (int, float, Decimal)):
        try:
            return to_decimal(value)
        except ValueError:
            return ZERO
    raw = _normalize_separators(str(value).strip().replace(" ", ""))
    match = re.match(r"[+-]?(\d+(\.\d*)?|\.\d+)", raw)
    if not match:
        return ZERO
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return ZERO


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    return str(quantize(value))


def json_number(value: Decimal):
    # JSON blobs keep amounts numeric: whole values as int, the rest as float
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def is_json_number(value) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)
