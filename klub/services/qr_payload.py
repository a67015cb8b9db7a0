"""
Table QR payloads.

Two payload shapes identify a restaurant table:

    klub://restaurant/{restaurant_id}/table/{table_number}
    https://host/scan?restaurant={restaurant_id}&table={table_number}

The first is what printed codes carry; the second is the web link the
frontend opens when the code is scanned with a phone camera.
"""
import re
from typing import NamedTuple
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

from klub.core.config import settings
from klub.core.exceptions import InvalidPayload

WEB_SCHEMES = ("http", "https")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


class TableRef(NamedTuple):
    restaurant_id: str
    table_number: int


def encode(restaurant_id, table_number: int, scheme: str | None = None) -> str:
    """Build the custom-scheme payload printed on a table code."""
    scheme = scheme or settings.QR_SCHEME
    _check_table_number(table_number)
    return f"{scheme}://restaurant/{quote(str(restaurant_id), safe='')}/table/{table_number}"


def encode_scan_url(restaurant_id, table_number: int, base_url: str | None = None) -> str:
    """Build the web scan URL for a table."""
    base_url = (base_url or settings.FRONTEND_URL).rstrip("/")
    _check_table_number(table_number)
    query = urlencode({"restaurant": str(restaurant_id), "table": table_number})
    return f"{base_url}/scan?{query}"


def decode(payload: str) -> TableRef:
    """Decode a scanned payload into a table reference.

    Raises:
        InvalidPayload: the payload is not a URI, matches neither shape,
            misses a field, or carries a non-integer table number.
    """
    if not isinstance(payload, str) or not payload.strip():
        raise InvalidPayload(details="Empty payload")

    try:
        parts = urlsplit(payload.strip())
    except ValueError as e:
        raise InvalidPayload(details=str(e)) from e

    scheme = parts.scheme.lower()
    if not scheme or not re.match(r"^[a-z][a-z0-9+.-]*$", scheme):
        raise InvalidPayload(details="Payload is not a URI")

    if scheme in WEB_SCHEMES:
        return _decode_web_url(parts)
    return _decode_custom_scheme(parts)


def _decode_custom_scheme(parts) -> TableRef:
    # In scheme://restaurant/R/table/N the first segment lands in netloc
    segments = [s for s in [parts.netloc, *parts.path.split("/")] if s]
    if len(segments) != 4 or segments[0] != "restaurant" or segments[2] != "table":
        raise InvalidPayload(details="Expected restaurant/{id}/table/{number}")

    return TableRef(
        restaurant_id=unquote(segments[1]),
        table_number=_parse_table_number(segments[3]),
    )


def _decode_web_url(parts) -> TableRef:
    if not parts.netloc:
        raise InvalidPayload(details="URL has no host")

    params = parse_qs(parts.query)
    restaurant = params.get("restaurant", [""])[0]
    table = params.get("table", [""])[0]
    if not restaurant or not table:
        raise InvalidPayload(details="Missing restaurant or table parameter")

    return TableRef(restaurant_id=restaurant, table_number=_parse_table_number(table))


def _parse_table_number(raw: str) -> int:
    if not _INTEGER_RE.match(raw):
        raise InvalidPayload("Invalid table number", details=raw)
    table_number = int(raw, 10)
    if table_number <= 0:
        raise InvalidPayload("Invalid table number", details=raw)
    return table_number


def _check_table_number(table_number: int) -> None:
    if isinstance(table_number, bool) or not isinstance(table_number, int) or table_number <= 0:
        raise InvalidPayload("Invalid table number", details=str(table_number))
