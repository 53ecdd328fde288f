"""Content checksum used to detect divergence between versions.

Not a security primitive. The checksum is a 32-bit rolling hash
(``h = h * 31 + unit``) over the UTF-16 code units of a compact JSON
rendering of the document, returned as base-36 text.
"""

import json
import math
from collections.abc import Mapping
from typing import Any

# Bookkeeping fields that change on every write and must not affect the hash
HASH_EXCLUDED_FIELDS: frozenset[str] = frozenset({"versioning", "updatedAt", "updatedBy"})

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _js_numbers(value: Any) -> Any:
    """Render floats the way JSON.stringify does: 1.0 as 1, NaN and infinities as null."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, Mapping):
        return {key: _js_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_js_numbers(item) for item in value]
    return value


def canonical_json(value: Any, *, sort_keys: bool = False) -> str:
    """Compact JSON text. Non-JSON values (datetimes, etc.) render via str()."""
    return json.dumps(
        _js_numbers(value),
        separators=(",", ":"),
        ensure_ascii=False,
        sort_keys=sort_keys,
        default=str,
    )


def hashable_content(content: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow copy of content without bookkeeping fields, top-level keys sorted."""
    return {key: content[key] for key in sorted(content) if key not in HASH_EXCLUDED_FIELDS}


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def rolling_hash(text: str) -> int:
    """Signed 32-bit ``h * 31 + c`` hash over UTF-16 code units."""
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32((h << 5) - h + unit)
    return h


def calculate_hash(content: Mapping[str, Any]) -> str:
    """Return the base-36 content checksum for a document."""
    # Only the top level is sorted; nested objects keep insertion order
    text = canonical_json(hashable_content(content))
    return _to_base36(abs(rolling_hash(text)))
