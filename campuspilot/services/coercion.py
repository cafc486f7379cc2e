"""
Loose numeric coercion for client-supplied values.

Follows JavaScript Number() semantics the web client was written against:
null and "" become 0, unparseable input becomes NaN and is stored as-is.
Results are kept BSON-encodable: integers outside the int64 range become
floats, as they would in JavaScript.
"""

import math
import re
from typing import Any, Union

Number = Union[int, float]

MISSING = object()

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# StrDecimalLiteral: no underscores, no "inf"/"nan" spellings
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INFINITY = re.compile(r"([+-]?)Infinity")
_PREFIXED = {
    "0x": (16, re.compile(r"[0-9a-fA-F]+")),
    "0o": (8, re.compile(r"[0-7]+")),
    "0b": (2, re.compile(r"[01]+")),
}


def _normalize(number: Number) -> Number:
    """Collapse integral values to int within int64, otherwise keep a float."""
    if isinstance(number, float):
        if number.is_integer() and INT64_MIN <= number <= INT64_MAX:
            return int(number)
        return number
    if INT64_MIN <= number <= INT64_MAX:
        return number
    return float(number)


def _parse_string(text: str) -> Number:
    text = text.strip()
    if not text:
        return 0
    infinity = _INFINITY.fullmatch(text)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf
    prefixed = _PREFIXED.get(text[:2].lower())
    if prefixed is not None:
        base, digits = prefixed
        if not digits.fullmatch(text[2:]):
            return math.nan
        return _normalize(int(text[2:], base))
    if not _DECIMAL.fullmatch(text):
        return math.nan
    return _normalize(float(text))


def to_number(value: Any = MISSING, default: Number = math.nan) -> Number:
    if value is MISSING:
        return default
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _normalize(value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        return _parse_string(value)
    return math.nan


def field_as_number(model: Any, field: str, default: Number = math.nan) -> Number:
    """Coerce a model field, distinguishing "not sent" from an explicit null."""
    if not model.was_sent(field):
        return default
    return to_number(getattr(model, field))
