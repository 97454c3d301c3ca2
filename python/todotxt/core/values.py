"""Typed extension values -- coercion from raw tokens and rendering back.

A raw ``key:value`` token is coerced by trying, in order:

1. calendar date ``YYYY-MM-DD``
2. boolean keyword (``true/false``, ``yes/no``, ``y/n``, ``on/off``)
3. integer ``-?[0-9]+``
4. float ``-?[0-9]*.[0-9]+``
5. comma list (segments coerced with rules 1-4 and 6)
6. plain string

Rendering mirrors the chain: dates as ``YYYY-MM-DD``, booleans lower-case,
lists comma-joined, everything else via ``str``.
"""

from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import Any, Callable, Union

from .errors import DateError

TypedValue = Union[date, bool, int, float, str, list]


class ValueKind(Enum):
    DATE = "date"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    OTHER = "other"


_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_INT_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?[0-9]*\.[0-9]+")

_BOOLEANS: dict[str, bool] = {
    "true": True,
    "false": False,
    "yes": True,
    "no": False,
    "y": True,
    "n": False,
    "on": True,
    "off": False,
}

# Ordering between values of different kinds
_KIND_RANK: dict[ValueKind, int] = {
    ValueKind.DATE: 0,
    ValueKind.BOOLEAN: 1,
    ValueKind.INTEGER: 2,
    ValueKind.FLOAT: 2,
    ValueKind.STRING: 3,
    ValueKind.LIST: 4,
    ValueKind.OTHER: 5,
}

_NUMERIC = (ValueKind.INTEGER, ValueKind.FLOAT)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def is_date_token(text: str) -> bool:
    """True if text has the ``YYYY-MM-DD`` shape (calendar validity not checked)."""
    return _DATE_RE.fullmatch(text) is not None


def parse_date(text: str) -> date | None:
    """Parse ``YYYY-MM-DD`` into a date, or None if not a real calendar day."""
    m = _DATE_RE.fullmatch(text)
    if m is None:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """Render a date as ``YYYY-MM-DD``.

    Raises DateError for anything that is not a date.
    """
    if not isinstance(value, date):
        raise DateError(f"Invalid date object: {value!r}", repr(value))
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

def parse_list(text: str) -> list[str]:
    """Split on commas, trim each segment, drop empty ones."""
    return [item.strip() for item in text.split(",") if item.strip()]


def coerce(token: str) -> TypedValue:
    """Convert a raw token into a typed value using the default chain."""
    if "," in token:
        return [_coerce_scalar(item) for item in parse_list(token)]
    return _coerce_scalar(token)


def _coerce_scalar(token: str) -> TypedValue:
    parsed_date = parse_date(token)
    if parsed_date is not None:
        return parsed_date
    lower = token.lower()
    if lower in _BOOLEANS:
        return _BOOLEANS[lower]
    if _INT_RE.fullmatch(token):
        return int(token)
    if _FLOAT_RE.fullmatch(token):
        return float(token)
    return token


def render(value: Any) -> str:
    """Convert a typed value back into its token text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return format_date(value)
    if isinstance(value, (list, tuple)):
        return ",".join(render(item) for item in value)
    return str(value)


# ---------------------------------------------------------------------------
# Kind tagging, equality, ordering
# ---------------------------------------------------------------------------

def kind_of(value: Any) -> ValueKind:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, date):
        return ValueKind.DATE
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    return ValueKind.OTHER


def values_equal(a: Any, b: Any) -> bool:
    """Kind-aware equality: ``True`` never equals ``1``, lists compare elementwise."""
    ka, kb = kind_of(a), kind_of(b)
    if ka != kb:
        return False
    if ka == ValueKind.LIST:
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    return a == b


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison across the value kinds.

    Same-kind values compare natively, integers and floats compare
    numerically, and values of different kinds order by kind.
    """
    ka, kb = kind_of(a), kind_of(b)
    if ka in _NUMERIC and kb in _NUMERIC:
        return _cmp(a, b)
    if ka != kb:
        return _cmp(_KIND_RANK[ka], _KIND_RANK[kb])
    if ka == ValueKind.LIST:
        for x, y in zip(a, b):
            result = compare_values(x, y)
            if result != 0:
                return result
        return _cmp(len(a), len(b))
    if ka == ValueKind.OTHER:
        return _cmp(str(a), str(b))
    return _cmp(a, b)


def unique_values(items: list) -> list:
    """Drop repeated values, keeping the first occurrence of each."""
    result: list = []
    for item in items:
        if not any(values_equal(item, seen) for seen in result):
            result.append(item)
    return result


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


# ---------------------------------------------------------------------------
# Named strategies (used by configuration to type a key)
# ---------------------------------------------------------------------------

def _strict_date(text: str) -> date:
    parsed = parse_date(text)
    if parsed is None:
        raise ValueError(f"not a calendar date: {text!r}")
    return parsed


def _strict_bool(text: str) -> bool:
    lower = text.lower()
    if lower not in _BOOLEANS:
        raise ValueError(f"not a boolean keyword: {text!r}")
    return _BOOLEANS[lower]


def _typed_list(text: str) -> list:
    return [_coerce_scalar(item) for item in parse_list(text)]


STRATEGIES: dict[str, Callable[[str], Any]] = {
    "date": _strict_date,
    "bool": _strict_bool,
    "int": int,
    "float": float,
    "list": _typed_list,
    "str": str,
}
