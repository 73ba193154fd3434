"""
Scalar validators used by the chain decoder.

Each validator takes a raw JSON value and either returns the typed value or
raises ``PrimitiveError`` carrying the issue kind. They have no side effects;
the decoders catch the error and record it at the field path being decoded.
"""

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

from .results import ErrorKind

# Matched with fullmatch; ASCII digits only.
DATE_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")

# RFC 3339 section 5.6; the offset is mandatory.
DATETIME_PATTERN = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt ]([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?"
    r"(?:([Zz])|([+-])([0-9]{2}):([0-9]{2}))"
)


class PrimitiveError(ValueError):
    """A scalar failed validation."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


def json_type_name(value: Any) -> str:
    """Name of the JSON kind of a raw value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def require_string(value: Any, non_empty: bool = True) -> str:
    if not isinstance(value, str):
        raise PrimitiveError(ErrorKind.TYPE_MISMATCH, f"expected string, got {json_type_name(value)}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        # JSON \u escapes can produce lone surrogates.
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"not valid Unicode text at index {e.start}")
    if non_empty and not value.strip():
        raise PrimitiveError(ErrorKind.INVALID_VALUE, "must be a non-empty string")
    return value


def require_finite_number(value: Any) -> float:
    if not is_number(value):
        raise PrimitiveError(ErrorKind.TYPE_MISMATCH, f"expected number, got {json_type_name(value)}")
    try:
        number = float(value)
    except OverflowError:
        raise PrimitiveError(ErrorKind.INVALID_VALUE, "number is too large to represent")
    if not math.isfinite(number):
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"must be finite, got {value}")
    return number


def require_non_negative_number(value: Any) -> float:
    number = require_finite_number(value)
    if number < 0:
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"must be >= 0, got {number}")
    return number


def require_positive_number(value: Any) -> float:
    number = require_finite_number(value)
    if number <= 0:
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"must be > 0, got {number}")
    return number


def require_non_negative_integer(value: Any) -> int:
    """
    Validate a JSON integer that must be >= 0.

    JSON numbers written with a fraction or exponent (``10.0``, ``1e3``) are
    parsed as floats and rejected as a type mismatch: sizes, volume and open
    interest are integers on the wire.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise PrimitiveError(ErrorKind.TYPE_MISMATCH, f"expected integer, got {json_type_name(value)}")
    if value < 0:
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"must be >= 0, got {value}")
    return value


def require_date(value: Any) -> date:
    """Validate a ``YYYY-MM-DD`` calendar date."""
    text = require_string(value, non_empty=False)
    match = DATE_PATTERN.fullmatch(text)
    if not match:
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"expected date as YYYY-MM-DD, got {text!r}")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"invalid calendar date {text!r}: {e}")


def require_datetime(value: Any) -> datetime:
    """Validate an RFC 3339 timestamp and return an aware datetime."""
    text = require_string(value, non_empty=False)
    match = DATETIME_PATTERN.fullmatch(text)
    if not match:
        raise PrimitiveError(
            ErrorKind.INVALID_VALUE,
            f"expected RFC 3339 date-time with offset, got {text!r}"
        )

    (year, month, day, hour, minute, second,
     fraction, zulu, sign, offset_hours, offset_minutes) = match.groups()

    # Sub-microsecond digits are dropped.
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))

    try:
        if zulu:
            tz = timezone.utc
        else:
            offset = timedelta(hours=int(offset_hours), minutes=int(offset_minutes))
            if int(offset_minutes) > 59 or offset >= timedelta(hours=24):
                raise ValueError("offset out of range")
            tz = timezone(-offset if sign == "-" else offset)
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second),
            microsecond, tzinfo=tz
        )
    except ValueError as e:
        raise PrimitiveError(ErrorKind.INVALID_VALUE, f"invalid date-time {text!r}: {e}")
