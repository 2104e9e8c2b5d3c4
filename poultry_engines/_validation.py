"""
Input coercion and validation shared by all engine functions.

Every raw amount or count passes through these helpers before any
arithmetic, so engines only ever see Decimal money/bags and int counts.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from poultry_kernel.exceptions import InvalidQuantityError, MissingFieldError


def as_decimal(value: Any, field: str) -> Decimal:
    """Coerce int/str/Decimal (or float via its repr) into a finite Decimal."""
    if value is None:
        raise MissingFieldError(field)
    if isinstance(value, bool):
        raise InvalidQuantityError(field, value, "must be a number")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidQuantityError(field, value, "must be a number") from None
    if not result.is_finite():
        raise InvalidQuantityError(field, value, "must be finite")
    return result


def require_positive(value: Any, field: str) -> Decimal:
    result = as_decimal(value, field)
    if result <= 0:
        raise InvalidQuantityError(field, value, "must be greater than zero")
    return result


def require_non_negative(value: Any, field: str) -> Decimal:
    result = as_decimal(value, field)
    if result < 0:
        raise InvalidQuantityError(field, value, "must not be negative")
    return result


def require_count(value: Any, field: str, *, positive: bool = False) -> int:
    """Whole-number counts (eggs, birds, Peti)."""
    if value is None:
        raise MissingFieldError(field)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuantityError(field, value, "must be a whole number")
    if positive and value <= 0:
        raise InvalidQuantityError(field, value, "must be greater than zero")
    if value < 0:
        raise InvalidQuantityError(field, value, "must not be negative")
    return value


def require_text(value: Any, field: str) -> str:
    if value is None or not str(value).strip():
        raise MissingFieldError(field)
    return str(value).strip()
