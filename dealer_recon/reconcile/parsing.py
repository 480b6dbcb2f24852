"""Tolerant readers for weakly-typed backend payloads.

Backend records arrive in camelCase or snake_case, with numbers encoded
as numbers or strings, and with fields that may be missing entirely.
These helpers never raise on bad input: anything unreadable comes back
as ``None`` so callers can fall through to the next source.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

# Largest accepted magnitude is 10**15; anything bigger is a corrupt value
MAX_MONEY_EXPONENT = 15

_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S.%f", "%d/%m/%Y")


def pick(payload: Mapping[str, Any] | None, *keys: str) -> Any:
    """Return the first present, non-empty value among ``keys``."""
    if not payload:
        return None
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return value
    return None


def sub_object(payload: Mapping[str, Any] | None, *keys: str) -> Mapping[str, Any] | None:
    """Return the first nested mapping among ``keys``."""
    value = pick(payload, *keys)
    return value if isinstance(value, Mapping) else None


def parse_money(value: Any) -> Decimal | None:
    """Read a monetary amount.

    Accepts ints, floats, Decimals and numeric strings (thousands
    separators and whitespace are ignored). Booleans, NaN, infinities and
    magnitudes above ``10**MAX_MONEY_EXPONENT`` read as ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "").replace("_", "").replace(" ", "")
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    if not amount.is_finite() or (amount and amount.adjusted() > MAX_MONEY_EXPONENT):
        return None
    return amount


def parse_int(value: Any) -> int | None:
    """Read an integer id or count. Integral decimals like ``"12.0"`` are accepted."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    number = parse_money(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def parse_date(value: Any) -> date | None:
    """Read a calendar date from a date, datetime or string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def positive(amount: Decimal | None) -> bool:
    return amount is not None and amount > 0
