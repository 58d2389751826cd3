"""Decimal helpers for deterministic money handling and output."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any, Optional

__all__ = ["to_decimal", "money", "format_price", "format_amount", "parse_amount"]

_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP, traps=[])
_CENT = Decimal("0.01")
_THOUSANDS = re.compile(r"\B(?=(\d{3})+(?!\d))")
_SPACES = re.compile(r"\s")


def to_decimal(value: Any) -> Decimal:
    """Convert ints, floats and numeric strings to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    return _CONTEXT.create_decimal(str(value))


def money(value: Any) -> Decimal:
    """Round a currency amount to 2 places using ROUND_HALF_UP."""
    return to_decimal(value).quantize(_CENT, context=_CONTEXT)


def format_price(value: Any) -> str:
    """Format a row price: 2 decimals, with a trailing '.00' stripped."""
    text = str(money(value))
    if text.endswith(".00"):
        return text[:-3]
    return text


def format_amount(value: Any) -> str:
    """Format an amount for reports, e.g. ``12 345.50`` or ``730``."""
    text = format_price(value)
    whole, _, fraction = text.partition(".")
    whole = _THOUSANDS.sub(" ", whole)
    return f"{whole}.{fraction}" if fraction else whole


def parse_amount(text: Optional[str]) -> Optional[Decimal]:
    """Parse a rendered price cell such as '1 234,50'; None when not a number."""
    if text is None:
        return None
    value = _SPACES.sub("", str(text)).replace(",", ".")
    if not value:
        return None
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed
