"""Coercion of user-entered numbers. Never raises, never returns NaN."""
import math
from typing import Optional


def coerce_number(value, fallback: Optional[float] = 0.0) -> Optional[float]:
    """
    Parse a user-entered number.

    Empty input is 0. Anything unparseable or non-finite returns ``fallback``.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        value = value.strip().replace(',', '')
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return number


def coerce_quantity(value) -> Optional[int]:
    """Parse a head count; ``None`` when it is not a whole number >= 1."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    quantity = int(number)
    if quantity < 1:
        return None
    return quantity
