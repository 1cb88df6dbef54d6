"""
Discount Policy - Clamps and applies document discounts.

Percent mode (proposals) is capped at the configured maximum with a
notice; absolute mode (quotations, invoices) is capped at the subtotal.
"""
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

PERCENT = 'percent'
ABSOLUTE = 'absolute'


class DiscountPolicy:
    """
    Bounded discount for one document kind.

    ``clamp`` bounds the value the user entered; ``apply`` turns the stored
    discount into an amount against a subtotal.
    """

    def __init__(self, mode: str, max_percent: float = 20.0, precision: int = 2):
        if mode not in (PERCENT, ABSOLUTE):
            raise ValueError(f"Unknown discount mode '{mode}'")
        self.mode = mode
        self.max_percent = float(max_percent)
        self.precision = precision

    def clamp(self, value: float, subtotal: float) -> tuple[float, Optional[str]]:
        """
        Bound a discount to the policy range.

        Returns (clamped_value, notice). The notice is set only when a
        percent discount above the maximum was reduced.
        """
        value = max(0.0, float(value))

        if self.mode == PERCENT:
            if value > self.max_percent:
                logger.info("discount_clamped", mode=self.mode, requested=value, applied=self.max_percent)
                return self.max_percent, f"Maximum discount allowed is {self.max_percent:g}%"
            return value, None

        upper = max(0.0, float(subtotal))
        if value > upper:
            logger.info("discount_clamped", mode=self.mode, requested=value, applied=upper)
            return upper, None
        return value, None

    def apply(self, discount: float, subtotal: float) -> float:
        """Return the discount amount taken off ``subtotal``."""
        subtotal = max(0.0, float(subtotal))
        discount = max(0.0, float(discount))

        if self.mode == PERCENT:
            percent = min(discount, self.max_percent)
            return round(subtotal * percent / 100.0, self.precision)

        return round(min(discount, subtotal), self.precision)
