"""
Pricing Calculator - Derived totals for quotations, proposals and invoices.

Every edit (add, remove, quantity, course selection, discount) is followed
by a full synchronous recompute:
- line_total = round(quantity × unit_rate, 2) for every item
- subtotal per the document kind's rounding policy
- applied discount clamped by the kind's discount policy
- final_amount = max(0, subtotal − applied discount)

Unit rates are snapshots taken from the catalog when a course is selected;
recompute never consults the catalog.
"""
from typing import Optional

import structlog

from ..config.settings import Settings, get_settings
from ..errors import ItemIndexError, UnitNotFoundError
from ..utils.numbers import coerce_number, coerce_quantity
from .discount_policy import DiscountPolicy
from .models import LineItem, PricingDocument, Totals

logger = structlog.get_logger(__name__)


def compute_totals(
    items: list[LineItem],
    discount: float,
    policy: DiscountPolicy,
    rounding: str = 'per_line',
) -> Totals:
    """
    Compute derived amounts for ``items`` without mutating them.

    ``rounding='per_line'`` sums line totals already rounded to the currency
    precision; ``rounding='subtotal'`` sums full-precision products and
    rounds once.
    """
    precision = policy.precision

    if rounding == 'per_line':
        subtotal = sum(round(item.quantity * item.unit_rate, precision) for item in items)
    elif rounding == 'subtotal':
        subtotal = sum(item.quantity * item.unit_rate for item in items)
    else:
        raise ValueError(f"Unknown rounding policy '{rounding}'")
    subtotal = round(subtotal, precision)

    applied = policy.apply(discount, subtotal)
    final_amount = max(0.0, round(subtotal - applied, precision))

    return Totals(
        subtotal=subtotal,
        discount=discount,
        applied_discount=applied,
        final_amount=final_amount,
    )


class PricingCalculator:
    """
    Keeps one document's derived fields consistent with its inputs.

    The catalog is read-only for the session; ``refresh_catalog`` swaps it
    for a refetched one without touching rates already on the document.
    """

    def __init__(self, document: PricingDocument, catalog, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.document = document
        self.catalog = catalog
        self.policy = DiscountPolicy(
            mode=document.discount_mode,
            max_percent=self.settings.max_discount_percent,
            precision=self.settings.precision,
        )
        self.recompute()

    @classmethod
    def new(cls, kind: str, catalog, settings: Optional[Settings] = None) -> 'PricingCalculator':
        """Start an empty document of ``kind``."""
        return cls(PricingDocument(kind=kind), catalog, settings)

    def _check_index(self, index) -> int:
        size = len(self.document.items)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
            raise ItemIndexError(index, size)
        return index

    def refresh_catalog(self, catalog):
        """Use a refetched catalog for future selections."""
        self.catalog = catalog

    def add_item(self, unit_id, quantity=1) -> Optional[LineItem]:
        """
        Append a line item for ``unit_id`` with its current catalog rate.

        Returns None and leaves the document unchanged when the unit cannot
        be resolved.
        """
        try:
            unit = self.catalog.resolve(unit_id)
        except UnitNotFoundError as e:
            logger.warning("unit_unresolved", kind=self.document.kind, unit_id=unit_id)
            self.document.add_notice(str(e))
            return None

        item = LineItem(
            unit_id=unit.id,
            quantity=coerce_quantity(quantity) or 1,
            unit_rate=unit.fee,
            description=unit.name,
            duration=unit.duration,
        )
        self.document.items.append(item)
        self.recompute()
        return item

    def remove_item(self, index: int) -> LineItem:
        """Remove and return the item at ``index``."""
        index = self._check_index(index)
        item = self.document.items.pop(index)
        self.recompute()
        return item

    def set_item_quantity(self, index: int, quantity) -> int:
        """
        Set the head count of an item.

        Values that do not parse to a whole number >= 1 keep the previous
        quantity. Returns the quantity now on the item.
        """
        item = self.document.items[self._check_index(index)]
        parsed = coerce_quantity(quantity)
        if parsed is None:
            logger.debug("quantity_rejected", index=index, value=quantity, kept=item.quantity)
        else:
            item.quantity = parsed
        self.recompute()
        return item.quantity

    def select_unit(self, index: int, unit_id) -> bool:
        """
        Point an item at another course, snapshotting that course's rate.

        Returns False and leaves the item untouched when the unit cannot be
        resolved.
        """
        item = self.document.items[self._check_index(index)]
        try:
            unit = self.catalog.resolve(unit_id)
        except UnitNotFoundError as e:
            logger.warning("unit_unresolved", kind=self.document.kind, unit_id=unit_id)
            self.document.add_notice(str(e))
            self.recompute()
            return False

        item.unit_id = unit.id
        item.unit_rate = unit.fee
        item.description = unit.name
        item.duration = unit.duration
        self.recompute()
        return True

    def set_discount(self, value) -> float:
        """
        Set the discount in the document's mode.

        Empty input clears it to 0; unparseable input keeps the previous
        value. Percent discounts above the maximum are reduced with a notice;
        absolute discounts are capped at the subtotal. Returns the stored
        discount.
        """
        number = coerce_number(value, fallback=None)
        if number is None:
            logger.debug("discount_rejected", value=value, kept=self.document.discount)
        else:
            clamped, notice = self.policy.clamp(number, self.document.subtotal)
            self.document.discount = clamped
            if notice:
                self.document.add_notice(notice)
        self.recompute()
        return self.document.discount

    def recompute(self) -> Totals:
        """Recompute every derived field from the current inputs."""
        doc = self.document
        precision = self.policy.precision

        for item in doc.items:
            item.line_total = round(item.quantity * item.unit_rate, precision)

        totals = compute_totals(doc.items, doc.discount, self.policy, doc.rounding)
        doc.subtotal = totals.subtotal
        doc.applied_discount = totals.applied_discount
        doc.final_amount = totals.final_amount
        return totals
