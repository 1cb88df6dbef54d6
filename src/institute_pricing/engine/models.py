"""
Data models for the pricing calculator.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field
from typing import Optional

from ..config.settings import get_policy


@dataclass
class LineItem:
    """A single priced row: a catalog course, a head count and a snapshotted rate."""
    unit_id: int
    quantity: int = 1
    unit_rate: float = 0.0
    line_total: float = 0.0  # derived, owned by the calculator
    description: str = ""
    duration: str = ""


@dataclass
class Totals:
    """Derived amounts for a set of line items."""
    subtotal: float
    discount: float
    applied_discount: float
    final_amount: float


@dataclass
class PricingDocument:
    """A quotation, proposal or invoice line-item aggregate."""
    kind: str
    items: list[LineItem] = field(default_factory=list)
    discount: float = 0.0
    subtotal: float = 0.0
    applied_discount: float = 0.0
    final_amount: float = 0.0
    status: Optional[str] = None
    notices: list[str] = field(default_factory=list)

    def __post_init__(self):
        policy = get_policy(self.kind)
        if self.status is None:
            self.status = policy.default_status

    @property
    def discount_mode(self) -> str:
        return get_policy(self.kind).discount_mode

    @property
    def rounding(self) -> str:
        return get_policy(self.kind).rounding

    def add_notice(self, notice: str):
        """Add a user-visible notice, skipping repeats."""
        if notice not in self.notices:
            self.notices.append(notice)

    def clear_notices(self) -> list[str]:
        """Return pending notices and reset the list (toast-once semantics)."""
        pending, self.notices = self.notices, []
        return pending

    def to_dict(self) -> dict:
        """Convert to a plain dict (form-state shape, snake_case)."""
        return {
            "kind": self.kind,
            "status": self.status,
            "discount_mode": self.discount_mode,
            "items": [
                {
                    "unit_id": item.unit_id,
                    "description": item.description,
                    "duration": item.duration,
                    "quantity": item.quantity,
                    "unit_rate": item.unit_rate,
                    "line_total": item.line_total,
                }
                for item in self.items
            ],
            "subtotal": self.subtotal,
            "discount": self.discount,
            "applied_discount": self.applied_discount,
            "final_amount": self.final_amount,
            "notices": list(self.notices),
        }
