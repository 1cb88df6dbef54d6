"""
Exception types raised by the pricing tool.

Discount policy violations are not errors: they are clamped and reported
as notices on the document.
"""
from typing import Optional


class PricingError(Exception):
    """Base class for all pricing tool errors."""


class UnitNotFoundError(PricingError, KeyError):
    """A catalog unit could not be resolved to a rate."""

    def __init__(self, unit_id):
        self.unit_id = unit_id
        super().__init__(f"Catalog unit '{unit_id}' not found")

    def __str__(self) -> str:
        return self.args[0]


class ItemIndexError(PricingError, IndexError):
    """A line item index is out of range."""

    def __init__(self, index, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Line item {index} out of range (document has {size} items)")


class ValidationFailed(PricingError):
    """A document failed validation at the submit boundary."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class BackendError(PricingError):
    """The backend collaborator rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message if status_code is None else f"[{status_code}] {message}")


class MergeError(PricingError):
    """Two PDF documents could not be merged."""
