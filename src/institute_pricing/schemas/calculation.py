"""Request/response models for the pricing HTTP surface."""
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from .documents import CamelModel

Number = Union[int, float, str, None]


class CalculationItem(CamelModel):
    unit_id: int
    quantity: Number = 1


class CalculationRequest(CamelModel):
    """Replays a form's edits: items in order, then the discount."""
    kind: Literal['quotation', 'proposal', 'invoice']
    items: list[CalculationItem] = Field(default_factory=list)
    discount: Number = 0
    details: dict = Field(default_factory=dict)


class CalculatedItem(CamelModel):
    unit_id: int
    description: str
    duration: str
    quantity: int
    unit_rate: float
    line_total: float


class CalculationResponse(CamelModel):
    kind: str
    status: str
    discount_mode: str
    items: list[CalculatedItem]
    subtotal: float
    discount: float
    applied_discount: float
    final_amount: float
    notices: list[str] = Field(default_factory=list)
    currency: Optional[str] = None


class CatalogUnitOut(BaseModel):
    id: int
    name: str
    fee: float
    duration: str
    description: str
    active: bool
