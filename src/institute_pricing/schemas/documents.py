"""
Submit payloads per document kind.

Validated once at the boundary and serialized the way the backend stores
them: camelCase keys, money columns as strings.
"""
import json
from datetime import date, timedelta
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_serializer, model_validator
from pydantic.alias_generators import to_camel

from ..config.settings import get_policy
from ..engine.models import PricingDocument
from ..errors import ValidationFailed

DEFAULT_COVER_PAGE = "Professional Training Proposal"

DEFAULT_PROPOSAL_SECTIONS = [
    {"title": "Introduction", "text": "This proposal outlines the training services offered by the institute."},
    {"title": "Training Overview", "text": "Our training program is designed to meet your team's objectives."},
    {"title": "Methodology", "text": "We employ interactive and hands-on training methods."},
    {"title": "Delivery Timeline", "text": "The training will be scheduled with your team."},
    {"title": "Investment", "text": "The investment for this training program is detailed below."},
]

# Keys owned by the calculator; never taken from header details
DERIVED_KEYS = {
    'total_amount', 'totalAmount', 'discount', 'final_amount', 'finalAmount',
    'amount', 'items', 'course_ids', 'courseIds',
}


def _default_validity() -> date:
    return date.today() + timedelta(days=30)


def _money(value: float) -> str:
    return f"{value:.2f}"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class ItemPayload(CamelModel):
    """One line item as stored by the backend."""
    course_id: int = Field(ge=1)
    duration: str = ""
    number_of_persons: int = Field(ge=1)
    rate: float = Field(ge=0)
    total: float = Field(ge=0)


class DocumentPayload(CamelModel):
    """Fields shared by every priced document."""
    kind: ClassVar[str] = ""
    final_field: ClassVar[str] = "final_amount"

    status: str
    total_amount: float = Field(ge=0)
    discount: float = Field(default=0.0, ge=0)
    items: list[ItemPayload] = Field(min_length=1)

    @model_validator(mode='after')
    def _check_status(self):
        allowed = get_policy(self.kind).statuses
        if self.status not in allowed:
            raise ValueError(f"status must be one of: {', '.join(allowed)}")
        return self

    @field_serializer('total_amount', 'discount')
    def _serialize_money(self, value: float) -> str:
        return _money(value)

    def header(self) -> dict:
        """Serialized fields without the items."""
        return self.model_dump(mode='json', by_alias=True, exclude={'items'})

    def to_request_body(self) -> dict:
        """Body for the backend's create endpoint."""
        return self.model_dump(mode='json', by_alias=True)


class ContactFields(CamelModel):
    company_name: str = Field(min_length=1)
    contact_person: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)


class QuotationPayload(DocumentPayload, ContactFields):
    kind: ClassVar[str] = "quotation"

    final_amount: float = Field(ge=0)
    validity: date = Field(default_factory=_default_validity)

    @field_serializer('final_amount')
    def _serialize_final(self, value: float) -> str:
        return _money(value)

    def to_request_body(self) -> dict:
        items = [item.model_dump(mode='json', by_alias=True) for item in self.items]
        return {"quotation": self.header(), "items": items}


class ProposalPayload(DocumentPayload, ContactFields):
    kind: ClassVar[str] = "proposal"

    final_amount: float = Field(ge=0)
    course_ids: str = Field(min_length=1)
    cover_page: str = Field(default=DEFAULT_COVER_PAGE, min_length=1)
    content: Optional[str] = Field(default_factory=lambda: json.dumps(DEFAULT_PROPOSAL_SECTIONS))
    proposal_date: date = Field(default_factory=date.today, alias="date")
    trainer_id: Optional[int] = None

    @field_serializer('final_amount')
    def _serialize_final(self, value: float) -> str:
        return _money(value)


class InvoicePayload(DocumentPayload):
    kind: ClassVar[str] = "invoice"
    final_field: ClassVar[str] = "amount"

    student_id: int = Field(ge=1)
    amount: float = Field(ge=0)
    payment_mode: Literal['cash', 'upi', 'bank_transfer', 'cheque', 'card']
    transaction_id: Optional[str] = None
    payment_date: date = Field(default_factory=date.today)
    invoice_number: Optional[str] = None

    @field_serializer('amount')
    def _serialize_amount(self, value: float) -> str:
        return _money(value)


PAYLOAD_TYPES: dict[str, type[DocumentPayload]] = {
    'quotation': QuotationPayload,
    'proposal': ProposalPayload,
    'invoice': InvoicePayload,
}


def format_validation_errors(error: ValidationError) -> list[str]:
    """Flatten pydantic errors into 'field: message' strings."""
    messages = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get('loc', ())) or "document"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return messages


def build_payload(document: PricingDocument, details: Optional[dict] = None) -> DocumentPayload:
    """
    Combine calculator output with header details into a validated payload.

    Raises ValidationFailed when a required header field is missing or the
    document has no items.
    """
    model = PAYLOAD_TYPES[document.kind]

    data = {k: v for k, v in (details or {}).items() if k not in DERIVED_KEYS}
    data.setdefault('status', document.status)
    data['total_amount'] = document.subtotal
    data['discount'] = document.discount
    data[model.final_field] = document.final_amount
    data['items'] = [
        {
            'course_id': item.unit_id,
            'duration': item.duration,
            'number_of_persons': item.quantity,
            'rate': item.unit_rate,
            'total': item.line_total,
        }
        for item in document.items
    ]
    if model is ProposalPayload:
        data['course_ids'] = ",".join(str(item.unit_id) for item in document.items)

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(format_validation_errors(e)) from e
