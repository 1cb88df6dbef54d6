"""
Submit payloads: per-kind validation and the backend's wire shape.
"""
import json
from datetime import date, timedelta

import pytest

from institute_pricing.engine import PricingCalculator
from institute_pricing.errors import ValidationFailed
from institute_pricing.schemas.documents import InvoicePayload, ProposalPayload, QuotationPayload, build_payload


def _priced(kind, catalog, settings, items, discount=0):
    calc = PricingCalculator.new(kind, catalog, settings)
    for unit_id, qty in items:
        calc.add_item(unit_id, qty)
    calc.set_discount(discount)
    return calc.document


def test_quotation_request_body(catalog, settings, contact_details):
    doc = _priced('quotation', catalog, settings, [(1, 3), (2, 1)], discount=300)
    payload = build_payload(doc, contact_details)

    assert isinstance(payload, QuotationPayload)
    body = payload.to_request_body()
    header = body["quotation"]
    assert header["companyName"] == "Acme Logistics"
    assert header["totalAmount"] == "2700.00"
    assert header["discount"] == "300.00"
    assert header["finalAmount"] == "2400.00"
    assert header["status"] == "pending"
    assert header["validity"] == (date.today() + timedelta(days=30)).isoformat()
    assert "items" not in header

    assert body["items"][0] == {
        "courseId": 1,
        "duration": "1 day",
        "numberOfPersons": 3,
        "rate": 500.0,
        "total": 1500.0,
    }


def test_proposal_payload_lists_course_ids(catalog, settings, contact_details):
    doc = _priced('proposal', catalog, settings, [(4, 1), (2, 2)], discount=25)
    payload = build_payload(doc, contact_details)

    assert isinstance(payload, ProposalPayload)
    body = payload.to_request_body()
    assert body["courseIds"] == "4,2"
    assert body["discount"] == "20.00"
    assert body["totalAmount"] == "12400.00"
    assert body["finalAmount"] == "9920.00"
    assert body["status"] == "draft"
    assert body["date"] == date.today().isoformat()
    assert body["coverPage"] == "Professional Training Proposal"
    assert [s["title"] for s in json.loads(body["content"])][0] == "Introduction"


def test_invoice_payload_uses_amount(catalog, settings):
    doc = _priced('invoice', catalog, settings, [(2, 1)], discount=200)
    payload = build_payload(doc, {"student_id": 17, "payment_mode": "cash"})

    assert isinstance(payload, InvoicePayload)
    body = payload.to_request_body()
    assert body["studentId"] == 17
    assert body["amount"] == "1000.00"
    assert body["totalAmount"] == "1200.00"
    assert "finalAmount" not in body


def test_details_cannot_override_derived_amounts(catalog, settings, contact_details):
    doc = _priced('quotation', catalog, settings, [(1, 1)])
    details = dict(contact_details, totalAmount="1", final_amount=1, items=[])
    payload = build_payload(doc, details)
    assert payload.total_amount == 500
    assert payload.final_amount == 500
    assert len(payload.items) == 1


def test_camel_case_details_accepted(catalog, settings):
    doc = _priced('quotation', catalog, settings, [(1, 1)])
    payload = build_payload(doc, {
        "companyName": "Acme", "contactPerson": "Sam", "email": "sam@acmelogistics.com", "phone": "1",
    })
    assert payload.company_name == "Acme"


def test_missing_contact_fields_rejected(catalog, settings):
    doc = _priced('quotation', catalog, settings, [(1, 1)])
    with pytest.raises(ValidationFailed) as exc_info:
        build_payload(doc, {"company_name": "Acme", "email": "not-an-email"})
    message = str(exc_info.value)
    assert "contactPerson" in message
    assert "email" in message


def test_status_must_belong_to_kind(catalog, settings, contact_details):
    doc = _priced('quotation', catalog, settings, [(1, 1)])
    with pytest.raises(ValidationFailed, match="status must be one of"):
        build_payload(doc, dict(contact_details, status="paid"))


def test_empty_document_rejected_for_every_kind(catalog, settings, contact_details):
    details = dict(contact_details, student_id=1, payment_mode="upi")
    for kind in ('quotation', 'proposal', 'invoice'):
        doc = _priced(kind, catalog, settings, [])
        with pytest.raises(ValidationFailed) as exc_info:
            build_payload(doc, details)
        assert any(err.startswith("items") for err in exc_info.value.errors), kind
