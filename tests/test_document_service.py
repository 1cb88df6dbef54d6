"""
Document service against a fake requests session.
"""
import json

import pytest
import requests

from institute_pricing.errors import BackendError, ValidationFailed
from institute_pricing.services.backend_client import BackendClient
from institute_pricing.services.document_service import DocumentService
from institute_pricing.services.query_cache import QueryCache

COURSES = [
    {"id": 1, "name": "Basic First Aid", "fee": "500.00", "duration": "1 day", "active": True},
    {"id": 2, "name": "Fire Safety", "fee": "1200.00", "duration": "2 days", "active": True},
]


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK", raw=None):
        self.status_code = status_code
        self.reason = reason
        if raw is not None:
            self.content = raw
        else:
            self.content = b"" if body is None else json.dumps(body).encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.content)


class FakeSession:
    """Records requests and answers from a {(method, path): response} table."""

    def __init__(self, routes=None, error=None):
        self.routes = routes or {}
        self.error = error
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        path = url.split('://', 1)[-1].split('/', 1)[-1]
        self.calls.append((method, '/' + path, json))
        if self.error:
            raise self.error
        return self.routes.get((method, '/' + path), FakeResponse(404, {"message": "Not found"}, reason="Not Found"))


def make_service(settings, routes=None, error=None):
    session = FakeSession(routes, error)
    client = BackendClient("http://backend.test", timeout=2, session=session)
    return DocumentService(client, QueryCache(), settings), session


def test_catalog_fetched_once_per_session(settings):
    service, session = make_service(settings, {('GET', '/api/courses'): FakeResponse(body=COURSES)})

    first = service.load_catalog()
    second = service.load_catalog()

    assert first is second
    assert first.rate_for(2) == 1200.0
    assert len(session.calls) == 1


def test_refresh_catalog_refetches(settings):
    service, session = make_service(settings, {('GET', '/api/courses'): FakeResponse(body=COURSES)})
    service.load_catalog()
    service.refresh_catalog()
    assert [c[0] for c in session.calls] == ['GET', 'GET']


def test_submit_posts_and_invalidates_list(settings, contact_details):
    routes = {
        ('GET', '/api/courses'): FakeResponse(body=COURSES),
        ('GET', '/api/quotations'): FakeResponse(body=[]),
        ('POST', '/api/quotations'): FakeResponse(201, {"id": 9, "quotationNumber": "QUOT-2026-009"}),
    }
    service, session = make_service(settings, routes)
    service.list_documents('quotation')
    assert '/api/quotations' in service.cache

    calc = service.new_calculator('quotation')
    calc.add_item(1, 2)
    calc.set_discount(100)
    created = service.submit(calc.document, contact_details)

    assert created["quotationNumber"] == "QUOT-2026-009"
    method, path, body = session.calls[-1]
    assert (method, path) == ('POST', '/api/quotations')
    assert body["quotation"]["finalAmount"] == "900.00"
    assert body["items"][0]["numberOfPersons"] == 2
    assert '/api/quotations' not in service.cache


def test_submit_empty_document_makes_no_request(settings, contact_details):
    service, session = make_service(settings, {('GET', '/api/courses'): FakeResponse(body=COURSES)})
    calc = service.new_calculator('proposal')
    calls_before = len(session.calls)

    with pytest.raises(ValidationFailed):
        service.submit(calc.document, contact_details)
    assert len(session.calls) == calls_before


def test_rejected_submit_leaves_document_untouched(settings, contact_details):
    routes = {
        ('GET', '/api/courses'): FakeResponse(body=COURSES),
        ('POST', '/api/quotations'): FakeResponse(400, {"message": "Duplicate quotation"}, reason="Bad Request"),
    }
    service, _ = make_service(settings, routes)
    calc = service.new_calculator('quotation')
    calc.add_item(2, 1)
    snapshot = calc.document.to_dict()

    with pytest.raises(BackendError) as exc_info:
        service.submit(calc.document, contact_details)

    assert exc_info.value.message == "Duplicate quotation"
    assert exc_info.value.status_code == 400
    assert calc.document.to_dict() == snapshot


def test_update_status_patches(settings):
    routes = {('PATCH', '/api/invoices/3'): FakeResponse(body={"id": 3, "status": "paid"})}
    service, session = make_service(settings, routes)
    service.cache.set('/api/invoices/3', {"id": 3, "status": "pending"})

    assert service.update_status('invoice', 3, 'paid')["status"] == "paid"
    assert session.calls[-1] == ('PATCH', '/api/invoices/3', {"status": "paid"})
    assert '/api/invoices/3' not in service.cache


def test_update_status_rejects_unknown_status(settings):
    service, session = make_service(settings)
    with pytest.raises(ValidationFailed):
        service.update_status('invoice', 3, 'sent')
    assert session.calls == []


def test_backend_error_falls_back_to_reason(settings):
    service, _ = make_service(settings, {('GET', '/api/proposals'): FakeResponse(500, raw=b"<html>", reason="Server Error")})
    with pytest.raises(BackendError, match="Server Error"):
        service.list_documents('proposal')


def test_unreachable_backend(settings):
    service, _ = make_service(settings, error=requests.ConnectionError("refused"))
    with pytest.raises(BackendError, match="Could not reach backend"):
        service.load_catalog()


def test_invalid_json_body(settings):
    service, _ = make_service(settings, {('GET', '/api/courses'): FakeResponse(raw=b"not json")})
    with pytest.raises(BackendError, match="Invalid JSON"):
        service.load_catalog()
