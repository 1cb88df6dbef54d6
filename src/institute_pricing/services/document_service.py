"""
Document Service - Catalog loading, listing and submitting priced documents.

Reads go through the injected QueryCache; writes invalidate the list they
change. A failed submit leaves the in-memory document exactly as it was.
"""
from typing import Optional

import structlog

from ..catalog.course_catalog import CourseCatalog
from ..config.settings import Settings, get_policy, get_settings
from ..engine.calculator import PricingCalculator
from ..engine.models import PricingDocument
from ..errors import ValidationFailed
from ..schemas.documents import build_payload
from .backend_client import BackendClient
from .query_cache import QueryCache

logger = structlog.get_logger(__name__)

COURSES_KEY = '/api/courses'


class DocumentService:
    """Service for creating and managing quotations, proposals and invoices."""

    def __init__(self, client: BackendClient, cache: QueryCache, settings: Optional[Settings] = None):
        self.client = client
        self.cache = cache
        self.settings = settings or get_settings()

    def load_catalog(self) -> CourseCatalog:
        """Course catalog for this session (fetched once, then cached)."""
        return self.cache.fetch(
            COURSES_KEY,
            lambda: CourseCatalog.from_records(self.client.get(COURSES_KEY) or []),
        )

    def refresh_catalog(self) -> CourseCatalog:
        """Drop the cached catalog and fetch it again."""
        self.cache.invalidate(COURSES_KEY)
        return self.load_catalog()

    def new_calculator(self, kind: str) -> PricingCalculator:
        """Empty document of ``kind`` wired to the session catalog."""
        return PricingCalculator.new(kind, self.load_catalog(), self.settings)

    def list_documents(self, kind: str) -> list[dict]:
        endpoint = get_policy(kind).endpoint
        return self.cache.fetch(endpoint, lambda: self.client.get(endpoint) or [])

    def submit(self, document: PricingDocument, details: Optional[dict] = None) -> dict:
        """
        Validate and create ``document`` on the backend.

        Raises ValidationFailed before any request when the document has no
        items or a header field is missing; BackendError when the backend
        rejects it.
        """
        payload = build_payload(document, details)
        endpoint = get_policy(document.kind).endpoint

        created = self.client.post(endpoint, payload.to_request_body())
        self.cache.invalidate(endpoint)
        logger.info(
            "document_submitted",
            kind=document.kind,
            items=len(document.items),
            final_amount=document.final_amount,
        )
        return created

    def update_status(self, kind: str, doc_id: int, status: str) -> dict:
        """Move a stored document to another lifecycle status."""
        policy = get_policy(kind)
        if status not in policy.statuses:
            raise ValidationFailed([f"status: must be one of {', '.join(policy.statuses)}"])

        updated = self.client.patch(f"{policy.endpoint}/{doc_id}", {"status": status})
        self.cache.invalidate(policy.endpoint)
        logger.info("document_status_updated", kind=kind, id=doc_id, status=status)
        return updated
