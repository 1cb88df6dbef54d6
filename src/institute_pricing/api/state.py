"""
Shared API state: the session catalog and the services built around it.
"""
from typing import Optional

import structlog

from ..catalog.course_catalog import CourseCatalog
from ..config.settings import Settings, get_settings
from ..errors import BackendError
from ..services.backend_client import BackendClient
from ..services.document_service import DocumentService
from ..services.query_cache import QueryCache

logger = structlog.get_logger(__name__)

_service: Optional[DocumentService] = None
_catalog: Optional[CourseCatalog] = None


def get_service() -> DocumentService:
    """Document service bound to the configured backend."""
    global _service
    if _service is None:
        settings = get_settings()
        client = BackendClient(settings.backend_url, timeout=settings.request_timeout)
        _service = DocumentService(client, QueryCache(), settings)
    return _service


def load_catalog(settings: Settings) -> CourseCatalog:
    """Local catalog export if present, otherwise the backend's course list."""
    if settings.catalog_path.exists():
        return CourseCatalog.from_file(settings.catalog_path)
    try:
        return get_service().load_catalog()
    except BackendError as e:
        logger.warning("catalog_unavailable", error=str(e))
        return CourseCatalog()


def get_catalog() -> CourseCatalog:
    global _catalog
    if _catalog is None:
        _catalog = load_catalog(get_settings())
    return _catalog
