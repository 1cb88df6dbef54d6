"""
PDF merge - Appends an uploaded attachment (e.g. a company profile) to a
generated document.
"""
import io
from dataclasses import dataclass
from typing import Optional

import structlog
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from ..errors import MergeError

logger = structlog.get_logger(__name__)


@dataclass
class MergeResult:
    """Outcome of a merge with fallback."""
    data: bytes
    merged: bool
    error: Optional[str] = None


def merge_pdfs(main: bytes, attachment: bytes) -> bytes:
    """Copy every page of ``main`` then every page of ``attachment`` into one PDF."""
    if not main:
        raise MergeError("Main document is empty")
    if not attachment:
        raise MergeError("Attachment is empty")

    writer = PdfWriter()
    try:
        for source in (main, attachment):
            reader = PdfReader(io.BytesIO(source))
            for page in reader.pages:
                writer.add_page(page)
        out = io.BytesIO()
        writer.write(out)
    except (PyPdfError, ValueError, OSError) as e:
        raise MergeError(f"Could not merge PDF documents: {e}") from e
    return out.getvalue()


def merge_with_fallback(main: bytes, attachment: Optional[bytes]) -> MergeResult:
    """
    Merge ``attachment`` after ``main``.

    Without an attachment, or when the merge fails, the main document is
    returned alone and ``merged`` is False.
    """
    if not attachment:
        return MergeResult(data=main, merged=False)

    try:
        return MergeResult(data=merge_pdfs(main, attachment), merged=True)
    except MergeError as e:
        logger.warning("pdf_merge_fallback", error=str(e))
        return MergeResult(data=main, merged=False, error=str(e))
