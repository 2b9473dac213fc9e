"""Input/output stage components for Pagevoice.

This package contains document access, page range validation, rendering, text
extraction, and artifact storage used by the pipeline.
"""

from .document import PdfDocument, is_pdf_payload, open_document
from .page_range import validate_page_range
from .page_renderer import PageRenderer
from .pdf_text_extractor import PageTextExtractor
from .storage import ArtifactStore

__all__ = [
    "ArtifactStore",
    "PageRenderer",
    "PageTextExtractor",
    "PdfDocument",
    "is_pdf_payload",
    "open_document",
    "validate_page_range",
]
