"""Unit tests for in-memory PDF document access."""

from collections.abc import Callable

import pytest

from pagevoice.errors import DocumentFailure, PipelineError
from pagevoice.io.document import is_pdf_payload, open_document


def test_is_pdf_payload_detects_header_near_start() -> None:
    """The PDF signature should be recognized within the leading bytes."""

    assert is_pdf_payload(b"%PDF-1.7\n...") is True
    assert is_pdf_payload(b"\x00" * 100 + b"%PDF-1.4") is True
    assert is_pdf_payload(b"\x00" * 2048 + b"%PDF-1.4") is False
    assert is_pdf_payload(b"PK\x03\x04 zip archive") is False
    assert is_pdf_payload(b"") is False


def test_open_document_reports_page_count(numbered_pdf: Callable[[int], bytes]) -> None:
    """Opened documents should expose the source page count."""

    with open_document(numbered_pdf(3)) as document:
        assert document.page_count == 3


def test_open_document_rejects_non_pdf_payload() -> None:
    """Payloads without a PDF signature should fail before parsing."""

    with pytest.raises(PipelineError) as exc_info:
        open_document(b"plain text, not a document")

    assert exc_info.value.kind is DocumentFailure.NOT_A_PDF
    assert exc_info.value.stage == "open"
    assert exc_info.value.detail == "Please select a PDF file."


def test_open_document_reports_unparseable_pdf() -> None:
    """A payload with a PDF header but no document structure should fail to open."""

    with pytest.raises(PipelineError) as exc_info:
        open_document(b"%PDF-1.4\nthis is not a real document body")

    assert exc_info.value.kind is DocumentFailure.OPEN_FAILED


def test_page_access_rejects_out_of_range_numbers(
    numbered_pdf: Callable[[int], bytes],
) -> None:
    """Page accessors should reject page numbers outside the document."""

    with open_document(numbered_pdf(2)) as document:
        with pytest.raises(IndexError):
            document.text_page(0)
        with pytest.raises(IndexError):
            document.raster_page(3)
