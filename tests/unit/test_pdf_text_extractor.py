"""Unit tests for per-page PDF text extraction."""

from collections.abc import Callable

import pytest

from pagevoice.errors import ExtractError
from pagevoice.io.document import open_document
from pagevoice.io.pdf_text_extractor import PageTextExtractor
from tests.pdf_fixtures import build_pdf_bytes


def test_extract_text_returns_page_content(numbered_pdf: Callable[[int], bytes]) -> None:
    """Extraction should return the text drawn on the requested page only."""

    extractor = PageTextExtractor()
    with open_document(numbered_pdf(3)) as document:
        assert extractor.extract_text(document, 2) == "Content of page 2"
        assert extractor.extract_text(document, 3) == "Content of page 3"


def test_extract_text_joins_fragments_with_single_spaces() -> None:
    """Multiple text fragments should be joined with one space in parser order."""

    extractor = PageTextExtractor()
    with open_document(build_pdf_bytes([["First line", "Second line"]])) as document:
        fragments = extractor.extract_fragments(document, 1)
        text = extractor.extract_text(document, 1)

    assert all(fragment == fragment.strip() and fragment for fragment in fragments)
    assert text.split() == ["First", "line", "Second", "line"]
    assert text.index("First") < text.index("Second")


def test_extract_text_drops_fragment_padding() -> None:
    """Padded and newline-only fragments should not leave doubled or edge spaces."""

    extractor = PageTextExtractor()
    with open_document(build_pdf_bytes([["   padded line   ", "next"]])) as document:
        text = extractor.extract_text(document, 1)

    assert text == text.strip()
    assert "  " not in text
    assert text.split() == ["padded", "line", "next"]


def test_extract_text_of_blank_page_is_empty() -> None:
    """Pages without text operators should extract to an empty string."""

    extractor = PageTextExtractor()
    with open_document(build_pdf_bytes([[]])) as document:
        assert extractor.extract_text(document, 1) == ""


def test_extract_text_wraps_page_access_failures(numbered_pdf: Callable[[int], bytes]) -> None:
    """Failures while reading a page should surface as `ExtractError`."""

    extractor = PageTextExtractor()
    with open_document(numbered_pdf(1)) as document:
        with pytest.raises(ExtractError) as exc_info:
            extractor.extract_text(document, 2)

    assert exc_info.value.page_number == 2
    assert exc_info.value.stage == "extract"
