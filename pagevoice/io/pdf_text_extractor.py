"""PDF page text extraction.

Responsibilities:
- Collect the text fragments of one page in the order the parser reports them.
- Join fragments into one string with single spaces.

Parser order follows the content stream and is not guaranteed to match visual
reading order for multi-column or rotated layouts; it is not corrected here.
"""

from __future__ import annotations

from ..errors import ExtractError
from .document import PdfDocument


class PageTextExtractor:
    """Extractor for text-based PDF pages using `pypdf` content visitors."""

    def extract_text(self, document: PdfDocument, page_number: int) -> str:
        """Extract the text of one 1-based page as space-joined fragments."""

        return " ".join(self.extract_fragments(document, page_number))

    def extract_fragments(self, document: PdfDocument, page_number: int) -> list[str]:
        """Return trimmed non-blank text fragments of one page in parser order."""

        fragments: list[str] = []

        def _collect(text: str, *_: object) -> None:
            fragment = text.strip()
            if fragment:
                fragments.append(fragment)

        try:
            page = document.text_page(page_number)
            page.extract_text(visitor_text=_collect)
        except Exception as exc:
            raise ExtractError(page_number, str(exc)) from exc
        return fragments
