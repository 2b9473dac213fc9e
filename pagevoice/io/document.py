"""PDF document access from in-memory bytes.

Responsibilities:
- Reject payloads that do not carry a PDF signature.
- Open one parsed document exposing page count and per-page access for both
  text content (`pypdf`) and rasterization (`pypdfium2`).
"""

from __future__ import annotations

import io

import pypdfium2 as pdfium
from pypdf import PageObject, PdfReader

from ..errors import DocumentFailure, PipelineError

_PDF_SIGNATURE = b"%PDF-"
_SIGNATURE_SEARCH_BYTES = 1024


def is_pdf_payload(data: bytes) -> bool:
    """Return whether the payload carries a PDF header near its start."""

    return _PDF_SIGNATURE in bytes(data[:_SIGNATURE_SEARCH_BYTES])


class PdfDocument:
    """Parsed PDF document owned by one pipeline run."""

    def __init__(self, reader: PdfReader, raster: pdfium.PdfDocument) -> None:
        self._reader = reader
        self._raster = raster
        self._closed = False

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    def text_page(self, page_number: int) -> PageObject:
        """Return the `pypdf` page object for a 1-based page number."""

        self._check_page_number(page_number)
        return self._reader.pages[page_number - 1]

    def raster_page(self, page_number: int) -> pdfium.PdfPage:
        """Return the `pypdfium2` page for a 1-based page number.

        The caller owns the returned page and must close it.
        """

        self._check_page_number(page_number)
        return self._raster[page_number - 1]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._raster.close()

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _check_page_number(self, page_number: int) -> None:
        if page_number < 1 or page_number > self.page_count:
            raise IndexError(
                f"Page {page_number} is outside document range 1..{self.page_count}."
            )


def open_document(data: bytes) -> PdfDocument:
    """Open a PDF document from raw bytes.

    Raises:
        PipelineError: `NOT_A_PDF` for payloads without a PDF signature, or
            `OPEN_FAILED` when either parser rejects the payload.
    """

    if not is_pdf_payload(data):
        raise PipelineError(
            DocumentFailure.NOT_A_PDF,
            "Please select a PDF file.",
            hint="The input does not start with a PDF header.",
        )

    try:
        reader = PdfReader(io.BytesIO(data))
        page_count = len(reader.pages)
    except Exception as exc:
        raise PipelineError(
            DocumentFailure.OPEN_FAILED,
            f"Failed to open PDF document: {exc}",
            hint="The file may be corrupt or encrypted.",
        ) from exc

    try:
        raster = pdfium.PdfDocument(bytes(data))
    except Exception as exc:
        raise PipelineError(
            DocumentFailure.OPEN_FAILED,
            f"Failed to open PDF document for rendering: {exc}",
            hint="The file may be corrupt or encrypted.",
        ) from exc

    if len(raster) != page_count:
        raster.close()
        raise PipelineError(
            DocumentFailure.OPEN_FAILED,
            f"PDF page count is inconsistent ({page_count} vs {len(raster)}).",
            hint="The file may be corrupt; try re-saving it with a PDF tool.",
        )
    return PdfDocument(reader, raster)
