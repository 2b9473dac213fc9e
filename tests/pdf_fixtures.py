"""Deterministic in-memory PDF builders for unit and integration tests."""

from __future__ import annotations

import io
from collections.abc import Sequence

from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

PAGE_WIDTH = 600
PAGE_HEIGHT = 800
FONT_SIZE = 12
LEFT_MARGIN = 72
TOP_Y = 720
LINE_HEIGHT = 16


def _escape_pdf_text(value: str) -> str:
    """Escape literal text for safe inclusion in a PDF text stream."""

    return value.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _add_text_page(writer: PdfWriter, lines: Sequence[str]) -> None:
    """Append a single page containing extractable text lines."""

    page = writer.add_blank_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    font_ref = writer._add_object(
        DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Font"),
                NameObject("/Subtype"): NameObject("/Type1"),
                NameObject("/BaseFont"): NameObject("/Helvetica"),
            }
        )
    )
    page[NameObject("/Resources")] = DictionaryObject(
        {NameObject("/Font"): DictionaryObject({NameObject("/F1"): font_ref})}
    )

    content_lines = [
        "BT",
        f"/F1 {FONT_SIZE} Tf",
        f"{LEFT_MARGIN} {TOP_Y} Td",
        f"{LINE_HEIGHT} TL",
    ]
    for index, line in enumerate(lines):
        content_lines.append(f"({_escape_pdf_text(line)}) Tj")
        if index < len(lines) - 1:
            content_lines.append("T*")
    content_lines.append("ET")

    stream = DecodedStreamObject()
    stream.set_data("\n".join(content_lines).encode("latin-1"))
    page[NameObject("/Contents")] = writer._add_object(stream)


def build_pdf_bytes(pages: Sequence[Sequence[str]]) -> bytes:
    """Build a PDF whose pages carry the given text lines."""

    writer = PdfWriter()
    for lines in pages:
        _add_text_page(writer, lines)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_content(page_number: int) -> str:
    """Return the single text line written on a numbered fixture page."""

    return f"Content of page {page_number}"


def numbered_pdf_bytes(page_count: int) -> bytes:
    """Build a PDF with `page_count` pages reading `Content of page N`."""

    return build_pdf_bytes([[page_content(number)] for number in range(1, page_count + 1)])
