"""Page range validation against document bounds."""

from __future__ import annotations

from ..errors import ValidationError, ValidationFailure
from ..models.datatypes import PageRange
from ..parsing import parse_page_number


def validate_page_range(raw_start: object, raw_end: object, page_count: int) -> PageRange:
    """Validate a raw 1-based inclusive page interval for a document.

    The end page is clamped to `page_count`; clamping is never an error.

    Raises:
        ValidationError: `NOT_A_NUMBER` when either bound is not an integer,
            `INVALID_ORDER` when `start < 1` or `end < start`, and
            `START_BEYOND_DOCUMENT` when `start > page_count`.
    """

    start = parse_page_number(raw_start)
    end = parse_page_number(raw_end)
    if start is None or end is None:
        raise ValidationError(
            ValidationFailure.NOT_A_NUMBER,
            hint="Use whole page numbers, for example `--start 1 --end 3`.",
        )
    if start < 1 or end < start:
        raise ValidationError(
            ValidationFailure.INVALID_ORDER,
            hint="Start must be at least 1 and not greater than end.",
        )
    if start > page_count:
        raise ValidationError(
            ValidationFailure.START_BEYOND_DOCUMENT,
            hint=f"The document has {page_count} page(s).",
        )
    return PageRange(start=start, end=min(end, page_count))
