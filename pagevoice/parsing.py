"""Shared parsing helpers for runtime values and user page input."""

from __future__ import annotations

import re

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_page_number(value: object) -> int | None:
    """Parse a raw page number, returning `None` when it is not an integer.

    Accepts ints and strings of optional sign plus digits. Booleans, floats,
    blank strings and anything else are not page numbers.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None

    normalized = normalize_optional_string(value)
    if normalized is None or not _INTEGER_PATTERN.fullmatch(normalized):
        return None
    return int(normalized)
