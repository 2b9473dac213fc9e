"""Unit tests for shared runtime and page-number parsing helpers."""

import pytest

from pagevoice.parsing import normalize_optional_string, parse_page_number


def test_normalize_optional_string_handles_blank_values() -> None:
    """Normalization should return `None` for `None` and blank textual values."""

    assert normalize_optional_string(None) is None
    assert normalize_optional_string("") is None
    assert normalize_optional_string("   ") is None


def test_normalize_optional_string_strips_non_blank_values() -> None:
    """Normalization should return stripped content for non-empty values."""

    assert normalize_optional_string("  value  ") == "value"
    assert normalize_optional_string(42) == "42"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("3", 3),
        ("  12 ", 12),
        ("+4", 4),
        ("-1", -1),
        ("0", 0),
        (7, 7),
    ],
)
def test_parse_page_number_accepts_integers(raw: object, expected: int) -> None:
    """Integer values and signed digit strings should parse as page numbers."""

    assert parse_page_number(raw) == expected


@pytest.mark.parametrize("raw", ["", "  ", "abc", "2.5", "1e3", "3 4", None, 2.0, True, object()])
def test_parse_page_number_rejects_non_integers(raw: object) -> None:
    """Blank, fractional, boolean, and arbitrary values are not page numbers."""

    assert parse_page_number(raw) is None
