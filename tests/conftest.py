"""Shared pytest fixtures for the full Pagevoice test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.pdf_fixtures import numbered_pdf_bytes


@pytest.fixture
def numbered_pdf() -> Callable[[int], bytes]:
    """Provide a builder for PDFs whose page N reads `Content of page N`."""

    return numbered_pdf_bytes


@pytest.fixture
def numbered_pdf_path(tmp_path: Path) -> Callable[[int], Path]:
    """Provide a builder writing a numbered PDF fixture into the test directory."""

    def _write(page_count: int) -> Path:
        path = tmp_path / f"numbered-{page_count}.pdf"
        path.write_bytes(numbered_pdf_bytes(page_count))
        return path

    return _write


@pytest.fixture(autouse=True)
def _clear_pagevoice_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment overrides out of runtime resolution."""

    for key in (
        "PAGEVOICE_SPEECH_ENDPOINT",
        "PAGEVOICE_API_KEY",
        "PAGEVOICE_SPEECH_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)
