"""Shared typed data models for Pagevoice.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    AudioHandle,
    ConversionResult,
    PageRange,
    PageText,
    RenderedPage,
    RunManifest,
    RunState,
    Transcript,
)

__all__ = [
    "AudioHandle",
    "ConversionResult",
    "PageRange",
    "PageText",
    "RenderedPage",
    "RunManifest",
    "RunState",
    "Transcript",
]
