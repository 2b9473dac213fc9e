"""Top-level package for Pagevoice.

This package converts a selected page range of a PDF into rendered page images
and one synthesized speech track. The main orchestration entry point is
`PagevoicePipeline`.
"""

from .pipeline import PagevoicePipeline

__all__ = ["PagevoicePipeline", "__version__"]

__version__ = "0.1.0"
