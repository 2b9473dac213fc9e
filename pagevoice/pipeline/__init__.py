"""Pagevoice pipeline package.

This package contains orchestration and helper modules for pipeline execution,
stage telemetry, run identity, and artifact persistence.
"""

from .orchestrator import PagevoicePipeline

__all__ = ["PagevoicePipeline"]
