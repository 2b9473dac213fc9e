"""Telemetry and observability helpers.

This package emits run events for deterministic auditing of pipeline stages.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
