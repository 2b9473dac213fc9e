"""Runtime configuration and run-identity helpers for Pagevoice pipeline.

Responsibilities:
- Validate pipeline configuration before execution.
- Resolve speech runtime values with precedence rules.
- Compute deterministic run identifiers from input bytes and page range.
"""

from __future__ import annotations

from hashlib import sha256
import json
import os
from pathlib import Path

from ..config import PagevoiceConfig, RuntimeConfigSources, SpeechRuntimeConfig
from ..errors import PipelineStageError
from ..models.datatypes import PageRange


def resolve_speech_runtime(config: PagevoiceConfig) -> SpeechRuntimeConfig:
    """Resolve speech settings, mapping invalid values to a `config` stage error.

    Falls back to `os.environ` when the config carries no environment source.
    """

    try:
        env_source = config.runtime_sources.env or os.environ
        runtime_sources = RuntimeConfigSources(
            cli=config.runtime_sources.cli,
            secure=config.runtime_sources.secure,
            env=env_source,
        )
        return config.resolved_speech_runtime(runtime_sources)
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=str(exc),
            hint=(
                "Set a non-empty speech endpoint and a positive timeout in "
                "CLI, secure storage, environment, or config defaults."
            ),
        ) from exc


class PipelineRuntimeMixin:
    """Provide runtime/config helper methods for pipeline orchestration."""

    def _validate_config(self, config: PagevoiceConfig) -> None:
        """Validate top-level configuration and map failures to stage-aware error."""

        try:
            config.validate()
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Update the conversion options and rerun the command.",
            ) from exc

    def _resolve_runtime_config(self, config: PagevoiceConfig) -> SpeechRuntimeConfig:
        """Resolve speech settings with deterministic source precedence."""

        return resolve_speech_runtime(config)

    def _read_input_pdf(self, input_pdf: Path) -> bytes:
        """Read the source PDF bytes and map filesystem failures to stage errors."""

        try:
            return input_pdf.read_bytes()
        except FileNotFoundError as exc:
            raise PipelineStageError(
                stage="input",
                detail=f"Input PDF not found: `{input_pdf}`.",
                hint="Verify the input path and rerun the command.",
            ) from exc
        except OSError as exc:
            raise PipelineStageError(
                stage="input",
                detail=f"Failed to read input PDF `{input_pdf}`: {exc}",
                hint="Verify file permissions and rerun the command.",
            ) from exc

    @staticmethod
    def _compute_run_id(file_bytes: bytes, page_range: PageRange, scale: float) -> str:
        """Compute a deterministic run identifier for one input and range."""

        digest = sha256(file_bytes)
        canonical = json.dumps(
            {"start": page_range.start, "end": page_range.end, "scale": scale},
            sort_keys=True,
            separators=(",", ":"),
        )
        digest.update(canonical.encode("utf-8"))
        return f"run-{digest.hexdigest()[:12]}"
