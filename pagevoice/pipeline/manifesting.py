"""Artifact and manifest writing helpers for Pagevoice pipeline.

Responsibilities:
- Persist page images, transcript, and audio deliverables for a run.
- Build and persist the typed `RunManifest` record.
- Map unexpected failures to stage-aware manifest errors.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..config import PagevoiceConfig, SpeechRuntimeConfig
from ..errors import PipelineStageError
from ..io.storage import ArtifactStore
from ..models.datatypes import ConversionResult, RenderedPage, RunManifest


def page_image_path(page: RenderedPage, image_format: str) -> Path:
    """Return the deterministic relative path of one page image."""

    extension = "jpg" if image_format == "jpeg" else image_format
    return Path("pages") / f"page-{page.page_number:04d}.{extension}"


def manifest_payload(manifest: RunManifest) -> dict[str, object]:
    """Serialize a run manifest into a JSON-compatible mapping."""

    return {
        "run_id": manifest.run_id,
        "source_pdf": str(manifest.source_pdf),
        "page_range": {
            "start": manifest.page_range.start,
            "end": manifest.page_range.end,
        },
        "page_images": [str(path) for path in manifest.page_images],
        "transcript_path": str(manifest.transcript_path),
        "audio_path": str(manifest.audio_path) if manifest.audio_path is not None else None,
        "extra": dict(manifest.extra),
    }


class PipelineManifestMixin:
    """Provide artifact persistence and run-manifest helpers."""

    def _save_page_images(
        self,
        pages: Sequence[RenderedPage],
        image_format: str,
        store: ArtifactStore,
    ) -> tuple[Path, ...]:
        """Write page images in ascending page order and return their paths."""

        try:
            return tuple(
                store.save_image(page_image_path(page, image_format), page.surface, image_format)
                for page in sorted(pages, key=lambda item: item.page_number)
            )
        except Exception as exc:
            raise PipelineStageError(
                stage="manifest",
                detail=f"Failed to write page images: {exc}",
                hint="Verify output directory is writable.",
            ) from exc

    def _write_manifest(
        self,
        config: PagevoiceConfig,
        runtime_config: SpeechRuntimeConfig,
        result: ConversionResult,
        store: ArtifactStore,
    ) -> RunManifest:
        """Persist run deliverables and a manifest describing them."""

        page_images = self._save_page_images(result.pages, config.image_format, store)
        try:
            transcript_path = store.save_text(
                Path("text/transcript.txt"), result.transcript.text
            )
            audio_path: Path | None = None
            if result.audio is not None:
                audio_path = store.save_audio(
                    Path("audio") / f"speech{result.audio.path.suffix}",
                    result.audio.path.read_bytes(),
                )

            extra = {
                **dict(config.extra),
                **runtime_config.as_manifest_metadata(),
                "requested_start": str(config.start_page),
                "requested_end": str(config.end_page),
                "render_scale": f"{config.render_scale:g}",
                "synthesis_status": "published" if result.is_complete else "unavailable",
            }
            if result.synthesis_error is not None:
                extra["synthesis_error_kind"] = result.synthesis_error.kind.value
                extra["synthesis_error"] = result.synthesis_error.detail

            manifest = RunManifest(
                run_id=result.run_id,
                source_pdf=config.input_pdf,
                page_range=result.page_range,
                page_images=page_images,
                transcript_path=transcript_path,
                audio_path=audio_path,
                extra=extra,
            )
            manifest_path = store.save_json(Path("run_manifest.json"), manifest_payload(manifest))
        except Exception as exc:
            raise PipelineStageError(
                stage="manifest",
                detail=f"Failed to write run manifest: {exc}",
                hint="Verify output directory is writable.",
            ) from exc

        return RunManifest(
            run_id=manifest.run_id,
            source_pdf=manifest.source_pdf,
            page_range=manifest.page_range,
            page_images=manifest.page_images,
            transcript_path=manifest.transcript_path,
            audio_path=manifest.audio_path,
            extra={**manifest.extra, "manifest_path": str(manifest_path)},
        )
