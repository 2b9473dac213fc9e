"""Pipeline orchestration for Pagevoice.

Responsibilities:
- Define the stage order for one page-range conversion.
- Render and extract pages strictly in ascending order, one page at a time.
- Assemble the labeled transcript, synthesize speech, and publish the audio.
- Write run deliverables and a manifest for config-driven conversions.

Key types:
- `PagevoicePipeline`: orchestration facade.
- `ConversionResult`: pages, transcript, and optional audio of one run.
"""

from __future__ import annotations

from collections.abc import Callable
from ..audio.resources import AudioResourceManager
from ..config import PagevoiceConfig
from ..errors import ExtractError, PipelineStageError, RenderError, SynthesisError
from ..io.document import open_document
from ..io.page_range import validate_page_range
from ..io.page_renderer import PageRenderer
from ..io.pdf_text_extractor import PageTextExtractor
from ..io.storage import ArtifactStore
from ..models.datatypes import (
    AudioHandle,
    ConversionResult,
    PageText,
    RenderedPage,
    RunManifest,
    RunState,
    Transcript,
)
from ..telemetry.logger import RunLogger
from ..tts.speech_client import SpeechSynthesisClient, SpeechSynthesizer
from .manifesting import PipelineManifestMixin
from .runtime import PipelineRuntimeMixin
from .telemetry import PipelineTelemetryMixin


class PagevoicePipeline(
    PipelineRuntimeMixin,
    PipelineTelemetryMixin,
    PipelineManifestMixin,
):
    """Coordinate all stages for Pagevoice conversion runs.

    One pipeline instance owns the current audio handle across runs. Each
    `run()` takes a new run token; a run that is no longer current when its
    synthesis completes never publishes audio or touches pipeline state.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer | None = None,
        audio_manager: AudioResourceManager | None = None,
        renderer: PageRenderer | None = None,
        extractor: PageTextExtractor | None = None,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> None:
        """Initialize stage collaborators and optional logging/progress hooks."""

        self._synthesizer = synthesizer if synthesizer is not None else SpeechSynthesisClient()
        self._audio_manager = audio_manager if audio_manager is not None else AudioResourceManager()
        self._renderer = renderer if renderer is not None else PageRenderer()
        self._extractor = extractor if extractor is not None else PageTextExtractor()
        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback

        self._run_token = 0
        self._state = RunState.IDLE
        self._failed_stage: str | None = None
        self._run_id: str | None = None
        self._pages: list[RenderedPage] = []

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def failed_stage(self) -> str | None:
        """Return the stage that failed the latest run, if it failed."""

        return self._failed_stage

    @property
    def pages(self) -> tuple[RenderedPage, ...]:
        """Return pages rendered by the latest run, including partial runs."""

        return tuple(self._pages)

    @property
    def run_id(self) -> str | None:
        return self._run_id

    @property
    def audio_manager(self) -> AudioResourceManager:
        return self._audio_manager

    def page_count(self, file_bytes: bytes) -> int:
        """Open a PDF payload and return its page count."""

        with self._run_stage("open", lambda: open_document(file_bytes)) as document:
            return document.page_count

    def run(self, file_bytes: bytes, raw_start: object, raw_end: object) -> ConversionResult:
        """Convert a raw page range of a PDF payload into pages, transcript, and audio.

        Raises:
            PipelineError: When the payload is not a PDF or cannot be opened.
            ValidationError: When the page range is rejected.
            RenderError: When a page cannot be rendered; earlier pages stay in `pages`.
            ExtractError: When a page's text cannot be read; earlier pages stay in `pages`.
        """

        self._run_token += 1
        token = self._run_token
        self._state = RunState.IDLE
        self._failed_stage = None
        self._run_id = None
        self._pages = []

        try:
            return self._run(token, file_bytes, raw_start, raw_end)
        except PipelineStageError as exc:
            self._mark_failed(token, exc.stage)
            raise

    def convert(self, config: PagevoiceConfig) -> RunManifest:
        """Run one config-driven conversion and write its deliverables.

        Page images, transcript, audio, and `run_manifest.json` are written under
        `<output_dir>/<run_id>/`. When a page fails, the pages rendered before it
        are still written and the error is re-raised.
        """

        self._validate_config(config)
        runtime_config = self._resolve_runtime_config(config)
        if self._renderer.scale != config.render_scale:
            self._renderer = PageRenderer(scale=config.render_scale)
        if isinstance(self._synthesizer, SpeechSynthesisClient):
            self._synthesizer = SpeechSynthesisClient(
                endpoint=runtime_config.endpoint,
                api_key=runtime_config.api_key,
                timeout_seconds=runtime_config.timeout_seconds,
            )

        file_bytes = self._read_input_pdf(config.input_pdf)
        try:
            result = self.run(file_bytes, config.start_page, config.end_page)
        except (RenderError, ExtractError):
            if self._run_id is not None and self._pages:
                store = ArtifactStore(config.output_dir / self._run_id)
                self._save_page_images(self._pages, config.image_format, store)
            raise

        store = ArtifactStore(config.output_dir / result.run_id)
        return self._write_manifest(config, runtime_config, result, store)

    def close(self) -> None:
        """Release every audio handle owned by this pipeline."""

        self._audio_manager.close()

    def _run(
        self, token: int, file_bytes: bytes, raw_start: object, raw_end: object
    ) -> ConversionResult:
        document = self._run_stage("open", lambda: open_document(file_bytes))
        with document:
            self._set_state(token, RunState.VALIDATING)
            page_range = self._run_stage(
                "validate",
                lambda: validate_page_range(raw_start, raw_end, document.page_count),
            )
            run_id = self._compute_run_id(file_bytes, page_range, self._renderer.scale)
            if self._is_current(token):
                self._run_id = run_id

            self._set_state(token, RunState.RENDERING)
            pages: list[RenderedPage] = []
            entries: list[PageText] = []
            for index, page_number in enumerate(page_range.page_numbers()):
                surface = self._run_stage(
                    "render",
                    lambda: self._renderer.render(document, page_number),
                    page=page_number,
                )
                rendered = RenderedPage(index=index, page_number=page_number, surface=surface)
                pages.append(rendered)
                if self._is_current(token):
                    self._pages.append(rendered)

                text = self._run_stage(
                    "extract",
                    lambda: self._extractor.extract_text(document, page_number),
                    page=page_number,
                )
                entries.append(PageText(page_number=page_number, text=text))

        transcript = Transcript(entries=tuple(entries))
        result = ConversionResult(
            run_id=run_id,
            page_range=page_range,
            pages=tuple(pages),
            transcript=transcript,
        )

        self._set_state(token, RunState.SYNTHESIZING)
        try:
            payload = self._run_stage(
                "synthesize",
                lambda: self._synthesizer.synthesize(transcript.text),
                chars=len(transcript.text),
            )
        except SynthesisError as exc:
            if self._run_logger is not None:
                self._run_logger.log_degraded("synthesize", exc.kind.value, run_id=run_id)
            self._mark_failed(token, "synthesize")
            return ConversionResult(
                run_id=result.run_id,
                page_range=result.page_range,
                pages=result.pages,
                transcript=result.transcript,
                synthesis_error=exc,
            )

        if not self._is_current(token):
            if self._run_logger is not None:
                self._run_logger.log_degraded("publish", "stale_run", run_id=run_id)
            return result

        handle = self._run_stage(
            "publish",
            lambda: self._publish(payload),
            bytes=len(payload),
        )
        self._set_state(token, RunState.PUBLISHED)
        return ConversionResult(
            run_id=result.run_id,
            page_range=result.page_range,
            pages=result.pages,
            transcript=result.transcript,
            audio=handle,
        )

    def _publish(self, payload: bytes) -> AudioHandle:
        try:
            return self._audio_manager.publish(payload)
        except OSError as exc:
            raise PipelineStageError(
                stage="publish",
                detail=f"Failed to publish synthesized audio: {exc}",
                hint="Verify the audio directory is writable.",
            ) from exc

    def _is_current(self, token: int) -> bool:
        return token == self._run_token

    def _set_state(self, token: int, state: RunState) -> None:
        if self._is_current(token):
            self._state = state

    def _mark_failed(self, token: int, stage: str) -> None:
        if self._is_current(token):
            self._state = RunState.FAILED
            self._failed_stage = stage
