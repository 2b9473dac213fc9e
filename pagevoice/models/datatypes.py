"""Core datatypes shared across Pagevoice modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Render the labeled transcript used as the synthesis payload.

Key types:
- `PageRange`, `RenderedPage`, `PageText`, `Transcript`, `AudioHandle`,
  `RunState`, `ConversionResult`, and `RunManifest`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from PIL import Image

    from ..errors import SynthesisError


@dataclass(frozen=True, slots=True)
class PageRange:
    """Validated inclusive 1-based page interval.

    Attributes:
        start: First page, at least 1.
        end: Last page, clamped to the document page count.
    """

    start: int
    end: int

    def page_numbers(self) -> range:
        """Return page numbers in ascending order."""

        return range(self.start, self.end + 1)

    def __len__(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """One rendered page surface.

    Attributes:
        index: 0-based position within the validated range.
        page_number: 1-based page number in the source document.
        surface: Fully rendered raster image.
    """

    index: int
    page_number: int
    surface: Image.Image

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height


@dataclass(frozen=True, slots=True)
class PageText:
    """Extracted text of one page."""

    page_number: int
    text: str

    def label(self) -> str:
        """Return the labeled transcript block for this page."""

        return f"Page {self.page_number}: {self.text}"


@dataclass(frozen=True, slots=True)
class Transcript:
    """Ordered labeled text assembled from all pages of one run."""

    entries: tuple[PageText, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        """Render blocks ascending by page number, separated by a blank line."""

        ordered = sorted(self.entries, key=lambda entry: entry.page_number)
        return "\n\n".join(entry.label() for entry in ordered)

    def page_numbers(self) -> tuple[int, ...]:
        return tuple(sorted(entry.page_number for entry in self.entries))


@dataclass(frozen=True, slots=True)
class AudioHandle:
    """Revocable reference to a published audio payload.

    Attributes:
        resource_ref: `file://` URI usable by a standard audio player.
        payload_size: Payload size in bytes.
        path: Filesystem location backing the reference.
    """

    resource_ref: str
    payload_size: int
    path: Path


class RunState(str, Enum):
    """Lifecycle states of one pipeline run."""

    IDLE = "idle"
    VALIDATING = "validating"
    RENDERING = "rendering"
    SYNTHESIZING = "synthesizing"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Outcome of one run that got past page processing.

    `audio` is `None` when synthesis failed or the run went stale; the
    reported failure, if any, is kept in `synthesis_error`.
    """

    run_id: str
    page_range: PageRange
    pages: tuple[RenderedPage, ...]
    transcript: Transcript
    audio: AudioHandle | None = None
    synthesis_error: SynthesisError | None = None

    @property
    def is_complete(self) -> bool:
        """Return whether the run produced playable audio."""

        return self.audio is not None


@dataclass(frozen=True, slots=True)
class RunManifest:
    """Record of the deliverables written for one conversion run.

    Attributes:
        run_id: Stable run identifier.
        source_pdf: Path to the input PDF.
        page_range: Validated page range.
        page_images: Written page image paths, ascending by page.
        transcript_path: Written transcript path.
        audio_path: Written audio path, or `None` when no audio was produced.
        extra: Additional implementation-specific metadata.
    """

    run_id: str
    source_pdf: Path
    page_range: PageRange
    page_images: tuple[Path, ...]
    transcript_path: Path
    audio_path: Path | None
    extra: Mapping[str, str] = field(default_factory=dict)
