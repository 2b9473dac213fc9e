"""Domain exceptions for pipeline and CLI diagnostics.

Every failure raised by the page pipeline is a `PipelineStageError`, so the CLI
renders validation, document, page, and synthesis failures the same way.
"""

from __future__ import annotations

from enum import Enum


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class ValidationFailure(str, Enum):
    """Reasons a requested page range is rejected."""

    NOT_A_NUMBER = "not_a_number"
    INVALID_ORDER = "invalid_order"
    START_BEYOND_DOCUMENT = "start_beyond_document"


class DocumentFailure(str, Enum):
    """Reasons an input payload cannot be opened as a PDF document."""

    NOT_A_PDF = "not_a_pdf"
    OPEN_FAILED = "open_failed"


class SynthesisFailure(str, Enum):
    """Reasons a speech synthesis request produced no audio."""

    REQUEST_FAILED = "request_failed"
    UNREACHABLE = "unreachable"


_VALIDATION_MESSAGES = {
    ValidationFailure.NOT_A_NUMBER: "Please enter valid start and end page numbers.",
    ValidationFailure.INVALID_ORDER: "Please enter valid start and end page numbers.",
    ValidationFailure.START_BEYOND_DOCUMENT: (
        "Start page number exceeds the total number of pages in the PDF."
    ),
}


class ValidationError(PipelineStageError):
    """Raised when a requested page range is not usable for the opened document."""

    def __init__(self, kind: ValidationFailure, hint: str | None = None) -> None:
        """Initialize a range validation error with its user-facing message."""

        super().__init__(stage="validate", detail=_VALIDATION_MESSAGES[kind], hint=hint)
        self.kind = kind

    @property
    def user_message(self) -> str:
        """Return the fixed user-facing message for this validation failure."""

        return _VALIDATION_MESSAGES[self.kind]


class PipelineError(PipelineStageError):
    """Raised when the input payload is not a PDF or cannot be opened."""

    def __init__(self, kind: DocumentFailure, detail: str, hint: str | None = None) -> None:
        super().__init__(stage="open", detail=detail, hint=hint)
        self.kind = kind


class RenderError(PipelineStageError):
    """Raised when a page cannot be loaded or rasterized."""

    def __init__(self, page_number: int, detail: str) -> None:
        super().__init__(
            stage="render",
            detail=f"Failed to render page {page_number}: {detail}",
            hint="The page may be malformed or use unsupported content.",
        )
        self.page_number = page_number


class ExtractError(PipelineStageError):
    """Raised when a page content stream cannot be read for text."""

    def __init__(self, page_number: int, detail: str) -> None:
        super().__init__(
            stage="extract",
            detail=f"Failed to extract text from page {page_number}: {detail}",
            hint="The page content stream may be malformed.",
        )
        self.page_number = page_number


class SynthesisError(PipelineStageError):
    """Raised when the remote speech service returns no usable audio."""

    def __init__(
        self,
        kind: SynthesisFailure,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> None:
        """Initialize synthesis error metadata for stage-aware diagnostics."""

        hint = (
            "Check the speech endpoint URL and network connectivity."
            if kind is SynthesisFailure.UNREACHABLE
            else "Check the API key and the speech service status."
        )
        super().__init__(stage="synthesize", detail=detail, hint=hint)
        self.kind = kind
        self.status_code = status_code
