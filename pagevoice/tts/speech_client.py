"""Remote speech synthesis HTTP client.

Responsibilities:
- Send one transcript to the configured inference endpoint as `{"inputs": ...}`.
- Return the raw audio response body without validating or transcoding it.
- Raise `SynthesisError` with a short, redacted provider message on failure.
"""

from __future__ import annotations

import json
import re
from typing import Protocol

import requests

from ..errors import SynthesisError, SynthesisFailure

DEFAULT_SPEECH_ENDPOINT = (
    "https://api-inference.huggingface.co/models/facebook/fastspeech2-en-ljspeech"
)


class SpeechSynthesizer(Protocol):
    """Protocol for speech providers used by the pipeline synthesis stage."""

    def synthesize(self, text: str) -> bytes:
        """Return audio bytes for the complete text."""


class SpeechSynthesisClient:
    """Minimal requests-based client for a bearer-authenticated TTS endpoint."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        endpoint: str = DEFAULT_SPEECH_ENDPOINT,
        api_key: str | None = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialize endpoint, credentials, and request timeout."""

        self.endpoint = endpoint.strip()
        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.timeout_seconds = timeout_seconds

    def synthesize(self, text: str) -> bytes:
        """Submit the complete text in one request and return the audio bytes.

        Raises:
            SynthesisError: `REQUEST_FAILED` for non-success statuses and
                `UNREACHABLE` when no response was received.
        """

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(
                self.endpoint,
                headers=headers,
                json={"inputs": text},
                timeout=self.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise SynthesisError(
                SynthesisFailure.UNREACHABLE,
                "Speech service request timed out.",
            ) from exc
        except requests.RequestException as exc:
            raise SynthesisError(
                SynthesisFailure.UNREACHABLE,
                f"Speech service is unreachable: {self._short_message(str(exc))}",
            ) from exc
        if not 200 <= response.status_code < 300:
            raise self._status_to_synthesis_error(response)
        return bytes(response.content)

    @classmethod
    def _status_to_synthesis_error(cls, response: requests.Response) -> SynthesisError:
        """Convert any non-2xx response into a `REQUEST_FAILED` error with status metadata."""

        status_code = response.status_code
        provider_message = cls._extract_provider_message(cls._decode_error_body(response))
        if provider_message:
            detail = f"Speech request failed (HTTP {status_code}): {provider_message}"
        else:
            detail = f"Speech request failed (HTTP {status_code})."
        return SynthesisError(
            SynthesisFailure.REQUEST_FAILED,
            detail,
            status_code=status_code,
        )

    @staticmethod
    def _decode_error_body(response: requests.Response) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        return bytes(response.content or b"").decode("utf-8", errors="replace").strip()

    @classmethod
    def _extract_provider_message(cls, body: str) -> str:
        """Extract a concise message from `{"error": ...}` payloads or raw text."""

        if not body:
            return ""
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body))

        message: str | None = None
        if isinstance(payload, dict):
            error_payload = payload.get("error")
            if isinstance(error_payload, str) and error_payload.strip():
                message = error_payload.strip()
            elif isinstance(error_payload, dict):
                message_value = error_payload.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()
        if message is None:
            message = body
        return cls._short_message(cls._redact_sensitive_tokens(message))

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        redacted = re.sub(r"\bhf_[A-Za-z0-9]{8,}\b", "[redacted-key]", text)
        redacted = re.sub(
            r"(?i)bearer\s+[A-Za-z0-9._-]{12,}",
            "Bearer [redacted-token]",
            redacted,
        )
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."
