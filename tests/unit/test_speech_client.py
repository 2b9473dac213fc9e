"""Unit tests for the requests-based speech synthesis client."""

from __future__ import annotations

import pytest
import requests

from pagevoice.errors import SynthesisError, SynthesisFailure
from pagevoice.tts.speech_client import DEFAULT_SPEECH_ENDPOINT, SpeechSynthesisClient

_ENDPOINT = "https://speech.example.test/models/tts"


def _response(status_code: int, content: bytes, reason: str = "") -> requests.Response:
    """Build a real `requests.Response` with a fixed status and body."""

    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.reason = reason
    response.url = _ENDPOINT
    return response


def test_synthesize_posts_transcript_and_returns_raw_body(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Client should send one bearer-authenticated JSON request and return the body."""

    captured: dict[str, object] = {}

    def _fake_post(url: str, **kwargs: object) -> requests.Response:
        captured["url"] = url
        captured.update(kwargs)
        return _response(200, b"RIFF\x00\x00audio")

    monkeypatch.setattr("pagevoice.tts.speech_client.requests.post", _fake_post)
    client = SpeechSynthesisClient(endpoint=_ENDPOINT, api_key=" hf_testkey ", timeout_seconds=12.5)

    payload = client.synthesize("Page 1: hello")

    assert payload == b"RIFF\x00\x00audio"
    assert captured["url"] == _ENDPOINT
    assert captured["json"] == {"inputs": "Page 1: hello"}
    assert captured["timeout"] == 12.5
    headers = captured["headers"]
    assert isinstance(headers, dict)
    assert headers["Authorization"] == "Bearer hf_testkey"
    assert headers["Content-Type"] == "application/json"


def test_synthesize_sends_empty_bearer_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """A missing key should still produce a request so the service can reject it."""

    captured: dict[str, object] = {}

    def _fake_post(url: str, **kwargs: object) -> requests.Response:
        captured.update(kwargs)
        return _response(200, b"")

    monkeypatch.setattr("pagevoice.tts.speech_client.requests.post", _fake_post)

    assert SpeechSynthesisClient(endpoint=_ENDPOINT).synthesize("text") == b""
    assert captured["headers"]["Authorization"] == "Bearer "  # type: ignore[index]


def test_default_endpoint_targets_hosted_inference_model() -> None:
    """The default client should target the hosted FastSpeech2 model."""

    assert SpeechSynthesisClient().endpoint == DEFAULT_SPEECH_ENDPOINT
    assert DEFAULT_SPEECH_ENDPOINT.endswith("/facebook/fastspeech2-en-ljspeech")


def test_non_success_status_raises_request_failed(monkeypatch: pytest.MonkeyPatch) -> None:
    """HTTP error statuses should map to `REQUEST_FAILED` with provider message."""

    monkeypatch.setattr(
        "pagevoice.tts.speech_client.requests.post",
        lambda url, **kwargs: _response(
            500, b'{"error": "Model is currently loading"}', "Internal Server Error"
        ),
    )
    client = SpeechSynthesisClient(endpoint=_ENDPOINT, api_key="key")

    with pytest.raises(SynthesisError) as exc_info:
        client.synthesize("text")

    error = exc_info.value
    assert error.kind is SynthesisFailure.REQUEST_FAILED
    assert error.status_code == 500
    assert error.stage == "synthesize"
    assert error.detail == "Speech request failed (HTTP 500): Model is currently loading"


@pytest.mark.parametrize("status_code", [300, 304])
def test_redirect_status_is_not_returned_as_audio(
    monkeypatch: pytest.MonkeyPatch, status_code: int
) -> None:
    """A final 3xx response is a failed request, not an audio payload."""

    monkeypatch.setattr(
        "pagevoice.tts.speech_client.requests.post",
        lambda url, **kwargs: _response(status_code, b"<html>moved</html>"),
    )

    with pytest.raises(SynthesisError) as exc_info:
        SpeechSynthesisClient(endpoint=_ENDPOINT, api_key="key").synthesize("Page 1: hi")

    assert exc_info.value.kind is SynthesisFailure.REQUEST_FAILED
    assert exc_info.value.status_code == status_code
    assert exc_info.value.detail.startswith(f"Speech request failed (HTTP {status_code})")


def test_error_body_tokens_are_redacted(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provider messages should never echo API-key-like tokens."""

    body = b'{"error": {"message": "Invalid token hf_abcdefghijklmnop"}}'
    monkeypatch.setattr(
        "pagevoice.tts.speech_client.requests.post",
        lambda url, **kwargs: _response(401, body, "Unauthorized"),
    )

    with pytest.raises(SynthesisError) as exc_info:
        SpeechSynthesisClient(endpoint=_ENDPOINT, api_key="hf_abcdefghijklmnop").synthesize("x")

    assert "hf_abcdefghijklmnop" not in exc_info.value.detail
    assert "[redacted-key]" in exc_info.value.detail
    assert exc_info.value.status_code == 401


def test_long_plain_text_error_body_is_shortened(monkeypatch: pytest.MonkeyPatch) -> None:
    """Non-JSON error bodies should be compacted and capped."""

    monkeypatch.setattr(
        "pagevoice.tts.speech_client.requests.post",
        lambda url, **kwargs: _response(503, b"busy " * 100, "Service Unavailable"),
    )

    with pytest.raises(SynthesisError) as exc_info:
        SpeechSynthesisClient(endpoint=_ENDPOINT).synthesize("x")

    assert exc_info.value.detail.endswith("...")
    assert len(exc_info.value.detail) < 240


@pytest.mark.parametrize(
    "exception",
    [
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
    ],
)
def test_transport_failures_raise_unreachable(
    monkeypatch: pytest.MonkeyPatch, exception: requests.RequestException
) -> None:
    """Requests that never received a response should map to `UNREACHABLE`."""

    def _failing_post(url: str, **kwargs: object) -> requests.Response:
        raise exception

    monkeypatch.setattr("pagevoice.tts.speech_client.requests.post", _failing_post)

    with pytest.raises(SynthesisError) as exc_info:
        SpeechSynthesisClient(endpoint=_ENDPOINT).synthesize("x")

    assert exc_info.value.kind is SynthesisFailure.UNREACHABLE
    assert exc_info.value.status_code is None
