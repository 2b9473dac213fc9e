"""Integration-test fixtures for deterministic speech and credential behavior."""

from __future__ import annotations

import io
import wave

import pytest
import requests

from tests.credential_fakes import InMemoryCredentialStore


def wav_payload() -> bytes:
    """Return a deterministic short silent WAV payload."""

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(16000)
        wav_file.writeframes(b"\x00\x00" * 1600)
    return buffer.getvalue()


@pytest.fixture
def speech_requests(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    """Mock speech HTTP calls with a WAV response and record each request."""

    recorded: list[dict[str, object]] = []

    def _fake_post(url: str, **kwargs: object) -> requests.Response:
        recorded.append({"url": url, **kwargs})
        response = requests.Response()
        response.status_code = 200
        response._content = wav_payload()
        response.url = url
        return response

    monkeypatch.setattr("pagevoice.tts.speech_client.requests.post", _fake_post)
    return recorded


@pytest.fixture
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Replace the CLI secure credential store with an in-memory store."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("pagevoice.cli.create_credential_store", lambda: store)
    return store
