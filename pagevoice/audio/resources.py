"""Playable audio resource lifecycle.

Responsibilities:
- Publish synthesized audio payloads as file-backed, player-consumable handles.
- Keep at most one current handle and release superseded ones.
- Release every live handle on close so repeated runs do not accumulate files.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from ..models.datatypes import AudioHandle

_AUDIO_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"RIFF", ".wav"),
    (b"fLaC", ".flac"),
    (b"OggS", ".ogg"),
    (b"ID3", ".mp3"),
    (b"\xff\xfb", ".mp3"),
    (b"\xff\xf3", ".mp3"),
    (b"\xff\xf2", ".mp3"),
)


def audio_extension(payload: bytes) -> str:
    """Return a file extension guessed from the payload's leading bytes."""

    for signature, extension in _AUDIO_SIGNATURES:
        if payload.startswith(signature):
            return extension
    return ".bin"


class AudioResourceManager:
    """Owner of the current playable audio handle.

    Payloads are written under `root`; when no root is given a private
    temporary directory is created lazily and removed on `close()`.
    """

    def __init__(self, root: Path | None = None, stem: str = "speech") -> None:
        self._root = root
        self._owns_root = root is None
        self._stem = stem
        self._sequence = 0
        self._live: dict[Path, AudioHandle] = {}
        self._current: AudioHandle | None = None

    @property
    def current(self) -> AudioHandle | None:
        return self._current

    def live_handles(self) -> tuple[AudioHandle, ...]:
        """Return handles that are published and not yet released."""

        return tuple(self._live.values())

    def publish(self, payload: bytes) -> AudioHandle:
        """Publish a payload as the new current handle, releasing the previous one.

        Empty payloads are published too; playback is the player's concern.
        """

        root = self._ensure_root()
        self._sequence += 1
        path = root / f"{self._stem}-{self._sequence:04d}{audio_extension(payload)}"
        path.write_bytes(payload)
        handle = AudioHandle(
            resource_ref=path.resolve().as_uri(),
            payload_size=len(payload),
            path=path,
        )
        previous = self._current
        self._live[path] = handle
        self._current = handle
        if previous is not None:
            self.release(previous)
        return handle

    def release(self, handle: AudioHandle) -> None:
        """Release a handle and delete its backing file; unknown handles are ignored."""

        if self._live.pop(handle.path, None) is None:
            return
        if self._current == handle:
            self._current = None
        handle.path.unlink(missing_ok=True)

    def close(self) -> None:
        """Release every live handle and remove the private root directory."""

        for handle in list(self._live.values()):
            self.release(handle)
        if self._owns_root and self._root is not None:
            shutil.rmtree(self._root, ignore_errors=True)
            self._root = None

    def __enter__(self) -> AudioResourceManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_root(self) -> Path:
        if self._root is None:
            self._root = Path(tempfile.mkdtemp(prefix="pagevoice-audio-"))
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root
