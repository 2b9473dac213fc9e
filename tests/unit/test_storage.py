"""Unit tests for filesystem artifact storage."""

from __future__ import annotations

import json
from pathlib import Path

from PIL import Image

from pagevoice.io.storage import ArtifactStore


def test_artifact_store_writes_text_and_sorted_json(tmp_path: Path) -> None:
    """Text and JSON artifacts should be written under nested directories."""

    store = ArtifactStore(tmp_path)

    text_path = store.save_text(Path("text/transcript.txt"), "Page 1: hello")
    json_path = store.save_json(Path("run_manifest.json"), {"b": 1, "a": "x"})

    assert text_path == tmp_path / "text" / "transcript.txt"
    assert text_path.read_text(encoding="utf-8") == "Page 1: hello"
    raw_json = json_path.read_text(encoding="utf-8")
    assert json.loads(raw_json) == {"a": "x", "b": 1}
    assert raw_json.index('"a"') < raw_json.index('"b"')


def test_artifact_store_writes_audio_bytes(tmp_path: Path) -> None:
    """Audio artifacts should be stored byte-for-byte."""

    store = ArtifactStore(tmp_path)

    path = store.save_audio(Path("audio/speech.wav"), b"RIFF\x00\x01")

    assert path.read_bytes() == b"RIFF\x00\x01"


def test_artifact_store_saves_png_and_jpeg_images(tmp_path: Path) -> None:
    """Images should be saved in the requested format, converting alpha for JPEG."""

    store = ArtifactStore(tmp_path)
    image = Image.new("RGBA", (10, 6), (255, 0, 0, 128))

    png_path = store.save_image(Path("pages/page-0001.png"), image, "png")
    jpeg_path = store.save_image(Path("pages/page-0001.jpg"), image, "jpeg")

    with Image.open(png_path) as saved_png:
        assert saved_png.format == "PNG"
        assert saved_png.size == (10, 6)
    with Image.open(jpeg_path) as saved_jpeg:
        assert saved_jpeg.format == "JPEG"
        assert saved_jpeg.mode == "RGB"
