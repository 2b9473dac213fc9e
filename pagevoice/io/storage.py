"""Artifact storage abstraction.

Responsibilities:
- Provide deterministic filesystem storage for text, JSON, image, and audio artifacts.
"""

from __future__ import annotations

import json
from pathlib import Path

from PIL import Image


class ArtifactStore:
    """Filesystem-backed artifact store for one run's deliverables."""

    def __init__(self, root: Path) -> None:
        """Initialize the store with a root output directory."""

        self.root = root

    def save_text(self, relative_path: Path, content: str) -> Path:
        """Save text content and return final path."""

        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def save_json(self, relative_path: Path, payload: dict[str, object]) -> Path:
        """Save JSON-serializable payload and return final path."""

        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        return path

    def save_audio(self, relative_path: Path, data: bytes) -> Path:
        """Save audio bytes and return final path."""

        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def save_image(self, relative_path: Path, image: Image.Image, image_format: str) -> Path:
        """Save a raster image in the given Pillow format and return final path."""

        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if image_format.upper() == "JPEG" and image.mode not in {"RGB", "L"}:
            image = image.convert("RGB")
        image.save(path, format=image_format.upper())
        return path
