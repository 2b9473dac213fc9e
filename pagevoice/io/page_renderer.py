"""Page rasterization at a fixed magnification."""

from __future__ import annotations

import math

from PIL import Image

from ..errors import RenderError
from .document import PdfDocument

DEFAULT_RENDER_SCALE = 1.5


class PageRenderer:
    """Render single PDF pages into independent raster surfaces."""

    def __init__(self, scale: float = DEFAULT_RENDER_SCALE) -> None:
        if not math.isfinite(scale) or scale <= 0:
            raise ValueError("Render scale must be a positive finite number.")
        self.scale = scale

    def render(self, document: PdfDocument, page_number: int) -> Image.Image:
        """Render one 1-based page and return a fully drawn image.

        The image is the page's native box scaled by `self.scale`. It owns its
        pixel memory, so it stays valid after the native page is closed.
        """

        try:
            page = document.raster_page(page_number)
        except Exception as exc:
            raise RenderError(page_number, str(exc)) from exc

        try:
            bitmap = page.render(scale=self.scale)
            try:
                # to_pil() shares the bitmap buffer
                image = bitmap.to_pil().copy()
            finally:
                bitmap.close()
        except Exception as exc:
            raise RenderError(page_number, str(exc)) from exc
        finally:
            page.close()
        return image
