"""Text watermarks."""

from __future__ import annotations

import logging

from reportlab.pdfgen.canvas import Canvas

from ..core.document import PdfSource, source_name
from ..core.exceptions import InputValidationError
from .overlay import font_for, stamp_pages

LOGGER = logging.getLogger("pdfsuit.annotate")

WATERMARK_GREY = (0.5, 0.5, 0.5)


def watermark_origin(text: str, font_size: float, width: float, height: float) -> tuple[float, float]:
    """Return the anchor point that roughly centres ``text`` on the page.

    The horizontal offset uses ``len(text) * font_size / 4`` as an estimate of
    half the rendered width rather than measuring glyph metrics.
    """

    return width / 2 - (len(text) * font_size) / 4, height / 2


def add_watermark(
    source: PdfSource,
    text: str,
    *,
    opacity: float = 0.3,
    rotation: float = 45,
    font_size: float = 50,
    font_path: str | None = None,
    name: str | None = None,
) -> bytes:
    """Draw ``text`` across every page of ``source``.

    Text outside the WinAnsi set needs ``font_path`` (or ``PDFSUIT_FONT_PATH``)
    pointing at a TrueType font that covers it.
    """

    if not text or not text.strip():
        raise InputValidationError("Watermark text must not be empty.")
    if not 0 <= opacity <= 1:
        raise InputValidationError(f"Opacity must be between 0 and 1, got {opacity}.")
    if font_size <= 0:
        raise InputValidationError(f"Font size must be positive, got {font_size}.")
    font_name = font_for(text, font_path)

    def draw(canvas: Canvas, index: int, width: float, height: float) -> None:
        x, y = watermark_origin(text, font_size, width, height)
        canvas.saveState()
        canvas.translate(x, y)
        canvas.rotate(rotation)
        canvas.setFont(font_name, font_size)
        canvas.setFillColorRGB(*WATERMARK_GREY)
        canvas.setFillAlpha(opacity)
        canvas.drawString(0, 0, text)
        canvas.restoreState()

    label = source_name(source, name)
    result = stamp_pages(source, draw, name=label)
    LOGGER.info("Watermarked %s with %r", label, text)
    return result


__all__ = ["add_watermark", "watermark_origin"]
