"""Page numbering."""

from __future__ import annotations

import logging

from reportlab.pdfgen.canvas import Canvas

from ..core.document import PdfSource, source_name
from ..core.exceptions import InputValidationError
from .overlay import FONT_NAME, stamp_pages

LOGGER = logging.getLogger("pdfsuit.annotate")

POSITIONS = ("bottom", "top")
EDGE_OFFSET = 30


def add_page_numbers(
    source: PdfSource,
    *,
    position: str = "bottom",
    font_size: float = 12,
    name: str | None = None,
) -> bytes:
    """Draw the 1-based page number near the top or bottom edge of every page."""

    if position not in POSITIONS:
        raise InputValidationError(f"Position must be one of {POSITIONS}, got {position!r}.")
    if font_size <= 0:
        raise InputValidationError(f"Font size must be positive, got {font_size}.")

    def draw(canvas: Canvas, index: int, width: float, height: float) -> None:
        y = EDGE_OFFSET if position == "bottom" else height - EDGE_OFFSET
        canvas.setFont(FONT_NAME, font_size)
        canvas.setFillColorRGB(0, 0, 0)
        canvas.drawString(width / 2 - 10, y, str(index + 1))

    label = source_name(source, name)
    result = stamp_pages(source, draw, name=label)
    LOGGER.info("Numbered pages of %s at the %s", label, position)
    return result


__all__ = ["POSITIONS", "add_page_numbers"]
