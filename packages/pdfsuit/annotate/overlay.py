"""Draw-time overlays merged onto existing pages."""

from __future__ import annotations

import io
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Callable

from pypdf import PageObject, PdfReader, PdfWriter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen.canvas import Canvas

from ..core.document import PdfSource, load_reader, page_count, serialize, source_name
from ..core.exceptions import ExternalEngineError, InputValidationError

LOGGER = logging.getLogger("pdfsuit.annotate")

FONT_NAME = "Helvetica"
# Standard Type1 fonts only carry the WinAnsi character set.
FONT_ENCODING = "cp1252"
FONT_PATH_ENV = "PDFSUIT_FONT_PATH"

PageDrawer = Callable[[Canvas, int, float, float], None]
"""Callback receiving ``(canvas, page_index, width, height)``."""


@lru_cache(maxsize=None)
def register_truetype_font(path: str) -> str:
    """Register the TrueType font at ``path`` with reportlab and return its name."""

    font_name = f"PDFSuit-{Path(path).stem}"
    try:
        pdfmetrics.registerFont(TTFont(font_name, path))
    except (OSError, TTFError) as exc:
        LOGGER.error("Failed to load font %s: %s", path, exc)
        raise ExternalEngineError("Unable to load font", filename=path) from exc
    return font_name


def font_for(text: str, font_path: str | None = None) -> str:
    """Return the name of a font able to draw ``text``.

    Text inside the WinAnsi set is drawn with Helvetica. Anything else needs a
    Unicode TrueType font, given as ``font_path`` or through
    ``PDFSUIT_FONT_PATH``; without one the text is rejected instead of being
    drawn as placeholder boxes.
    """

    unsupported = sorted({char for char in text if not _encodable(char)})
    if not unsupported:
        return FONT_NAME
    path = font_path or os.getenv(FONT_PATH_ENV)
    if path:
        return register_truetype_font(path)
    raise InputValidationError(
        f"Text contains characters the built-in font cannot draw: {''.join(unsupported)!r}. "
        f"Set {FONT_PATH_ENV} to a Unicode TrueType font."
    )


def _encodable(char: str) -> bool:
    try:
        char.encode(FONT_ENCODING)
    except UnicodeEncodeError:
        return False
    return True


def build_overlay(width: float, height: float, draw: Callable[[Canvas], None]) -> PageObject:
    """Render ``draw`` onto a transparent page of the given size."""

    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=(width, height))
    draw(canvas)
    canvas.showPage()
    canvas.save()
    buffer.seek(0)
    return PdfReader(buffer).pages[0]


def stamp_pages(
    source: PdfSource,
    drawer: PageDrawer,
    *,
    name: str | None = None,
    page_indices: set[int] | None = None,
) -> bytes:
    """Merge an overlay produced by ``drawer`` onto pages of ``source``.

    Every page is stamped unless ``page_indices`` restricts the selection.
    """

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    page_count(reader, name=label)

    writer = PdfWriter(clone_from=reader)
    for index, page in enumerate(writer.pages):
        if page_indices is not None and index not in page_indices:
            continue
        width = float(page.mediabox.width)
        height = float(page.mediabox.height)
        try:
            overlay = build_overlay(width, height, lambda canvas: drawer(canvas, index, width, height))
            page.merge_page(overlay)
        except Exception as exc:  # reportlab and pypdf raise assorted errors
            LOGGER.error("Failed to stamp page %s of %s: %s", index + 1, label, exc)
            raise ExternalEngineError(f"Unable to draw on page {index + 1}", filename=label) from exc

    return serialize(writer, name=label)


__all__ = [
    "FONT_NAME",
    "FONT_PATH_ENV",
    "PageDrawer",
    "build_overlay",
    "font_for",
    "register_truetype_font",
    "stamp_pages",
]
