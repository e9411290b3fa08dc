"""Signature images and typed signatures placed on a single page.

Placements are given the way a viewer shows a page: ``x`` and ``y`` measure
from the top-left corner. They are flipped to PDF's bottom-left origin
before drawing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from ..core.document import PdfSource, load_reader, page_count, source_name
from ..core.exceptions import InputValidationError
from ..images.converter import ImageInput, decode_image
from ..pages.ranges import validate_page_numbers
from .overlay import FONT_NAME, font_for, stamp_pages

LOGGER = logging.getLogger("pdfsuit.annotate")

DEFAULT_DATE_FORMAT = "DD/MM/YYYY"
DATE_FONT_SIZE = 10
DATE_GAP = 20
_HEX_COLOUR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class SignaturePlacement:
    """Where a signature goes: a 1-based page and a box measured from the top-left."""

    page_number: int
    x: float
    y: float
    width: float = 150
    height: float = 50


def format_signature_date(value: date, pattern: str = DEFAULT_DATE_FORMAT) -> str:
    """Fill ``DD``, ``MM``, ``YYYY`` and ``YY`` in ``pattern`` from ``value``."""

    return (
        pattern.replace("DD", f"{value.day:02d}")
        .replace("MM", f"{value.month:02d}")
        .replace("YYYY", str(value.year))
        .replace("YY", str(value.year)[-2:])
    )


def parse_hex_colour(value: str) -> tuple[float, float, float]:
    if not _HEX_COLOUR.match(value):
        raise InputValidationError(f"Colour must look like #RRGGBB, got {value!r}.")
    red, green, blue = (int(value[i : i + 2], 16) / 255 for i in (1, 3, 5))
    return red, green, blue


def _target_page(source: PdfSource, placement: SignaturePlacement, label: str) -> int:
    total = page_count(load_reader(source, name=label), name=label)
    (number,) = validate_page_numbers([placement.page_number], total_pages=total)
    if placement.width <= 0 or placement.height <= 0:
        raise InputValidationError(
            f"Signature size must be positive, got {placement.width}x{placement.height}."
        )
    return number - 1


def add_signature(
    source: PdfSource,
    image: ImageInput,
    placement: SignaturePlacement,
    *,
    include_date: bool = False,
    date_format: str | None = None,
    today: date | None = None,
    name: str | None = None,
) -> bytes:
    """Draw a PNG or JPEG signature on one page, optionally dated underneath."""

    label = source_name(source, name)
    index = _target_page(source, placement, label)
    picture = ImageReader(decode_image(image))
    date_line = None
    date_font = FONT_NAME
    if include_date:
        date_line = f"Date: {format_signature_date(today or date.today(), date_format or DEFAULT_DATE_FORMAT)}"
        date_font = font_for(date_line)

    def draw(canvas: Canvas, page_index: int, width: float, height: float) -> None:
        bottom = height - placement.y - placement.height
        canvas.drawImage(
            picture,
            placement.x,
            bottom,
            width=placement.width,
            height=placement.height,
            mask="auto",
        )
        if date_line is not None:
            canvas.setFont(date_font, DATE_FONT_SIZE)
            canvas.setFillColorRGB(0, 0, 0)
            canvas.drawString(placement.x, bottom - DATE_GAP, date_line)

    result = stamp_pages(source, draw, name=label, page_indices={index})
    LOGGER.info("Signed page %d of %s", index + 1, label)
    return result


def add_text_signature(
    source: PdfSource,
    text: str,
    placement: SignaturePlacement,
    *,
    font_size: float = 24,
    colour: str = "#000000",
    font_path: str | None = None,
    name: str | None = None,
) -> bytes:
    """Type ``text`` as a signature on one page.

    Only ``placement.x``, ``placement.y`` and the page are used; the text
    baseline sits ``font_size`` below ``y``.
    """

    if not text or not text.strip():
        raise InputValidationError("Signature text must not be empty.")
    if font_size <= 0:
        raise InputValidationError(f"Font size must be positive, got {font_size}.")
    label = source_name(source, name)
    index = _target_page(source, placement, label)
    rgb = parse_hex_colour(colour)
    font_name = font_for(text, font_path)

    def draw(canvas: Canvas, page_index: int, width: float, height: float) -> None:
        canvas.setFont(font_name, font_size)
        canvas.setFillColorRGB(*rgb)
        canvas.drawString(placement.x, height - placement.y - font_size, text)

    result = stamp_pages(source, draw, name=label, page_indices={index})
    LOGGER.info("Typed signature on page %d of %s", index + 1, label)
    return result


__all__ = [
    "DEFAULT_DATE_FORMAT",
    "SignaturePlacement",
    "add_signature",
    "add_text_signature",
    "format_signature_date",
    "parse_hex_colour",
]
