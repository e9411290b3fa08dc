from __future__ import annotations

import io
from datetime import date
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfsuit import (
    ImageInput,
    InputValidationError,
    PageRangeError,
    SignaturePlacement,
    UnsupportedFormatError,
    add_signature,
    add_text_signature,
)
from pdfsuit.annotate import format_signature_date


def _png(image_bytes: Callable[..., bytes]) -> ImageInput:
    return ImageInput(name="sig.png", data=image_bytes("PNG", (60, 20)), content_type="image/png")


def _text_positions(data: bytes, page_index: int) -> list[tuple[str, float, float]]:
    found: list[tuple[str, float, float]] = []

    def visit(text, cm, tm, font_dict, font_size) -> None:
        if text.strip():
            found.append((text.strip(), tm[4], tm[5]))

    PdfReader(io.BytesIO(data)).pages[page_index].extract_text(visitor_text=visit)
    return found


def test_add_signature_draws_only_on_requested_page(
    pdf_bytes: Callable[..., bytes],
    image_bytes: Callable[..., bytes],
    widths: Callable[[bytes], list[int]],
) -> None:
    output = add_signature(pdf_bytes(3), _png(image_bytes), SignaturePlacement(2, x=10, y=20, width=60, height=20))

    pages = PdfReader(io.BytesIO(output)).pages
    assert widths(output) == [101, 102, 103]
    assert "/XObject" in pages[1]["/Resources"]
    assert pages[0].get_contents() is None
    assert pages[2].get_contents() is None


def test_add_signature_writes_formatted_date(
    pdf_bytes: Callable[..., bytes], image_bytes: Callable[..., bytes]
) -> None:
    output = add_signature(
        pdf_bytes(1),
        _png(image_bytes),
        SignaturePlacement(1, x=10, y=20),
        include_date=True,
        date_format="DD.MM.YY",
        today=date(2024, 3, 5),
    )

    assert b"Date: 05.03.24" in PdfReader(io.BytesIO(output)).pages[0].get_contents().get_data()


def test_add_signature_validates_page_before_drawing(
    pdf_bytes: Callable[..., bytes], image_bytes: Callable[..., bytes]
) -> None:
    with pytest.raises(PageRangeError, match="PDF has 3 pages"):
        add_signature(pdf_bytes(3), _png(image_bytes), SignaturePlacement(4, x=0, y=0))


def test_add_signature_rejects_other_image_formats(
    pdf_bytes: Callable[..., bytes], image_bytes: Callable[..., bytes]
) -> None:
    gif = ImageInput(name="sig.gif", data=image_bytes("GIF"))

    with pytest.raises(UnsupportedFormatError):
        add_signature(pdf_bytes(1), gif, SignaturePlacement(1, x=0, y=0))


def test_add_signature_rejects_empty_box(
    pdf_bytes: Callable[..., bytes], image_bytes: Callable[..., bytes]
) -> None:
    with pytest.raises(InputValidationError, match="must be positive"):
        add_signature(pdf_bytes(1), _png(image_bytes), SignaturePlacement(1, x=0, y=0, width=0))


def test_add_text_signature_measures_from_top_left(pdf_bytes: Callable[..., bytes]) -> None:
    output = add_text_signature(pdf_bytes(2), "Signed", SignaturePlacement(2, x=40, y=30), font_size=24)

    ((text, x, y),) = _text_positions(output, 1)
    assert text == "Signed"
    assert (x, y) == (pytest.approx(40), pytest.approx(200 - 30 - 24))
    assert PdfReader(io.BytesIO(output)).pages[0].get_contents() is None


@pytest.mark.parametrize(
    ("text", "options"),
    [("", {}), ("Ada", {"colour": "red"}), ("Ada", {"font_size": 0})],
)
def test_add_text_signature_rejects_bad_options(
    pdf_bytes: Callable[..., bytes], text: str, options: dict[str, object]
) -> None:
    with pytest.raises(InputValidationError):
        add_text_signature(pdf_bytes(1), text, SignaturePlacement(1, x=0, y=0), **options)


def test_format_signature_date() -> None:
    day = date(2025, 11, 9)

    assert format_signature_date(day) == "09/11/2025"
    assert format_signature_date(day, "YYYY-MM-DD") == "2025-11-09"
    assert format_signature_date(day, "DD/MM/YY") == "09/11/25"
