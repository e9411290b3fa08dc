from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfsuit import ExternalEngineError, InputValidationError, add_page_numbers, add_watermark
from pdfsuit.annotate import watermark_origin


def _page_text(data: bytes) -> list[str]:
    return [page.extract_text() for page in PdfReader(io.BytesIO(data)).pages]


def test_watermark_origin_uses_width_heuristic() -> None:
    assert watermark_origin("DRAFT", 40, 600, 800) == (600 / 2 - 5 * 40 / 4, 400)


def test_add_watermark_stamps_every_page(
    pdf_bytes: Callable[..., bytes], widths: Callable[[bytes], list[int]]
) -> None:
    output = add_watermark(pdf_bytes(3), "CONFIDENTIAL", opacity=0.5, rotation=30, font_size=20)

    assert widths(output) == [101, 102, 103]
    pages = PdfReader(io.BytesIO(output)).pages
    assert all(b"CONFIDENTIAL" in page.get_contents().get_data() for page in pages)


@pytest.mark.parametrize(
    ("text", "options"),
    [("", {}), ("   ", {}), ("x", {"opacity": 1.5}), ("x", {"font_size": 0})],
)
def test_add_watermark_rejects_bad_options(
    pdf_bytes: Callable[..., bytes], text: str, options: dict[str, float]
) -> None:
    with pytest.raises(InputValidationError):
        add_watermark(pdf_bytes(1), text, **options)


@pytest.mark.parametrize("position", ["bottom", "top"])
def test_add_page_numbers_numbers_each_page(pdf_bytes: Callable[..., bytes], position: str) -> None:
    output = add_page_numbers(pdf_bytes(3), position=position)

    assert [text.strip() for text in _page_text(output)] == ["1", "2", "3"]


def test_add_page_numbers_rejects_unknown_position(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(InputValidationError, match="Position must be one of"):
        add_page_numbers(pdf_bytes(1), position="middle")


def _vera_font() -> str:
    import reportlab

    return str(Path(reportlab.__file__).parent / "fonts" / "Vera.ttf")


def _base_fonts(data: bytes) -> set[str]:
    fonts = PdfReader(io.BytesIO(data)).pages[0]["/Resources"]["/Font"]
    return {str(font.get_object()["/BaseFont"]) for font in fonts.values()}


def test_add_watermark_rejects_text_outside_builtin_font(
    pdf_bytes: Callable[..., bytes], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("PDFSUIT_FONT_PATH", raising=False)

    with pytest.raises(InputValidationError, match="PDFSUIT_FONT_PATH"):
        add_watermark(pdf_bytes(1), "Конфиденциально")


def test_add_watermark_keeps_builtin_font_for_latin_text(pdf_bytes: Callable[..., bytes]) -> None:
    output = add_watermark(pdf_bytes(1), "Café “draft”", font_path=_vera_font())

    assert _base_fonts(output) == {"/Helvetica"}


def test_add_watermark_uses_truetype_font_for_other_scripts(pdf_bytes: Callable[..., bytes]) -> None:
    output = add_watermark(pdf_bytes(1), "π ≈ 3.14", font_path=_vera_font())

    assert any("Vera" in name for name in _base_fonts(output))


def test_truetype_font_can_come_from_environment(
    pdf_bytes: Callable[..., bytes], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PDFSUIT_FONT_PATH", _vera_font())

    output = add_watermark(pdf_bytes(1), "∞")

    assert any("Vera" in name for name in _base_fonts(output))


def test_missing_font_file_is_an_engine_error(pdf_bytes: Callable[..., bytes], tmp_path: Path) -> None:
    with pytest.raises(ExternalEngineError, match="Unable to load font"):
        add_watermark(pdf_bytes(1), "Ωmega", font_path=str(tmp_path / "missing.ttf"))
