from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
import pytesseract
from pypdf import PdfReader

from pdfsuit import ExternalEngineError, InputValidationError, UnsupportedFormatError
from pdfsuit.ocr import (
    OCRResult,
    Recognition,
    TesseractRecognizer,
    create_searchable_pdf,
    format_ocr_results,
    ocr_to_searchable_pdf,
    perform_ocr,
)
from pdfsuit.ocr.engine import detect_kind
from pdfsuit.ocr.recognizer import recognition_from_data


class FakeRecognizer:
    """Records every image it is asked to read."""

    def __init__(self, language: str, *, fail_on: int | None = None) -> None:
        self.language = language
        self.fail_on = fail_on
        self.sizes: list[tuple[int, int]] = []
        self.entered = False
        self.exited = False

    def __enter__(self) -> "FakeRecognizer":
        self.entered = True
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exited = True

    def recognize(self, image, *, name=None) -> Recognition:
        self.sizes.append(image.size)
        if self.fail_on == len(self.sizes):
            raise ExternalEngineError("Text recognition failed", filename=name)
        return Recognition(text=f"page text {len(self.sizes)}", confidence=80.0 + len(self.sizes))


@pytest.fixture()
def recognizers() -> list[FakeRecognizer]:
    return []


@pytest.fixture()
def factory(recognizers: list[FakeRecognizer]) -> Callable[[str], FakeRecognizer]:
    def _create(language: str) -> FakeRecognizer:
        recognizer = FakeRecognizer(language)
        recognizers.append(recognizer)
        return recognizer

    return _create


def test_perform_ocr_reads_every_pdf_page(
    pdf_bytes: Callable[..., bytes],
    factory: Callable[[str], FakeRecognizer],
    recognizers: list[FakeRecognizer],
) -> None:
    progress: list[int] = []

    results = perform_ocr(pdf_bytes(3), "eng", progress.append, recognizer_factory=factory)

    assert results == [
        OCRResult("page text 1", 1, 81.0),
        OCRResult("page text 2", 2, 82.0),
        OCRResult("page text 3", 3, 83.0),
    ]
    assert progress == [33, 67, 100]
    (recognizer,) = recognizers
    assert recognizer.sizes == [(202, 400), (204, 400), (206, 400)]
    assert recognizer.entered and recognizer.exited


def test_perform_ocr_treats_an_image_as_page_one(
    image_bytes: Callable[..., bytes],
    factory: Callable[[str], FakeRecognizer],
    recognizers: list[FakeRecognizer],
) -> None:
    progress: list[int] = []

    results = perform_ocr(
        image_bytes("JPEG", (50, 20)),
        "eng",
        progress.append,
        content_type="image/jpeg",
        recognizer_factory=factory,
    )

    assert results == [OCRResult("page text 1", 1, 81.0)]
    assert progress == [100]
    assert recognizers[0].sizes == [(50, 20)]


def test_perform_ocr_uses_configured_language(
    monkeypatch: pytest.MonkeyPatch,
    pdf_bytes: Callable[..., bytes],
    factory: Callable[[str], FakeRecognizer],
    recognizers: list[FakeRecognizer],
) -> None:
    monkeypatch.setenv("PDFSUIT_OCR_LANG", "deu")

    perform_ocr(pdf_bytes(1), recognizer_factory=factory)

    assert recognizers[0].language == "deu"


def test_perform_ocr_releases_recognizer_on_failure(pdf_bytes: Callable[..., bytes]) -> None:
    recognizer = FakeRecognizer("eng", fail_on=2)

    with pytest.raises(ExternalEngineError, match="page 2"):
        perform_ocr(pdf_bytes(3), "eng", recognizer_factory=lambda language: recognizer)

    assert recognizer.exited is True
    assert len(recognizer.sizes) == 2


def test_perform_ocr_rejects_unknown_format(factory: Callable[[str], FakeRecognizer]) -> None:
    with pytest.raises(UnsupportedFormatError, match="PDF or image"):
        perform_ocr(b"just some text", recognizer_factory=factory, name="notes.txt")


def test_detect_kind(pdf_bytes: Callable[..., bytes], image_bytes: Callable[..., bytes]) -> None:
    assert detect_kind(pdf_bytes(1)) == "pdf"
    assert detect_kind(image_bytes()) == "image"
    assert detect_kind(b"anything", content_type="application/pdf") == "pdf"
    assert detect_kind(b"anything", content_type="image/png") == "image"


def test_recognition_from_data_groups_lines() -> None:
    data = {
        "text": ["", "Hello", "world", "", "Second", "line", " "],
        "conf": [-1, 90, 80, "-1", "70", 60.0, 95],
        "block_num": [1, 1, 1, 1, 1, 1, 1],
        "par_num": [1, 1, 1, 1, 1, 1, 1],
        "line_num": [0, 1, 1, 2, 2, 2, 2],
    }

    recognition = recognition_from_data(data)

    assert recognition.text == "Hello world\nSecond line"
    assert recognition.confidence == pytest.approx(75.0)
    assert recognition_from_data({"text": []}) == Recognition("", 0.0)


def test_tesseract_recognizer_reports_missing_engine(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing() -> None:
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)

    with pytest.raises(ExternalEngineError, match="not installed"):
        with TesseractRecognizer("eng"):
            pass


def test_tesseract_recognizer_lifecycle(
    monkeypatch: pytest.MonkeyPatch, image_bytes: Callable[..., bytes]
) -> None:
    from PIL import Image

    calls: list[str] = []

    def image_to_data(image, lang, output_type):
        calls.append(lang)
        return {"text": ["Scanned"], "conf": [88], "block_num": [1], "par_num": [1], "line_num": [1]}

    monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
    monkeypatch.setattr(pytesseract, "image_to_data", image_to_data)
    image = Image.open(io.BytesIO(image_bytes()))

    recognizer = TesseractRecognizer("fra")
    with recognizer:
        assert recognizer.active
        assert recognizer.recognize(image) == Recognition("Scanned", 88.0)
    assert not recognizer.active
    assert calls == ["fra"]

    with pytest.raises(RuntimeError, match="inside a 'with' block"):
        recognizer.recognize(image)


def test_tesseract_recognizer_wraps_engine_errors(
    monkeypatch: pytest.MonkeyPatch, image_bytes: Callable[..., bytes]
) -> None:
    from PIL import Image

    def broken(image, lang, output_type):
        raise pytesseract.TesseractError(1, "Failed loading language 'xyz'")

    monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
    monkeypatch.setattr(pytesseract, "image_to_data", broken)

    with TesseractRecognizer("xyz") as recognizer:
        with pytest.raises(ExternalEngineError, match="Text recognition failed"):
            recognizer.recognize(Image.open(io.BytesIO(image_bytes())), name="scan.png")


def test_create_searchable_pdf_only_touches_recognised_pages(
    pdf_bytes: Callable[..., bytes], widths: Callable[[bytes], list[int]]
) -> None:
    results = [
        OCRResult("Hello\n   world", 1, 90.0),
        OCRResult("   ", 2, 10.0),
        OCRResult("Third page", 3, 70.0),
        OCRResult("Beyond the end", 9, 70.0),
    ]

    output = create_searchable_pdf(pdf_bytes(3), results)

    pages = PdfReader(io.BytesIO(output)).pages
    assert widths(output) == [101, 102, 103]
    assert b"Hello world" in pages[0].get_contents().get_data()
    assert pages[1].get_contents() is None
    assert b"Third page" in pages[2].get_contents().get_data()


def test_create_searchable_pdf_rejects_text_outside_builtin_font(
    pdf_bytes: Callable[..., bytes], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("PDFSUIT_FONT_PATH", raising=False)
    results = [OCRResult("Hello", 1, 90.0), OCRResult("Привет мир 中文", 2, 80.0)]

    with pytest.raises(InputValidationError, match="PDFSUIT_FONT_PATH"):
        create_searchable_pdf(pdf_bytes(2), results)


def test_create_searchable_pdf_draws_other_scripts_with_truetype_font(
    pdf_bytes: Callable[..., bytes],
) -> None:
    import reportlab

    vera = str(Path(reportlab.__file__).parent / "fonts" / "Vera.ttf")
    results = [OCRResult("Hello", 1, 90.0), OCRResult("π ≈ 3.14", 2, 80.0)]

    output = create_searchable_pdf(pdf_bytes(2), results, font_path=vera)

    pages = PdfReader(io.BytesIO(output)).pages
    fonts = pages[1]["/Resources"]["/Font"]
    assert any("Vera" in str(font.get_object()["/BaseFont"]) for font in fonts.values())
    assert b"Hello" in pages[0].get_contents().get_data()


def test_ocr_to_searchable_pdf_converts_images(
    image_bytes: Callable[..., bytes], factory: Callable[[str], FakeRecognizer]
) -> None:
    output = ocr_to_searchable_pdf(
        image_bytes("PNG", (60, 40)),
        "eng",
        content_type="image/png",
        name="scan.png",
        recognizer_factory=factory,
    )

    (page,) = PdfReader(io.BytesIO(output)).pages
    assert (round(float(page.mediabox.width)), round(float(page.mediabox.height))) == (60, 40)
    assert b"page text 1" in page.get_contents().get_data()


def test_format_ocr_results() -> None:
    text = format_ocr_results([OCRResult("abc", 1, 91.234), OCRResult("", 2, 0.0)])

    assert text == (
        "=== Page 1 (Confidence: 91.23%) ===\nabc\n"
        "\n"
        "=== Page 2 (Confidence: 0.00%) ===\n\n"
    )
