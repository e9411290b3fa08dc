"""Optical character recognition over PDFs and images.

PDF pages are rasterised with PyMuPDF at twice their nominal resolution and
handed to a :class:`~pdfsuit.ocr.recognizer.Recognizer`. The recognizer is
acquired once per call and released whether recognition succeeds or fails.
"""

from __future__ import annotations

import io
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Literal, Sequence

import fitz
from PIL import Image, UnidentifiedImageError
from reportlab.pdfgen.canvas import Canvas

from ..annotate.overlay import font_for, stamp_pages
from ..core.document import PdfSource, source_name
from ..core.exceptions import ExternalEngineError, InputValidationError, UnsupportedFormatError
from ..images.converter import ImageInput, images_to_pdf
from .recognizer import Recognizer, TesseractRecognizer

LOGGER = logging.getLogger("pdfsuit.ocr")

RENDER_SCALE = 2.0
SEARCHABLE_FONT_SIZE = 0.1
SEARCHABLE_OPACITY = 0.01

ProgressCallback = Callable[[int], None]
RecognizerFactory = Callable[[str], Recognizer]
SourceKind = Literal["pdf", "image"]


def default_language() -> str:
    return os.getenv("PDFSUIT_OCR_LANG", "eng")


@dataclass(frozen=True)
class OCRResult:
    """Recognised text for one page (1-based) with its mean confidence."""

    text: str
    page_number: int
    confidence: float


def _read_source(source: PdfSource, label: str) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        path = Path(source).expanduser()
        if not path.is_file():
            raise InputValidationError(f"Input file does not exist: {path}")
        data = path.read_bytes()
    if not data:
        raise InputValidationError(f"File '{label}' is empty.")
    return data


def detect_kind(data: bytes, *, content_type: str | None = None, name: str | None = None) -> SourceKind:
    """Classify ``data`` as a PDF or a raster image."""

    if content_type:
        lowered = content_type.lower()
        if lowered == "application/pdf":
            return "pdf"
        if lowered.startswith("image/"):
            return "image"
    if data.startswith(b"%PDF-"):
        return "pdf"
    try:
        with Image.open(io.BytesIO(data)) as candidate:
            candidate.verify()
    except (UnidentifiedImageError, OSError) as exc:
        raise UnsupportedFormatError(
            name or "upload", "File must be a PDF or image (PNG, JPG, JPEG)"
        ) from exc
    return "image"


def _open_document(data: bytes, label: str) -> fitz.Document:
    try:
        return fitz.open(stream=data, filetype="pdf")
    except Exception as exc:  # PyMuPDF raises FileDataError and RuntimeError
        LOGGER.error("PyMuPDF could not open %s: %s", label, exc)
        raise ExternalEngineError("Unable to read PDF", filename=label) from exc


def rasterize_page(page: "fitz.Page", scale: float = RENDER_SCALE) -> Image.Image:
    """Render ``page`` to an RGB Pillow image at ``scale`` times its size."""

    pixmap = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    return Image.frombytes("RGB", (pixmap.width, pixmap.height), pixmap.samples)


def _report(on_progress: ProgressCallback | None, done: int, total: int) -> None:
    if on_progress is not None:
        on_progress(round(done / total * 100))


def perform_ocr(
    source: PdfSource,
    language: str | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    content_type: str | None = None,
    name: str | None = None,
    recognizer_factory: RecognizerFactory = TesseractRecognizer,
) -> list[OCRResult]:
    """Recognise text in a PDF or an image.

    Returns one :class:`OCRResult` per page in page order; a single image
    counts as page 1. ``on_progress`` receives integer percentages as pages
    complete.
    """

    label = source_name(source, name)
    data = _read_source(source, label)
    kind = detect_kind(data, content_type=content_type, name=label)
    language = language or default_language()

    results: list[OCRResult] = []
    with recognizer_factory(language) as recognizer:
        if kind == "image":
            try:
                image = Image.open(io.BytesIO(data))
                image.load()
            except (UnidentifiedImageError, OSError) as exc:
                raise UnsupportedFormatError(label, "File must be a PDF or image (PNG, JPG, JPEG)") from exc
            recognition = recognizer.recognize(image, name=label)
            results.append(OCRResult(recognition.text, 1, recognition.confidence))
            _report(on_progress, 1, 1)
        else:
            document = _open_document(data, label)
            with document:
                total = document.page_count
                if total == 0:
                    raise InputValidationError(f"PDF '{label}' contains no pages.")
                for index in range(total):
                    image = rasterize_page(document[index])
                    recognition = recognizer.recognize(image, name=f"{label} page {index + 1}")
                    results.append(OCRResult(recognition.text, index + 1, recognition.confidence))
                    LOGGER.debug(
                        "Recognised page %d/%d of %s (confidence %.1f)",
                        index + 1,
                        total,
                        label,
                        recognition.confidence,
                    )
                    _report(on_progress, index + 1, total)

    LOGGER.info("OCR completed for %s: %d page(s)", label, len(results))
    return results


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def create_searchable_pdf(
    source: PdfSource,
    results: Iterable[OCRResult],
    *,
    font_path: str | None = None,
    name: str | None = None,
) -> bytes:
    """Overlay near invisible text from ``results`` onto the matching pages.

    Results whose page number is outside the document are skipped; the
    visible appearance of each page is unchanged. Non-Latin text needs a
    TrueType font, see :func:`pdfsuit.annotate.overlay.font_for`.
    """

    texts: dict[int, list[str]] = {}
    for result in results:
        text = _collapse(result.text)
        if text:
            texts.setdefault(result.page_number - 1, []).append(text)
    lines = {index: " ".join(parts) for index, parts in texts.items()}
    fonts = {index: font_for(line, font_path) for index, line in lines.items()}

    def draw(canvas: Canvas, index: int, width: float, height: float) -> None:
        canvas.setFont(fonts[index], SEARCHABLE_FONT_SIZE)
        canvas.setFillColorRGB(1, 1, 1)
        canvas.setFillAlpha(SEARCHABLE_OPACITY)
        canvas.drawString(0, 0, lines[index])

    return stamp_pages(source, draw, name=name, page_indices=set(lines))


def ocr_to_searchable_pdf(
    source: PdfSource,
    language: str | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    content_type: str | None = None,
    font_path: str | None = None,
    name: str | None = None,
    recognizer_factory: RecognizerFactory = TesseractRecognizer,
) -> bytes:
    """Recognise ``source`` and return a PDF carrying the hidden text layer.

    Images are first converted to a single page PDF sized to the image.
    """

    label = source_name(source, name)
    data = _read_source(source, label)
    results = perform_ocr(
        data,
        language,
        on_progress,
        content_type=content_type,
        name=label,
        recognizer_factory=recognizer_factory,
    )
    if detect_kind(data, content_type=content_type, name=label) == "image":
        data = images_to_pdf([ImageInput(name=label, data=data, content_type=content_type)])
    return create_searchable_pdf(data, results, font_path=font_path, name=label)


def format_ocr_results(results: Sequence[OCRResult]) -> str:
    """Render results as plain text with a header per page."""

    return "\n".join(
        f"=== Page {result.page_number} (Confidence: {result.confidence:.2f}%) ===\n{result.text}\n"
        for result in results
    )


__all__ = [
    "OCRResult",
    "RENDER_SCALE",
    "create_searchable_pdf",
    "default_language",
    "detect_kind",
    "format_ocr_results",
    "ocr_to_searchable_pdf",
    "perform_ocr",
    "rasterize_page",
]
