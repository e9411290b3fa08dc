"""Text recognition for scanned PDFs and images."""

from __future__ import annotations

from .engine import (
    OCRResult,
    create_searchable_pdf,
    format_ocr_results,
    ocr_to_searchable_pdf,
    perform_ocr,
)
from .recognizer import Recognition, TesseractRecognizer

__all__ = [
    "OCRResult",
    "Recognition",
    "TesseractRecognizer",
    "create_searchable_pdf",
    "format_ocr_results",
    "ocr_to_searchable_pdf",
    "perform_ocr",
]
