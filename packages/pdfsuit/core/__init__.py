"""Shared building blocks for PDFSuit tools."""

from __future__ import annotations

from .document import PdfSource, load_reader, page_count, serialize
from .exceptions import (
    ExternalEngineError,
    InputValidationError,
    PageRangeError,
    PdfSuitError,
    UnsupportedFormatError,
)

__all__ = [
    "PdfSource",
    "load_reader",
    "page_count",
    "serialize",
    "PdfSuitError",
    "InputValidationError",
    "PageRangeError",
    "UnsupportedFormatError",
    "ExternalEngineError",
]
