"""Exception hierarchy shared by every PDFSuit tool."""

from __future__ import annotations


class PdfSuitError(Exception):
    """Base exception for all errors raised by :mod:`pdfsuit`."""


class InputValidationError(PdfSuitError, ValueError):
    """Raised when caller supplied input is rejected before any mutation."""


class PageRangeError(InputValidationError):
    """Raised when a page number or range falls outside the document."""

    def __init__(self, value: object, page_count: int, *, kind: str = "page number") -> None:
        self.value = value
        self.page_count = page_count
        super().__init__(f"Invalid {kind}: {value}. PDF has {page_count} pages.")


class UnsupportedFormatError(InputValidationError):
    """Raised when an input file is not in a supported format."""

    def __init__(self, filename: str, detail: str) -> None:
        self.filename = filename
        super().__init__(f"Unsupported file {filename!r}: {detail}")


class ExternalEngineError(PdfSuitError):
    """Raised when the underlying PDF, imaging or OCR library fails."""

    def __init__(self, message: str, *, filename: str | None = None) -> None:
        self.filename = filename
        if filename:
            message = f"{message} ({filename})"
        super().__init__(message)


__all__ = [
    "PdfSuitError",
    "InputValidationError",
    "PageRangeError",
    "UnsupportedFormatError",
    "ExternalEngineError",
]
