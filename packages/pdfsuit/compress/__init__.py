"""Compression utilities exposed by :mod:`pdfsuit`."""

from __future__ import annotations

from .compressor import (
    LEVELS,
    CompressionLevel,
    CompressionQuality,
    CompressionResult,
    compress_pdf,
    get_level,
)

__all__ = [
    "LEVELS",
    "CompressionLevel",
    "CompressionQuality",
    "CompressionResult",
    "compress_pdf",
    "get_level",
]
