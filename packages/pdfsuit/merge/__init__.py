"""Merge utilities exposed by :mod:`pdfsuit`."""

from __future__ import annotations

from .merger import merge_pdfs

__all__ = ["merge_pdfs"]
