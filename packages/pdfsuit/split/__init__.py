"""Split utilities exposed by :mod:`pdfsuit`."""

from __future__ import annotations

from .splitter import extract_pages, split_by_ranges, split_into_single_pages

__all__ = ["split_by_ranges", "split_into_single_pages", "extract_pages"]
