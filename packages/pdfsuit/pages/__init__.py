"""Page selection and page editing tools."""

from __future__ import annotations

from .editing import ROTATION_STEPS, delete_pages, rotate_pages
from .ranges import (
    PageRange,
    build_output_filename,
    parse_page_list,
    parse_page_ranges,
    to_zero_based,
    validate_page_numbers,
)

__all__ = [
    "ROTATION_STEPS",
    "delete_pages",
    "rotate_pages",
    "PageRange",
    "build_output_filename",
    "parse_page_list",
    "parse_page_ranges",
    "to_zero_based",
    "validate_page_numbers",
]
