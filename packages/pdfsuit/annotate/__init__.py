"""Annotation tools layered on existing pages."""

from __future__ import annotations

from .page_numbers import POSITIONS, add_page_numbers
from .signature import SignaturePlacement, add_signature, add_text_signature, format_signature_date
from .watermark import add_watermark, watermark_origin

__all__ = [
    "POSITIONS",
    "SignaturePlacement",
    "add_page_numbers",
    "add_signature",
    "add_text_signature",
    "add_watermark",
    "format_signature_date",
    "watermark_origin",
]
