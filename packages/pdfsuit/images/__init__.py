"""Image conversion tools."""

from __future__ import annotations

from .converter import IMAGE_CONTENT_TYPES, SUPPORTED_CONTENT_TYPES, ImageInput, decode_image, images_to_pdf

__all__ = ["IMAGE_CONTENT_TYPES", "SUPPORTED_CONTENT_TYPES", "ImageInput", "decode_image", "images_to_pdf"]
