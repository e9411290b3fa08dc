"""Image to PDF conversion."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Sequence

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from ..core.exceptions import ExternalEngineError, InputValidationError, UnsupportedFormatError

LOGGER = logging.getLogger("pdfsuit.images")

SUPPORTED_CONTENT_TYPES = {"image/png": "PNG", "image/jpeg": "JPEG", "image/jpg": "JPEG"}
SUPPORTED_FORMATS = frozenset(SUPPORTED_CONTENT_TYPES.values())
# File suffix to content type, for inputs read from disk.
IMAGE_CONTENT_TYPES = {".png": "image/png", ".jpg": "image/jpeg", ".jpeg": "image/jpeg"}


@dataclass(frozen=True)
class ImageInput:
    """An uploaded image and the name it should be reported under."""

    name: str
    data: bytes
    content_type: str | None = None


def decode_image(image: ImageInput) -> Image.Image:
    """Decode ``image`` with Pillow, accepting only PNG and JPEG data."""

    if image.content_type and image.content_type.lower() not in SUPPORTED_CONTENT_TYPES:
        raise UnsupportedFormatError(image.name, f"unsupported image type {image.content_type}")
    if not image.data:
        raise InputValidationError(f"File '{image.name}' is empty.")

    try:
        decoded = Image.open(io.BytesIO(image.data))
        decoded.load()
    except UnidentifiedImageError as exc:
        raise UnsupportedFormatError(image.name, "expected a PNG or JPEG image") from exc
    except OSError as exc:
        LOGGER.error("Failed to decode image %s: %s", image.name, exc)
        raise ExternalEngineError("Failed to process image", filename=image.name) from exc

    if decoded.format not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(image.name, f"unsupported image format {decoded.format}")
    return decoded


def images_to_pdf(images: Sequence[ImageInput]) -> bytes:
    """Build a PDF with one page per image, each page sized to the image's pixels."""

    if not images:
        raise InputValidationError("No images provided.")

    decoded = [(image, decode_image(image)) for image in images]

    buffer = io.BytesIO()
    canvas = Canvas(buffer)
    for image, picture in decoded:
        width, height = picture.size
        LOGGER.debug("Adding %s as a %dx%d page", image.name, width, height)
        try:
            canvas.setPageSize((width, height))
            canvas.drawImage(ImageReader(picture), 0, 0, width=width, height=height, mask="auto")
            canvas.showPage()
        except Exception as exc:  # reportlab image embedding errors vary
            raise ExternalEngineError("Failed to process image", filename=image.name) from exc
    canvas.save()

    LOGGER.info("Converted %d image(s) to PDF", len(decoded))
    return buffer.getvalue()


__all__ = ["IMAGE_CONTENT_TYPES", "ImageInput", "SUPPORTED_CONTENT_TYPES", "decode_image", "images_to_pdf"]
