"""In-place page edits: deletion and rotation."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from pypdf import PdfWriter

from ..core.document import PdfSource, load_reader, page_count, serialize, source_name
from ..core.exceptions import InputValidationError, PageRangeError
from .ranges import validate_page_numbers

LOGGER = logging.getLogger("pdfsuit.pages")

ROTATION_STEPS = (90, 180, 270)


def delete_pages(source: PdfSource, pages: Iterable[int | str], *, name: str | None = None) -> bytes:
    """Remove the 1-based ``pages`` from ``source`` and return the new document.

    Pages are removed from the highest number down so that earlier removals
    never shift the index of a page that is still pending removal.
    """

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    total_pages = page_count(reader, name=label)
    numbers = validate_page_numbers(pages, total_pages=total_pages)

    unique = sorted(set(numbers), reverse=True)
    if len(unique) >= total_pages:
        raise InputValidationError(f"Cannot delete all {total_pages} pages of '{label}'.")

    writer = PdfWriter(clone_from=reader)
    for number in unique:
        LOGGER.debug("Removing page %s from %s", number, label)
        del writer.pages[number - 1]

    LOGGER.info("Deleted %d page(s) from %s", len(unique), label)
    return serialize(writer, name=label)


def rotate_pages(
    source: PdfSource,
    rotation: int,
    page_indices: Sequence[int] | None = None,
    *,
    name: str | None = None,
) -> bytes:
    """Rotate pages of ``source`` clockwise by ``rotation`` degrees.

    The delta is added to each page's stored ``/Rotate`` angle. ``page_indices``
    are 0-based; when omitted every page is rotated.
    """

    if rotation not in ROTATION_STEPS:
        raise InputValidationError(f"Rotation must be one of {ROTATION_STEPS}, got {rotation}.")

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    total_pages = page_count(reader, name=label)

    if page_indices is None:
        targets = list(range(total_pages))
    else:
        targets = list(page_indices)
        for index in targets:
            if index < 0 or index >= total_pages:
                raise PageRangeError(index, total_pages, kind="page index")

    writer = PdfWriter(clone_from=reader)
    for index in dict.fromkeys(targets):
        page = writer.pages[index]
        LOGGER.debug("Rotating page %s of %s from %s by %s", index, label, page.rotation, rotation)
        page.rotate(rotation)

    LOGGER.info("Rotated %d page(s) of %s by %s degrees", len(targets), label, rotation)
    return serialize(writer, name=label)


__all__ = ["ROTATION_STEPS", "delete_pages", "rotate_pages"]
