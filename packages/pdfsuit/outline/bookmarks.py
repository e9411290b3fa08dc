"""Document outline (bookmark) helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from pypdf import PdfWriter

from ..core.document import PdfSource, load_reader, page_count, serialize, source_name
from ..core.exceptions import InputValidationError
from ..pages.ranges import validate_page_numbers

LOGGER = logging.getLogger("pdfsuit.outline")


@dataclass(frozen=True)
class Bookmark:
    """An outline entry pointing at a 1-based page."""

    title: str
    page_number: int


def add_bookmarks(source: PdfSource, bookmarks: Sequence[Bookmark], *, name: str | None = None) -> bytes:
    """Append top level outline items to ``source`` in the order given."""

    if not bookmarks:
        raise InputValidationError("At least one bookmark must be provided.")
    for bookmark in bookmarks:
        if not bookmark.title or not bookmark.title.strip():
            raise InputValidationError("Bookmark titles must not be empty.")

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    total_pages = page_count(reader, name=label)
    validate_page_numbers([bookmark.page_number for bookmark in bookmarks], total_pages=total_pages)

    writer = PdfWriter(clone_from=reader)
    for bookmark in bookmarks:
        writer.add_outline_item(bookmark.title.strip(), bookmark.page_number - 1)

    LOGGER.info("Added %d bookmark(s) to %s", len(bookmarks), label)
    return serialize(writer, name=label)


def extract_bookmarks(source: PdfSource, *, name: str | None = None) -> List[Bookmark]:
    """Return the top level outline of ``source``; nested entries are skipped."""

    label = source_name(source, name)
    reader = load_reader(source, name=label)

    bookmarks: List[Bookmark] = []
    for item in reader.outline:
        if isinstance(item, list):
            continue
        page_index = reader.get_destination_page_number(item)
        if page_index is None or page_index < 0:
            LOGGER.debug("Skipping outline item %r of %s without a page", item.title, label)
            continue
        bookmarks.append(Bookmark(title=str(item.title), page_number=page_index + 1))
    return bookmarks


__all__ = ["Bookmark", "add_bookmarks", "extract_bookmarks"]
