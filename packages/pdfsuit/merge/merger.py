"""Merge functionality for the :mod:`pdfsuit.merge` package."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from pypdf import PdfWriter

from ..core.document import PdfSource, load_reader, page_count, serialize, source_name
from ..core.exceptions import InputValidationError
from ..metadata import document_info as _document_info

LOGGER = logging.getLogger("pdfsuit.merge")


def merge_pdfs(
    sources: Sequence[PdfSource],
    *,
    names: Sequence[str] | None = None,
    document_info: Mapping[str, object] | None = None,
    bookmarks: Sequence[str | None] | None = None,
) -> bytes:
    """Concatenate ``sources`` into one document and return its bytes.

    Args:
        sources: At least two PDF sources; pages are appended in the order given.
        names: Optional display names used for error messages and default
            bookmark titles.
        document_info: Optional metadata applied to the merged document.
        bookmarks: When provided, one outline entry per input pointing at the
            input's first page. Missing titles fall back to the input name.

    Raises:
        InputValidationError: If fewer than two sources are supplied.
        ExternalEngineError: If any input cannot be parsed.
    """

    sources = list(sources)
    if len(sources) < 2:
        raise InputValidationError("At least 2 PDF files are required to merge.")

    writer = PdfWriter()
    bookmark_targets: list[tuple[str, int]] = []

    for index, source in enumerate(sources):
        label = source_name(source, names[index] if names and index < len(names) else None)
        LOGGER.debug("Processing input PDF %s", label)
        reader = load_reader(source, name=label)
        page_count(reader, name=label)

        start_page_index = len(writer.pages)
        for page in reader.pages:
            writer.add_page(page)

        if bookmarks is not None:
            title = bookmarks[index] if index < len(bookmarks) else None
            if not title:
                title = label.rsplit(".", 1)[0] or f"Document {index + 1}"
            bookmark_targets.append((title, start_page_index))

    if document_info:
        metadata = _document_info(document_info)
        if metadata:
            LOGGER.debug("Setting metadata on merged PDF: %s", metadata)
            writer.add_metadata(metadata)

    for title, page_index in bookmark_targets:
        writer.add_outline_item(title, page_index)

    LOGGER.info("Merged %d PDFs into %d pages", len(sources), len(writer.pages))
    return serialize(writer, name="merged.pdf")


__all__ = ["merge_pdfs"]
