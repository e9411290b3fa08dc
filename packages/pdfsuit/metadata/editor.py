"""Reading and rewriting the document information dictionary."""

from __future__ import annotations

import logging
from typing import Mapping

from pypdf import PdfWriter

from ..core.document import PdfSource, copy_metadata, load_reader, page_count, serialize, source_name
from ..core.exceptions import InputValidationError

LOGGER = logging.getLogger("pdfsuit.metadata")

METADATA_KEYS = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
    "creator": "/Creator",
    "producer": "/Producer",
}


def document_info(fields: Mapping[str, object]) -> dict[str, str]:
    """Map friendly field names onto PDF info keys, dropping blank values.

    Unknown names are kept as custom entries (``"Reviewer"`` becomes
    ``/Reviewer``).
    """

    metadata: dict[str, str] = {}
    for key, value in fields.items():
        if value is None:
            continue
        string_value = str(value).strip()
        if not string_value:
            continue
        pdf_key = METADATA_KEYS.get(str(key).lower())
        if pdf_key is None:
            pdf_key = key if str(key).startswith("/") else f"/{key}"
        metadata[pdf_key] = string_value
    return metadata


def read_metadata(source: PdfSource, *, name: str | None = None) -> dict[str, str]:
    """Return the standard info fields of ``source`` keyed by friendly name."""

    label = source_name(source, name)
    info = load_reader(source, name=label).metadata or {}
    return {
        field: str(info[pdf_key])
        for field, pdf_key in METADATA_KEYS.items()
        if info.get(pdf_key) is not None
    }


def edit_metadata(source: PdfSource, fields: Mapping[str, object], *, name: str | None = None) -> bytes:
    """Return ``source`` with the non-blank ``fields`` written into its info dictionary.

    Fields left blank keep their current value.
    """

    updates = document_info(fields)
    if not updates:
        raise InputValidationError("At least one metadata field must be provided.")

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    page_count(reader, name=label)
    writer = PdfWriter(clone_from=reader)
    copy_metadata(reader, writer)
    writer.add_metadata(updates)
    LOGGER.info("Updated %s on %s", ", ".join(sorted(updates)), label)
    return serialize(writer, name=label)


__all__ = ["METADATA_KEYS", "document_info", "edit_metadata", "read_metadata"]
