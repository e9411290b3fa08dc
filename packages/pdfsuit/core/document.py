"""Loading and serialising document handles.

Every tool in :mod:`pdfsuit` follows the same lifecycle: a source is loaded
into a :class:`~pypdf.PdfReader` owned exclusively by the current call, its
page indices are validated, a :class:`~pypdf.PdfWriter` receives the
structural change and is serialised back to ``bytes``. The helpers below keep
the load and save halves of that lifecycle in one place so engine failures are
reported uniformly.
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Union

from pypdf import PdfReader, PdfWriter

from .exceptions import ExternalEngineError, InputValidationError

LOGGER = logging.getLogger("pdfsuit.core")

PdfSource = Union[bytes, bytearray, str, os.PathLike]


def source_name(source: PdfSource, name: str | None = None) -> str:
    """Return a human readable name for ``source`` used in error messages."""

    if name:
        return name
    if isinstance(source, (str, os.PathLike)):
        return Path(source).name
    return "document.pdf"


def load_reader(source: PdfSource, *, name: str | None = None, password: str = "") -> PdfReader:
    """Parse ``source`` into a reader, decrypting it with ``password`` if needed."""

    label = source_name(source, name)
    if isinstance(source, (bytes, bytearray)):
        if not source:
            raise InputValidationError(f"File '{label}' is empty.")
        stream: io.BytesIO | str = io.BytesIO(bytes(source))
    else:
        path = Path(source).expanduser()
        if not path.is_file():
            raise InputValidationError(f"PDF file does not exist: {path}")
        stream = str(path)

    try:
        reader = PdfReader(stream)
    except Exception as exc:  # pypdf raises a variety of parse errors
        LOGGER.error("Failed to read PDF %s: %s", label, exc)
        raise ExternalEngineError("Unable to read PDF", filename=label) from exc

    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF %s", label)
        try:
            status = reader.decrypt(password)
        except Exception as exc:  # pragma: no cover - decrypt errors vary
            raise ExternalEngineError("Unable to decrypt encrypted PDF", filename=label) from exc
        if status == 0:
            raise InputValidationError(f"PDF '{label}' is password protected.")

    return reader


def page_count(reader: PdfReader, *, name: str | None = None) -> int:
    """Return the number of pages in ``reader``, rejecting empty documents."""

    total = len(reader.pages)
    if total == 0:
        raise InputValidationError(f"PDF '{name or 'document.pdf'}' contains no pages.")
    return total


def serialize(writer: PdfWriter, *, name: str | None = None) -> bytes:
    """Write ``writer`` to an in-memory buffer and return its bytes."""

    buffer = io.BytesIO()
    try:
        writer.write(buffer)
    except Exception as exc:  # pragma: no cover - engine write errors vary
        LOGGER.error("Failed to serialise PDF %s: %s", name or "output", exc)
        raise ExternalEngineError("Unable to write PDF", filename=name) from exc
    return buffer.getvalue()


def copy_metadata(reader: PdfReader, writer: PdfWriter) -> None:
    """Copy the document information dictionary of ``reader`` into ``writer``."""

    metadata = reader.metadata
    if not metadata:
        return
    cleaned = {
        key: str(value)
        for key, value in metadata.items()
        if isinstance(key, str) and value is not None
    }
    if cleaned:
        writer.add_metadata(cleaned)


__all__ = ["PdfSource", "source_name", "load_reader", "page_count", "serialize", "copy_metadata"]
