"""Password protection helpers for the :mod:`pdfsuit` toolkit."""

from __future__ import annotations

import io
import logging

from pypdf import PdfReader, PdfWriter

from ..core.document import PdfSource, copy_metadata, serialize, source_name
from ..core.exceptions import ExternalEngineError, InputValidationError

LOGGER = logging.getLogger("pdfsuit.security")

ENCRYPTION_ALGORITHM = "AES-256"


def _open(source: PdfSource, label: str) -> PdfReader:
    if isinstance(source, (bytes, bytearray)):
        if not source:
            raise InputValidationError(f"File '{label}' is empty.")
        stream: io.BytesIO | str = io.BytesIO(bytes(source))
    else:
        stream = str(source)
    try:
        return PdfReader(stream)
    except FileNotFoundError as exc:
        raise InputValidationError(f"PDF file does not exist: {source}") from exc
    except Exception as exc:  # pypdf exceptions vary
        raise ExternalEngineError("Unable to read PDF", filename=label) from exc


def _copy_reader_contents(reader: PdfReader) -> PdfWriter:
    writer = PdfWriter()
    writer.clone_reader_document_root(reader)
    copy_metadata(reader, writer)
    return writer


def is_pdf_encrypted(source: PdfSource, *, name: str | None = None) -> bool:
    """Return ``True`` when ``source`` is an encrypted PDF document."""

    label = source_name(source, name)
    return bool(_open(source, label).is_encrypted)


def protect_pdf(
    source: PdfSource,
    password: str,
    *,
    owner_password: str | None = None,
    name: str | None = None,
) -> bytes:
    """Encrypt ``source`` with ``password`` and return the protected document."""

    if not password:
        raise InputValidationError("A non-empty password is required")

    label = source_name(source, name)
    reader = _open(source, label)
    if reader.is_encrypted:
        raise InputValidationError(f"PDF '{label}' is already encrypted")

    writer = _copy_reader_contents(reader)
    try:
        writer.encrypt(
            user_password=password,
            owner_password=owner_password or password,
            algorithm=ENCRYPTION_ALGORITHM,
        )
    except Exception as exc:  # pragma: no cover - encryption errors vary
        raise ExternalEngineError("Failed to encrypt PDF", filename=label) from exc

    LOGGER.info("Encrypted %s with %s", label, ENCRYPTION_ALGORITHM)
    return serialize(writer, name=label)


def unprotect_pdf(source: PdfSource, password: str, *, name: str | None = None) -> bytes:
    """Decrypt ``source`` using ``password`` and return the plain document."""

    if not password:
        raise InputValidationError("A non-empty password is required")

    label = source_name(source, name)
    reader = _open(source, label)
    if not reader.is_encrypted:
        raise InputValidationError(f"PDF '{label}' is not encrypted")

    try:
        status = reader.decrypt(password)
    except Exception as exc:  # pragma: no cover - decrypt errors vary
        raise ExternalEngineError("Failed to decrypt PDF", filename=label) from exc
    if status == 0:
        raise InputValidationError("Incorrect password for encrypted PDF")

    writer = _copy_reader_contents(reader)
    LOGGER.info("Decrypted %s", label)
    return serialize(writer, name=label)


__all__ = [
    "ENCRYPTION_ALGORITHM",
    "protect_pdf",
    "unprotect_pdf",
    "is_pdf_encrypted",
]
