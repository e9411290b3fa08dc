"""Compression engine for :mod:`pdfsuit.compress`."""

from __future__ import annotations

import dataclasses
import logging
import subprocess
from pathlib import Path
from typing import Literal

from pypdf import PdfWriter

from ..core.document import PdfSource, load_reader, page_count, serialize, source_name
from ..core.exceptions import InputValidationError
from .optimizers import detect_backend, write_object_streams

_LOGGER = logging.getLogger("pdfsuit.compress")

CompressionQuality = Literal["low", "medium", "high"]


@dataclasses.dataclass(frozen=True)
class CompressionLevel:
    """Engine tuning associated with a quality tier."""

    name: CompressionQuality
    objects_per_batch: int
    use_object_streams: bool = True


@dataclasses.dataclass(frozen=True)
class CompressionResult:
    """Represents the outcome of a compression run."""

    data: bytes
    quality: CompressionQuality
    original_size: int
    compressed_size: int
    backend: str | None

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size


LEVELS: dict[str, CompressionLevel] = {
    "low": CompressionLevel("low", objects_per_batch=50),
    "medium": CompressionLevel("medium", objects_per_batch=100),
    "high": CompressionLevel("high", objects_per_batch=200),
}


def get_level(quality: str) -> CompressionLevel:
    try:
        return LEVELS[quality]
    except KeyError as exc:
        raise InputValidationError(
            f"Unknown compression quality {quality!r}; expected one of {sorted(LEVELS)}."
        ) from exc


def _compress_with_pypdf(writer: PdfWriter, level: CompressionLevel, label: str) -> None:
    """Compress every content stream, then drop duplicated and orphaned objects.

    ``objects_per_batch`` only groups pages for progress logging, the way the
    web tool used its objects-per-tick setting to yield to the UI. It does not
    change the output: every tier produces the same bytes.
    """

    pages = list(writer.pages)
    batch = level.objects_per_batch
    for start in range(0, len(pages), batch):
        chunk = pages[start : start + batch]
        _LOGGER.debug("Compressing content streams of pages %d-%d of %s", start + 1, start + len(chunk), label)
        for page in chunk:
            page.compress_content_streams()
    writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)


def compress_pdf(
    source: PdfSource,
    quality: str = "medium",
    *,
    name: str | None = None,
) -> CompressionResult:
    """Compress ``source`` according to the ``quality`` tier."""

    level = get_level(quality)
    label = source_name(source, name)
    reader = load_reader(source, name=label)
    page_count(reader, name=label)

    if isinstance(source, (bytes, bytearray)):
        original_size = len(source)
    else:
        original_size = Path(source).stat().st_size

    writer = PdfWriter(clone_from=reader)
    _compress_with_pypdf(writer, level, label)
    data = serialize(writer, name=label)

    backend_used: str | None = None
    if level.use_object_streams:
        backend = detect_backend()
        if backend is None:
            _LOGGER.warning("qpdf not available; writing %s without object streams", label)
        else:
            try:
                data = write_object_streams(backend, data)
                backend_used = backend.name
            except (OSError, subprocess.CalledProcessError) as exc:
                _LOGGER.warning("Backend %s failed for %s: %s", backend.name, label, exc)

    _LOGGER.info(
        "Compressed %s with %s quality: %d -> %d bytes",
        label,
        level.name,
        original_size,
        len(data),
    )
    return CompressionResult(
        data=data,
        quality=level.name,
        original_size=original_size,
        compressed_size=len(data),
        backend=backend_used,
    )


__all__ = ["CompressionLevel", "CompressionQuality", "CompressionResult", "LEVELS", "compress_pdf", "get_level"]
