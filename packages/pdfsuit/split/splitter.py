"""Splitting and extraction utilities for :mod:`pdfsuit`."""

from __future__ import annotations

import logging
from typing import Iterable, List

from pypdf import PdfReader, PdfWriter

from ..core.document import PdfSource, copy_metadata, load_reader, page_count, serialize, source_name
from ..pages.ranges import parse_page_ranges, to_zero_based, validate_page_numbers

LOGGER = logging.getLogger("pdfsuit.split")


def _write_pages(reader: PdfReader, indices: Iterable[int], *, name: str) -> bytes:
    writer = PdfWriter()
    for index in indices:
        writer.add_page(reader.pages[index])
    copy_metadata(reader, writer)
    return serialize(writer, name=name)


def split_by_ranges(
    source: PdfSource,
    ranges: str | Iterable[object],
    *,
    name: str | None = None,
) -> List[bytes]:
    """Split ``source`` into one document per inclusive 1-based range.

    Every range is validated before any output is produced, so an invalid
    range rejects the whole call.
    """

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    total_pages = page_count(reader, name=label)
    page_ranges = parse_page_ranges(ranges, total_pages=total_pages)

    outputs: List[bytes] = []
    for page_range in page_ranges:
        LOGGER.debug("Writing pages %s-%s of %s", page_range.start, page_range.end, label)
        outputs.append(_write_pages(reader, page_range.indices(), name=label))

    LOGGER.info("Split %s into %d document(s)", label, len(outputs))
    return outputs


def split_into_single_pages(source: PdfSource, *, name: str | None = None) -> List[bytes]:
    """Split ``source`` into single-page documents in original order."""

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    total_pages = page_count(reader, name=label)

    outputs = [_write_pages(reader, [index], name=label) for index in range(total_pages)]
    LOGGER.info("Split %s into %d single page document(s)", label, len(outputs))
    return outputs


def extract_pages(source: PdfSource, pages: Iterable[int | str], *, name: str | None = None) -> bytes:
    """Copy the 1-based ``pages`` of ``source``, in the order given, into a new document."""

    label = source_name(source, name)
    reader = load_reader(source, name=label)
    total_pages = page_count(reader, name=label)
    numbers = validate_page_numbers(pages, total_pages=total_pages)

    LOGGER.info("Extracting pages %s from %s", numbers, label)
    return _write_pages(reader, to_zero_based(numbers), name=label)


__all__ = ["split_by_ranges", "split_into_single_pages", "extract_pages"]
