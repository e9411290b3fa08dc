"""Page number and page range validation helpers.

Callers always speak in 1-based page numbers. Every helper here validates
the complete selection against the document's page count before returning,
so tools can translate to 0-based indices and mutate without ever applying
a partial change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

from ..core.exceptions import InputValidationError, PageRangeError


@dataclass(frozen=True)
class PageRange:
    """Represents an inclusive, 1-based page range."""

    start: int
    end: int

    def label(self) -> str:
        """Return a filename friendly label for the range."""

        if self.start == self.end:
            return f"page_{self.start}"
        return f"pages_{self.start}-{self.end}"

    def indices(self) -> range:
        """Return the 0-based page indices covered by the range."""

        return range(self.start - 1, self.end)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def _to_int(value: object) -> int:
    if isinstance(value, bool):
        raise InputValidationError(f"Invalid page number: {value!r}")
    if isinstance(value, str):
        value = value.strip()
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InputValidationError(f"Invalid page number: {value!r}") from exc


def _range_from_token(token: str) -> PageRange:
    if "-" in token:
        start_str, end_str = token.split("-", 1)
        return PageRange(_to_int(start_str), _to_int(end_str))
    number = _to_int(token)
    return PageRange(number, number)


def _iter_ranges(ranges: str | Iterable[object]) -> Iterator[PageRange]:
    if isinstance(ranges, str):
        for token in ranges.split(","):
            if token.strip():
                yield _range_from_token(token.strip())
        return

    for item in ranges:
        if isinstance(item, PageRange):
            yield item
        elif isinstance(item, str):
            yield from _iter_ranges(item)
        elif isinstance(item, Sequence) and len(item) == 2:
            yield PageRange(_to_int(item[0]), _to_int(item[1]))
        elif isinstance(item, int) and not isinstance(item, bool):
            yield PageRange(item, item)
        else:
            raise InputValidationError(f"Invalid page range: {item!r}")


def parse_page_ranges(ranges: str | Iterable[object] | None, *, total_pages: int) -> List[PageRange]:
    """Parse and validate ``ranges`` against ``total_pages``.

    Args:
        ranges: A comma separated string such as ``"1-3,7"``, or an iterable of
            :class:`PageRange` objects, ``(start, end)`` pairs, integers or
            strings.
        total_pages: Page count of the source document.

    Raises:
        PageRangeError: On the first range violating ``1 <= start <= end <= total_pages``.
        InputValidationError: If ``ranges`` is empty or cannot be parsed.

    Returns:
        The ranges in the order they were supplied.
    """

    if ranges is None:
        raise InputValidationError("At least one page range must be provided.")

    parsed: List[PageRange] = []
    for page_range in _iter_ranges(ranges):
        if page_range.start < 1 or page_range.end > total_pages or page_range.start > page_range.end:
            raise PageRangeError(page_range, total_pages, kind="range")
        parsed.append(page_range)

    if not parsed:
        raise InputValidationError("At least one page range must be provided.")
    return parsed


def validate_page_numbers(pages: Iterable[int | str], *, total_pages: int) -> List[int]:
    """Validate 1-based ``pages`` preserving their order and duplicates."""

    numbers = [_to_int(page) for page in pages]
    if not numbers:
        raise InputValidationError("At least one page number must be provided.")
    for number in numbers:
        if number < 1 or number > total_pages:
            raise PageRangeError(number, total_pages)
    return numbers


def to_zero_based(pages: Iterable[int]) -> List[int]:
    """Translate validated 1-based page numbers into 0-based indices."""

    return [page - 1 for page in pages]


def parse_page_list(value: str) -> List[int]:
    """Parse a comma separated page list such as ``"3, 1, 4-5"``.

    Ranges expand in ascending order; the list itself keeps the caller's order.
    """

    pages: List[int] = []
    for page_range in _iter_ranges(value):
        if page_range.start > page_range.end:
            raise InputValidationError(f"Invalid page range: {page_range}")
        pages.extend(range(page_range.start, page_range.end + 1))
    return pages


def build_output_filename(base_name: str, part: PageRange | int) -> str:
    """Construct a filename for one output of a split operation."""

    safe_base = base_name.replace(" ", "_") or "document"
    suffix = part.label() if isinstance(part, PageRange) else f"page_{part}"
    return f"{safe_base}_{suffix}.pdf"


__all__ = [
    "PageRange",
    "parse_page_ranges",
    "validate_page_numbers",
    "to_zero_based",
    "parse_page_list",
    "build_output_filename",
]
