from __future__ import annotations

import io
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfsuit import InputValidationError, PageRangeError, delete_pages, rotate_pages


def _rotations(data: bytes) -> list[int]:
    return [page.rotation for page in PdfReader(io.BytesIO(data)).pages]


def _stored_rotations(data: bytes) -> list[int]:
    return [int(page.get("/Rotate", 0)) for page in PdfReader(io.BytesIO(data)).pages]


def test_delete_pages_removes_requested_pages(
    pdf_bytes: Callable[..., bytes], widths: Callable[[bytes], list[int]]
) -> None:
    output = delete_pages(pdf_bytes(5), [4, 2, 4])

    assert widths(output) == [101, 103, 105]


def test_delete_pages_refuses_to_remove_everything(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(InputValidationError, match="Cannot delete all 2 pages"):
        delete_pages(pdf_bytes(2), [1, 2])


def test_delete_pages_validates_before_removing(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(PageRangeError):
        delete_pages(pdf_bytes(3), [1, 9])


def test_rotate_pages_all_by_default(pdf_bytes: Callable[..., bytes]) -> None:
    assert _rotations(rotate_pages(pdf_bytes(3), 90)) == [90, 90, 90]


def test_rotate_pages_accumulates_rotation(pdf_bytes: Callable[..., bytes]) -> None:
    once = rotate_pages(pdf_bytes(3), 270, [0, 2])
    twice = rotate_pages(once, 180, [0])

    assert _stored_rotations(twice) == [450, 0, 270]


def test_rotate_pages_adds_to_stored_angle_without_normalising(pdf_bytes: Callable[..., bytes]) -> None:
    quarter = rotate_pages(pdf_bytes(1), 90)
    result = rotate_pages(quarter, 180)

    assert _stored_rotations(quarter) == [90]
    assert _stored_rotations(result) == [270]


@pytest.mark.parametrize("rotation", [0, 45, 360, -90])
def test_rotate_pages_rejects_unsupported_angle(pdf_bytes: Callable[..., bytes], rotation: int) -> None:
    with pytest.raises(InputValidationError, match="Rotation must be one of"):
        rotate_pages(pdf_bytes(1), rotation)


def test_rotate_pages_rejects_unknown_index(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(PageRangeError, match="page index"):
        rotate_pages(pdf_bytes(2), 90, [2])
