from __future__ import annotations

from typing import Callable

import pytest

from pdfsuit import InputValidationError, edit_metadata, read_metadata
from pdfsuit.metadata import document_info


def test_document_info_maps_friendly_names() -> None:
    assert document_info({"Title": " Report ", "author": None, "subject": "", "Reviewer": "Bo"}) == {
        "/Title": "Report",
        "/Reviewer": "Bo",
    }


def test_edit_metadata_updates_given_fields_only(
    pdf_bytes: Callable[..., bytes], widths: Callable[[bytes], list[int]]
) -> None:
    source = pdf_bytes(2, title="Original")

    output = edit_metadata(source, {"title": "", "author": "Ada", "keywords": "pdf, tools"})

    metadata = read_metadata(output)
    assert metadata["title"] == "Original"
    assert metadata["author"] == "Ada"
    assert metadata["keywords"] == "pdf, tools"
    assert widths(output) == [101, 102]


def test_edit_metadata_requires_a_field(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(InputValidationError, match="At least one metadata field"):
        edit_metadata(pdf_bytes(1), {"title": "  ", "author": None})


def test_read_metadata_of_document_without_info(pdf_bytes: Callable[..., bytes]) -> None:
    assert "title" not in read_metadata(pdf_bytes(1))
