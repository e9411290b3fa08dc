from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence

import pytest
from pypdf import PdfReader

from pdfsuit import ExternalEngineError, InputValidationError, merge_documents, merge_pdfs


def test_merge_pdfs_concatenates_in_order(
    pdf_bytes: Callable[..., bytes], widths: Callable[[bytes], list[int]]
) -> None:
    merged = merge_pdfs([pdf_bytes(2), pdf_bytes(3)])

    assert widths(merged) == [101, 102, 101, 102, 103]


def test_merge_pdfs_applies_metadata_and_bookmarks(pdf_bytes: Callable[..., bytes]) -> None:
    merged = merge_pdfs(
        [pdf_bytes(2), pdf_bytes(1)],
        names=["intro.pdf", "body.pdf"],
        document_info={"title": "Combined", "author": " Ana ", "subject": ""},
        bookmarks=["Introduction", None],
    )

    reader = PdfReader(io.BytesIO(merged))
    assert reader.metadata.get("/Title") == "Combined"
    assert reader.metadata.get("/Author") == "Ana"
    assert "/Subject" not in reader.metadata
    outline = [(item.title, reader.get_destination_page_number(item)) for item in reader.outline]
    assert outline == [("Introduction", 0), ("body", 2)]


def test_merge_pdfs_requires_two_inputs(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(InputValidationError, match="At least 2 PDF files"):
        merge_pdfs([pdf_bytes(1)])


def test_merge_pdfs_reports_corrupt_input(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(ExternalEngineError) as excinfo:
        merge_pdfs([pdf_bytes(1), b"not a pdf"], names=["good.pdf", "broken.pdf"])

    assert excinfo.value.filename == "broken.pdf"


def test_merge_pdfs_rejects_empty_document(pdf_bytes: Callable[..., bytes], empty_pdf: Path) -> None:
    with pytest.raises(InputValidationError, match="contains no pages"):
        merge_pdfs([pdf_bytes(1), empty_pdf])


def test_merge_documents_helper(tmp_path: Path, sample_pdfs: Sequence[Path]) -> None:
    output = tmp_path / "nested" / "merged.pdf"

    result = merge_documents(sample_pdfs, output, document_info={"title": "Merged"})

    assert result == output
    reader = PdfReader(str(output))
    assert len(reader.pages) == 5
    assert reader.metadata.get("/Title") == "Merged"
