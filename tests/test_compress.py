from __future__ import annotations

import io
import subprocess
from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfsuit import InputValidationError, add_page_numbers, compress_document, compress_pdf
from pdfsuit.compress import compressor, get_level
from pdfsuit.compress import optimizers


@pytest.fixture(autouse=True)
def _without_qpdf(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(compressor, "detect_backend", lambda: None)


@pytest.mark.parametrize("quality", ["low", "medium", "high"])
def test_compress_pdf_reports_sizes(pdf_bytes: Callable[..., bytes], quality: str) -> None:
    source = pdf_bytes(4)

    result = compress_pdf(source, quality)

    assert result.quality == quality
    assert result.original_size == len(source)
    assert result.compressed_size == len(result.data)
    assert result.backend is None
    assert result.bytes_saved == max(len(source) - len(result.data), 0)
    assert len(PdfReader(io.BytesIO(result.data)).pages) == 4


@pytest.mark.parametrize("quality", ["low", "high"])
def test_compressing_twice_keeps_pages_and_content(
    pdf_bytes: Callable[..., bytes], widths: Callable[[bytes], list[int]], quality: str
) -> None:
    source = add_page_numbers(pdf_bytes(4))

    first = compress_pdf(source, quality).data
    second = compress_pdf(first, quality).data

    assert widths(first) == widths(second) == [101, 102, 103, 104]
    texts = [page.extract_text().strip() for page in PdfReader(io.BytesIO(second)).pages]
    assert texts == ["1", "2", "3", "4"]


def test_compress_pdf_rejects_unknown_quality(pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(InputValidationError, match="Unknown compression quality"):
        compress_pdf(pdf_bytes(1), "extreme")


def test_get_level_batches() -> None:
    assert [get_level(name).objects_per_batch for name in ("low", "medium", "high")] == [50, 100, 200]


def test_compress_pdf_uses_backend_when_available(
    monkeypatch: pytest.MonkeyPatch, pdf_bytes: Callable[..., bytes]
) -> None:
    source = pdf_bytes(2)
    monkeypatch.setattr(compressor, "detect_backend", lambda: optimizers.Backend("qpdf", "/usr/bin/qpdf"))
    monkeypatch.setattr(compressor, "write_object_streams", lambda backend, data: data + b"\n")

    result = compress_pdf(source, "medium")

    assert result.backend == "qpdf"
    assert result.data.endswith(b"\n")


def test_compress_pdf_falls_back_when_backend_fails(
    monkeypatch: pytest.MonkeyPatch, pdf_bytes: Callable[..., bytes]
) -> None:
    def failing(backend: optimizers.Backend, data: bytes) -> bytes:
        raise subprocess.CalledProcessError(2, ["qpdf"])

    monkeypatch.setattr(compressor, "detect_backend", lambda: optimizers.Backend("qpdf", "/usr/bin/qpdf"))
    monkeypatch.setattr(compressor, "write_object_streams", failing)

    result = compress_pdf(pdf_bytes(2), "high")

    assert result.backend is None
    assert result.data.startswith(b"%PDF")


def test_detect_backend_respects_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(optimizers, "which", lambda executables: "/usr/bin/qpdf")
    monkeypatch.setenv("PDFSUIT_QPDF", "0")
    assert optimizers.detect_backend() is None

    monkeypatch.setenv("PDFSUIT_QPDF", "1")
    assert optimizers.detect_backend() == optimizers.Backend("qpdf", "/usr/bin/qpdf")


def test_build_qpdf_command(tmp_path: Path) -> None:
    command = optimizers.build_qpdf_command("qpdf", tmp_path / "in.pdf", tmp_path / "out.pdf")

    assert command[0] == "qpdf"
    assert "--object-streams=generate" in command
    assert command[-2:] == [str(tmp_path / "in.pdf"), str(tmp_path / "out.pdf")]


def test_compress_document_helper(sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "compressed.pdf"

    result = compress_document(sample_pdf, output, quality="low")

    assert output.read_bytes() == result.data
    assert result.original_size == sample_pdf.stat().st_size
