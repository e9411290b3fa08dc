"""PDF manipulation toolkit exposing modular PDFSuit tools."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from .annotate import SignaturePlacement, add_page_numbers, add_signature, add_text_signature, add_watermark
from .compress import CompressionResult, compress_pdf
from .core.exceptions import (
    ExternalEngineError,
    InputValidationError,
    PageRangeError,
    PdfSuitError,
    UnsupportedFormatError,
)
from .images import ImageInput, images_to_pdf
from .merge import merge_pdfs
from .metadata import edit_metadata, read_metadata
from .ocr import OCRResult, create_searchable_pdf, format_ocr_results, perform_ocr
from .outline import Bookmark, add_bookmarks, extract_bookmarks
from .pages import PageRange, delete_pages, parse_page_ranges, rotate_pages
from .security import is_pdf_encrypted, protect_pdf, unprotect_pdf
from .split import extract_pages, split_by_ranges, split_into_single_pages
from .tools import load_builtin_plugins
from .tools.common.interfaces import ToolContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry

load_builtin_plugins()

__all__ = [
    "merge_pdfs",
    "split_by_ranges",
    "split_into_single_pages",
    "extract_pages",
    "delete_pages",
    "rotate_pages",
    "add_watermark",
    "add_page_numbers",
    "add_signature",
    "add_text_signature",
    "SignaturePlacement",
    "edit_metadata",
    "read_metadata",
    "compress_pdf",
    "images_to_pdf",
    "perform_ocr",
    "create_searchable_pdf",
    "format_ocr_results",
    "add_bookmarks",
    "extract_bookmarks",
    "protect_pdf",
    "unprotect_pdf",
    "is_pdf_encrypted",
    "parse_page_ranges",
    "PageRange",
    "Bookmark",
    "ImageInput",
    "OCRResult",
    "CompressionResult",
    "PdfSuitError",
    "InputValidationError",
    "PageRangeError",
    "UnsupportedFormatError",
    "ExternalEngineError",
    "ToolContext",
    "ToolRegistry",
    "registry",
    "register_tool",
    "merge_documents",
    "split_document",
    "compress_document",
    "run_tool",
]


def run_tool(name: str, context: ToolContext) -> object:
    """Create the registered tool ``name`` and run it with ``context``."""

    return registry.create(name, context).run()


def merge_documents(inputs: Iterable[str | Path], output: str | Path, **config) -> Path:
    """Convenience wrapper around the merge plugin."""

    context = ToolContext(output_path=output, inputs=list(inputs), config=config)
    return run_tool("merge", context)


def split_document(
    input: str | Path,
    output_dir: str | Path,
    *,
    ranges: str | Sequence[object] | None = None,
) -> list[Path]:
    """Split by ``ranges``, or into single pages when no ranges are given."""

    if ranges is None:
        return run_tool("split-pages", ToolContext(input_path=input, output_path=output_dir))
    context = ToolContext(input_path=input, output_path=output_dir, config={"ranges": ranges})
    return run_tool("split", context)


def compress_document(input: str | Path, output: str | Path, *, quality: str = "medium") -> CompressionResult:
    """Convenience wrapper around the compression plugin."""

    context = ToolContext(input_path=input, output_path=output, config={"quality": quality})
    return run_tool("compress", context)
