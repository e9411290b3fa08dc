"""Plugins exposing page structure tools through the registry."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

from ..core.document import load_reader, page_count
from ..core.utils import get_logger
from ..merge import merge_pdfs
from ..metadata import edit_metadata
from ..pages import build_output_filename, delete_pages, parse_page_ranges, rotate_pages
from ..pages.ranges import to_zero_based
from ..split import extract_pages, split_by_ranges, split_into_single_pages
from .common.interfaces import BaseTool
from .common.pipeline import register_tool

LOGGER = get_logger("pdfsuit.tools.documents")


def _require(config: Mapping[str, object], key: str, tool: str) -> object:
    value = config.get(key)
    if value is None:
        raise ValueError(f"{tool} tool requires '{key}' configuration")
    return value


@register_tool("merge")
class MergeTool(BaseTool):
    name = "merge"

    def run(self) -> Path:
        context = self.context
        inputs = context.all_inputs()
        output = context.require_output()

        document_info: Mapping[str, object] | None = context.config.get("document_info")
        bookmarks: Sequence[str | None] | None = context.config.get("bookmarks")

        LOGGER.debug("Merging %d input(s) into %s", len(inputs), output)
        data = merge_pdfs(
            inputs,
            names=[path.name for path in inputs],
            document_info=document_info,
            bookmarks=bookmarks,
        )
        result = context.write_output(data)
        context.resources["result"] = result
        return result


@register_tool("split")
class SplitTool(BaseTool):
    name = "split"

    def run(self) -> list[Path]:
        context = self.context
        source = context.require_input()
        output_dir = context.require_output()
        ranges = _require(context.config, "ranges", "Split")

        total_pages = page_count(load_reader(source), name=source.name)
        page_ranges = parse_page_ranges(ranges, total_pages=total_pages)
        documents = split_by_ranges(source, page_ranges)
        results = [
            context.write_output(data, output_dir / build_output_filename(source.stem, page_range))
            for page_range, data in zip(page_ranges, documents)
        ]
        LOGGER.debug("Wrote %d range(s) of %s to %s", len(results), source, output_dir)
        context.resources["result"] = results
        return results


@register_tool("split-pages")
class SplitPagesTool(BaseTool):
    name = "split-pages"

    def run(self) -> list[Path]:
        context = self.context
        source = context.require_input()
        output_dir = context.require_output()

        results = [
            context.write_output(data, output_dir / build_output_filename(source.stem, number))
            for number, data in enumerate(split_into_single_pages(source), start=1)
        ]
        LOGGER.debug("Wrote %d page(s) of %s to %s", len(results), source, output_dir)
        context.resources["result"] = results
        return results


@register_tool("extract")
class ExtractTool(BaseTool):
    name = "extract"

    def run(self) -> Path:
        context = self.context
        pages = _require(context.config, "pages", "Extract")
        LOGGER.debug("Extracting pages %s to %s", pages, context.output_path)
        result = context.write_output(extract_pages(context.require_input(), pages))
        context.resources["result"] = result
        return result


@register_tool("delete")
class DeleteTool(BaseTool):
    name = "delete"

    def run(self) -> Path:
        context = self.context
        pages = _require(context.config, "pages", "Delete")
        LOGGER.debug("Deleting pages %s into %s", pages, context.output_path)
        result = context.write_output(delete_pages(context.require_input(), pages))
        context.resources["result"] = result
        return result


@register_tool("rotate")
class RotateTool(BaseTool):
    name = "rotate"

    def run(self) -> Path:
        context = self.context
        rotation = int(context.config.get("rotation", 90))
        pages: Sequence[int] | None = context.config.get("pages")
        indices = to_zero_based(pages) if pages else None
        LOGGER.debug("Rotating pages %s by %s into %s", pages or "all", rotation, context.output_path)
        result = context.write_output(rotate_pages(context.require_input(), rotation, indices))
        context.resources["result"] = result
        return result


@register_tool("metadata")
class MetadataTool(BaseTool):
    """Writes ``config['fields']`` into the document information dictionary."""

    name = "metadata"

    def run(self) -> Path:
        context = self.context
        fields: Mapping[str, object] = _require(context.config, "fields", "Metadata")
        LOGGER.debug("Updating metadata of %s with %s", context.input_path, fields)
        result = context.write_output(edit_metadata(context.require_input(), fields))
        context.resources["result"] = result
        return result
