"""CLI helpers for page structure commands."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...pages import parse_page_list
from ...tools.common.interfaces import ToolContext

METADATA_FIELDS = ("title", "author", "subject", "keywords")


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    merge = subparsers.add_parser("merge", help="Merge multiple PDFs into one")
    merge.add_argument("inputs", nargs="+", help="Input PDF files")
    merge.add_argument("output", help="Output PDF path")
    merge.add_argument(
        "--bookmark",
        dest="bookmarks",
        action="append",
        help="Add bookmark titles matching each input",
    )
    merge.add_argument("--title", help="Title stored in the merged document")
    merge.add_argument("--author", help="Author stored in the merged document")
    merge.set_defaults(tool_name="merge", build_context=_build_merge_context)

    split = subparsers.add_parser("split", help="Split a PDF into one file per page range")
    split.add_argument("input", help="Input PDF file")
    split.add_argument("output", help="Output directory for split documents")
    split.add_argument("--ranges", required=True, help="Comma separated page ranges, e.g. 1-3,7")
    split.set_defaults(tool_name="split", build_context=_build_split_context)

    split_pages = subparsers.add_parser("split-pages", help="Split a PDF into single pages")
    split_pages.add_argument("input", help="Input PDF file")
    split_pages.add_argument("output", help="Output directory for the pages")
    split_pages.set_defaults(tool_name="split-pages", build_context=_build_simple_context)

    for name, verb in (("extract", "Copy"), ("delete", "Remove")):
        parser = subparsers.add_parser(name, help=f"{verb} pages of a PDF")
        parser.add_argument("input", help="Input PDF file")
        parser.add_argument("output", help="Output PDF path")
        parser.add_argument("--pages", required=True, help="Comma separated pages, e.g. 1,3,5-7")
        parser.set_defaults(tool_name=name, build_context=_build_pages_context)

    rotate = subparsers.add_parser("rotate", help="Rotate pages of a PDF clockwise")
    rotate.add_argument("input", help="Input PDF file")
    rotate.add_argument("output", help="Output PDF path")
    rotate.add_argument("--rotation", type=int, choices=[90, 180, 270], default=90)
    rotate.add_argument("--pages", help="Comma separated pages to rotate (default: all)")
    rotate.set_defaults(tool_name="rotate", build_context=_build_rotate_context)

    metadata = subparsers.add_parser("metadata", help="Set title, author, subject or keywords")
    metadata.add_argument("input", help="Input PDF file")
    metadata.add_argument("output", help="Output PDF path")
    for field in METADATA_FIELDS:
        metadata.add_argument(f"--{field}", help=f"New {field}")
    metadata.set_defaults(tool_name="metadata", build_context=_build_metadata_context)


def _build_merge_context(args) -> ToolContext:
    document_info = {"title": args.title, "author": args.author}
    return ToolContext(
        output_path=args.output,
        inputs=args.inputs,
        config={"bookmarks": args.bookmarks, "document_info": document_info},
    )


def _build_split_context(args) -> ToolContext:
    return ToolContext(input_path=args.input, output_path=args.output, config={"ranges": args.ranges})


def _build_simple_context(args) -> ToolContext:
    return ToolContext(input_path=args.input, output_path=args.output)


def _build_pages_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"pages": parse_page_list(args.pages)},
    )


def _build_rotate_context(args) -> ToolContext:
    pages = parse_page_list(args.pages) if args.pages else None
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"rotation": args.rotation, "pages": pages},
    )


def _build_metadata_context(args) -> ToolContext:
    fields = {field: getattr(args, field) for field in METADATA_FIELDS}
    return ToolContext(input_path=args.input, output_path=args.output, config={"fields": fields})
