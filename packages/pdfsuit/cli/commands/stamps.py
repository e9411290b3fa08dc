"""CLI helpers for commands that draw on pages."""

from __future__ import annotations

from argparse import ArgumentParser, ArgumentTypeError, _SubParsersAction

from ...annotate import POSITIONS
from ...tools.common.interfaces import ToolContext


def _bookmark(value: str) -> tuple[str, int]:
    title, separator, page = value.rpartition(":")
    if not separator or not title:
        raise ArgumentTypeError(f"Expected TITLE:PAGE, got {value!r}")
    try:
        return title, int(page)
    except ValueError as exc:
        raise ArgumentTypeError(f"Invalid page number in {value!r}") from exc


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    watermark = subparsers.add_parser("watermark", help="Draw a text watermark on every page")
    watermark.add_argument("input", help="Input PDF file")
    watermark.add_argument("output", help="Output PDF path")
    watermark.add_argument("--text", required=True, help="Watermark text")
    watermark.add_argument("--opacity", type=float, default=0.3)
    watermark.add_argument("--rotation", type=float, default=45)
    watermark.add_argument("--font-size", type=float, default=50)
    watermark.set_defaults(tool_name="watermark", build_context=_build_watermark_context)

    numbers = subparsers.add_parser("page-numbers", help="Number every page")
    numbers.add_argument("input", help="Input PDF file")
    numbers.add_argument("output", help="Output PDF path")
    numbers.add_argument("--position", choices=POSITIONS, default="bottom")
    numbers.add_argument("--font-size", type=float, default=12)
    numbers.set_defaults(tool_name="page-numbers", build_context=_build_numbers_context)

    bookmarks = subparsers.add_parser("bookmarks", help="Add bookmarks to a PDF")
    bookmarks.add_argument("input", help="Input PDF file")
    bookmarks.add_argument("output", help="Output PDF path")
    bookmarks.add_argument(
        "--bookmark",
        dest="bookmarks",
        action="append",
        type=_bookmark,
        required=True,
        help="Bookmark as TITLE:PAGE, may be repeated",
    )
    bookmarks.set_defaults(tool_name="bookmarks", build_context=_build_bookmarks_context)

    sign = subparsers.add_parser("sign", help="Place an image or typed signature on one page")
    sign.add_argument("input", help="Input PDF file")
    sign.add_argument("output", help="Output PDF path")
    what = sign.add_mutually_exclusive_group(required=True)
    what.add_argument("--image", help="PNG or JPEG signature image")
    what.add_argument("--text", help="Text to type as the signature")
    sign.add_argument("--page", type=int, default=1, help="1-based page number")
    sign.add_argument("--x", type=float, default=0, help="Distance from the left edge")
    sign.add_argument("--y", type=float, default=0, help="Distance from the top edge")
    sign.add_argument("--width", type=float, default=150)
    sign.add_argument("--height", type=float, default=50)
    sign.add_argument("--include-date", action="store_true", help="Write the date under an image signature")
    sign.add_argument("--date-format", help="Date pattern using DD, MM, YYYY or YY")
    sign.add_argument("--font-size", type=float, default=24)
    sign.add_argument("--colour", default="#000000", help="Text colour as #RRGGBB")
    sign.set_defaults(tool_name="signature", build_context=_build_signature_context)


def _build_watermark_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={
            "text": args.text,
            "opacity": args.opacity,
            "rotation": args.rotation,
            "font_size": args.font_size,
        },
    )


def _build_numbers_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"position": args.position, "font_size": args.font_size},
    )


def _build_bookmarks_context(args) -> ToolContext:
    return ToolContext(input_path=args.input, output_path=args.output, config={"bookmarks": args.bookmarks})


def _build_signature_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={
            "image": args.image,
            "text": args.text,
            "page_number": args.page,
            "x": args.x,
            "y": args.y,
            "width": args.width,
            "height": args.height,
            "include_date": args.include_date,
            "date_format": args.date_format,
            "font_size": args.font_size,
            "colour": args.colour,
        },
    )
