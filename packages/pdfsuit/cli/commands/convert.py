"""CLI helpers for compression, image conversion and OCR."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...compress import LEVELS
from ...tools.common.interfaces import ToolContext

OCR_OUTPUTS = {
    "text": "ocr",
    "pdf": "ocr-searchable",
}


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    compress = subparsers.add_parser("compress", help="Compress a PDF file")
    compress.add_argument("input", help="Input PDF file")
    compress.add_argument("output", help="Destination for compressed PDF")
    compress.add_argument(
        "--quality",
        choices=list(LEVELS),
        default="medium",
        help="Compression quality",
    )
    compress.set_defaults(tool_name="compress", build_context=_build_compress_context)

    images = subparsers.add_parser("image-to-pdf", help="Combine PNG/JPEG images into a PDF")
    images.add_argument("inputs", nargs="+", help="Input images, one page each")
    images.add_argument("output", help="Output PDF path")
    images.set_defaults(tool_name="image-to-pdf", build_context=_build_images_context)

    ocr = subparsers.add_parser("ocr", help="Recognise text in a PDF or image")
    ocr.add_argument("input", help="Input PDF or image")
    ocr.add_argument("output", help="Destination text file or searchable PDF")
    ocr.add_argument("--language", default=None, help="Tesseract language code")
    ocr.add_argument(
        "--format",
        choices=sorted(OCR_OUTPUTS),
        default="text",
        help="Write recognised text or a searchable PDF",
    )
    ocr.set_defaults(build_context=_build_ocr_context, tool_name_resolver=_select_ocr_tool)


def _select_ocr_tool(output_format: str) -> str:
    return OCR_OUTPUTS[output_format]


def _build_compress_context(args) -> ToolContext:
    return ToolContext(input_path=args.input, output_path=args.output, config={"quality": args.quality})


def _build_images_context(args) -> ToolContext:
    return ToolContext(output_path=args.output, inputs=args.inputs)


def _build_ocr_context(args) -> ToolContext:
    context = ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"language": args.language},
    )
    context.resources["tool_name"] = _select_ocr_tool(args.format)
    return context
