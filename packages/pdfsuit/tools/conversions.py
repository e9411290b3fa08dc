"""Plugins for compression, image conversion and text recognition."""

from __future__ import annotations

from pathlib import Path

from ..compress import CompressionResult, compress_pdf
from ..core.utils import get_logger
from ..images import IMAGE_CONTENT_TYPES, ImageInput, images_to_pdf
from ..ocr import OCRResult, format_ocr_results, ocr_to_searchable_pdf, perform_ocr
from .common.interfaces import BaseTool
from .common.pipeline import register_tool

LOGGER = get_logger("pdfsuit.tools.conversions")


@register_tool("compress")
class CompressTool(BaseTool):
    name = "compress"

    def run(self) -> CompressionResult:
        context = self.context
        quality = context.config.get("quality", "medium")
        LOGGER.debug(
            "Compressing %s to %s with quality %s",
            context.input_path,
            context.output_path,
            quality,
        )
        result = compress_pdf(context.require_input(), quality)
        context.write_output(result.data)
        context.resources["result"] = result
        return result


@register_tool("image-to-pdf")
class ImageToPdfTool(BaseTool):
    name = "image-to-pdf"

    def run(self) -> Path:
        context = self.context
        images = [
            ImageInput(
                name=path.name,
                data=path.read_bytes(),
                content_type=IMAGE_CONTENT_TYPES.get(path.suffix.lower()),
            )
            for path in context.all_inputs()
        ]
        LOGGER.debug("Converting %d image(s) to %s", len(images), context.output_path)
        result = context.write_output(images_to_pdf(images))
        context.resources["result"] = result
        return result


@register_tool("ocr")
class OcrTool(BaseTool):
    """Writes the recognised text; results are kept in ``resources['ocr_results']``."""

    name = "ocr"

    def run(self) -> Path:
        context = self.context
        language = context.config.get("language")
        on_progress = context.config.get("on_progress")
        results: list[OCRResult] = perform_ocr(context.require_input(), language, on_progress)
        output = context.require_output()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(format_ocr_results(results), encoding="utf-8")
        context.resources["ocr_results"] = results
        context.resources["result"] = output
        return output


@register_tool("ocr-searchable")
class SearchablePdfTool(BaseTool):
    name = "ocr-searchable"

    def run(self) -> Path:
        context = self.context
        language = context.config.get("language")
        on_progress = context.config.get("on_progress")
        source = context.require_input()
        LOGGER.debug("Adding a text layer to %s", source)
        data = ocr_to_searchable_pdf(
            source,
            language,
            on_progress,
            content_type=IMAGE_CONTENT_TYPES.get(source.suffix.lower()),
        )
        result = context.write_output(data)
        context.resources["result"] = result
        return result
