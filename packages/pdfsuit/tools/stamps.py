"""Plugins drawing on or annotating existing pages."""

from __future__ import annotations

from pathlib import Path

from ..annotate import SignaturePlacement, add_page_numbers, add_signature, add_text_signature, add_watermark
from ..core.utils import get_logger
from ..images import IMAGE_CONTENT_TYPES, ImageInput
from ..outline import Bookmark, add_bookmarks
from .common.interfaces import BaseTool
from .common.pipeline import register_tool

LOGGER = get_logger("pdfsuit.tools.stamps")


@register_tool("watermark")
class WatermarkTool(BaseTool):
    name = "watermark"

    def run(self) -> Path:
        context = self.context
        text = context.config.get("text")
        if not text:
            raise ValueError("Watermark tool requires 'text' configuration")
        options = {
            key: context.config[key]
            for key in ("opacity", "rotation", "font_size")
            if context.config.get(key) is not None
        }
        LOGGER.debug("Watermarking %s with %r %s", context.input_path, text, options)
        result = context.write_output(add_watermark(context.require_input(), text, **options))
        context.resources["result"] = result
        return result


@register_tool("page-numbers")
class PageNumbersTool(BaseTool):
    name = "page-numbers"

    def run(self) -> Path:
        context = self.context
        position = context.config.get("position", "bottom")
        font_size = context.config.get("font_size", 12)
        LOGGER.debug("Numbering pages of %s at the %s", context.input_path, position)
        data = add_page_numbers(context.require_input(), position=position, font_size=font_size)
        result = context.write_output(data)
        context.resources["result"] = result
        return result


@register_tool("bookmarks")
class BookmarksTool(BaseTool):
    name = "bookmarks"

    def run(self) -> Path:
        context = self.context
        entries = context.config.get("bookmarks") or []
        bookmarks = [
            entry if isinstance(entry, Bookmark) else Bookmark(str(entry[0]), int(entry[1]))
            for entry in entries
        ]
        LOGGER.debug("Adding %d bookmark(s) to %s", len(bookmarks), context.input_path)
        result = context.write_output(add_bookmarks(context.require_input(), bookmarks))
        context.resources["result"] = result
        return result


@register_tool("signature")
class SignatureTool(BaseTool):
    """Places an image (``config['image']``) or typed ``config['text']`` signature."""

    name = "signature"

    def run(self) -> Path:
        context = self.context
        config = context.config
        placement = SignaturePlacement(
            page_number=int(config.get("page_number", 1)),
            x=float(config.get("x", 0)),
            y=float(config.get("y", 0)),
            width=float(config.get("width", 150)),
            height=float(config.get("height", 50)),
        )
        source = context.require_input()
        image = config.get("image")
        text = config.get("text")
        if image:
            image_path = Path(image)
            LOGGER.debug("Signing page %s of %s with %s", placement.page_number, source, image_path)
            data = add_signature(
                source,
                ImageInput(
                    name=image_path.name,
                    data=image_path.read_bytes(),
                    content_type=IMAGE_CONTENT_TYPES.get(image_path.suffix.lower()),
                ),
                placement,
                include_date=bool(config.get("include_date")),
                date_format=config.get("date_format"),
            )
        elif text:
            LOGGER.debug("Typing signature on page %s of %s", placement.page_number, source)
            data = add_text_signature(
                source,
                text,
                placement,
                font_size=float(config.get("font_size", 24)),
                colour=config.get("colour", "#000000"),
            )
        else:
            raise ValueError("Signature tool requires 'image' or 'text' configuration")
        result = context.write_output(data)
        context.resources["result"] = result
        return result
