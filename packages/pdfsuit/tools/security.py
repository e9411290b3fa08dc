"""Plugin exposing PDF encryption utilities."""

from __future__ import annotations

from pathlib import Path

from ..core.utils import get_logger
from ..security import protect_pdf, unprotect_pdf
from .common.interfaces import BaseTool
from .common.pipeline import register_tool

LOGGER = get_logger("pdfsuit.tools.security")


@register_tool("protect")
class ProtectTool(BaseTool):
    name = "protect"

    def run(self) -> Path:
        context = self.context
        password = context.config.get("password")
        owner_password = context.config.get("owner_password")
        if not password:
            raise ValueError("A password is required for encryption")

        LOGGER.debug(
            "Encrypting %s to %s with owner password %s",
            context.input_path,
            context.output_path,
            "<provided>" if owner_password else "<default>",
        )
        data = protect_pdf(context.require_input(), password, owner_password=owner_password)
        result = context.write_output(data)
        context.resources["result"] = result
        return result


@register_tool("unlock")
class UnlockTool(BaseTool):
    name = "unlock"

    def run(self) -> Path:
        context = self.context
        password = context.config.get("password")
        if not password:
            raise ValueError("A password is required for decryption")

        LOGGER.debug("Decrypting %s to %s", context.input_path, context.output_path)
        result = context.write_output(unprotect_pdf(context.require_input(), password))
        context.resources["result"] = result
        return result
