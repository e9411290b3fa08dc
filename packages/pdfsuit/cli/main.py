"""Command line interface for the PDFSuit toolkit."""

from __future__ import annotations

import argparse
from typing import Sequence

from ..core.exceptions import PdfSuitError
from ..core.utils import get_logger
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ToolContext
from ..tools.common.pipeline import registry
from .commands import convert, documents, security, stamps

COMMAND_MODULES = [documents, stamps, convert, security]

LOGGER = get_logger("pdfsuit.cli")


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pdfsuit", description="PDFSuit CLI")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def _resolve_tool_name(args, context: ToolContext) -> str:
    tool_name = getattr(args, "tool_name", None)
    if tool_name:
        return tool_name
    if "tool_name" in context.resources:
        return context.resources["tool_name"]
    resolver = getattr(args, "tool_name_resolver", None)
    if resolver is not None and getattr(args, "format", None) is not None:
        return resolver(args.format)
    raise SystemExit("Unable to determine tool name from arguments")


def main(argv: Sequence[str] | None = None) -> object:
    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    try:
        context: ToolContext = args.build_context(args)
        tool_name = _resolve_tool_name(args, context)
        tool = registry.create(tool_name, context)
        result = tool.run()
    except (PdfSuitError, ValueError) as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        raise SystemExit(2) from exc
    return result


if __name__ == "__main__":  # pragma: no cover
    main()
