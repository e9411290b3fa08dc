"""CLI helpers for PDF encryption and decryption."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    protect = subparsers.add_parser("protect", help="Encrypt a PDF with a password")
    protect.add_argument("input", help="Input PDF path")
    protect.add_argument("output", help="Destination PDF path")
    protect.add_argument("--password", required=True, help="User password")
    protect.add_argument("--owner-password", help="Owner password for encryption")
    protect.set_defaults(tool_name="protect", build_context=_build_context)

    unlock = subparsers.add_parser("unlock", help="Remove password protection from a PDF")
    unlock.add_argument("input", help="Input PDF path")
    unlock.add_argument("output", help="Destination PDF path")
    unlock.add_argument("--password", required=True, help="User password")
    unlock.set_defaults(tool_name="unlock", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={
            "password": args.password,
            "owner_password": getattr(args, "owner_password", None),
        },
    )
