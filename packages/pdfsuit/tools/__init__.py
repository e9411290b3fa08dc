"""Namespace for pluggable PDFSuit tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from . import documents  # noqa: F401  # merge, split, extract, delete and rotate
    from . import stamps  # noqa: F401
    from . import conversions  # noqa: F401
    from . import security  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
