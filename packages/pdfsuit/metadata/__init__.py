"""Document information (title, author, subject, keywords)."""

from __future__ import annotations

from .editor import METADATA_KEYS, document_info, edit_metadata, read_metadata

__all__ = ["METADATA_KEYS", "document_info", "edit_metadata", "read_metadata"]
