"""Bookmark tools."""

from __future__ import annotations

from .bookmarks import Bookmark, add_bookmarks, extract_bookmarks

__all__ = ["Bookmark", "add_bookmarks", "extract_bookmarks"]
