"""Utility helpers for Vetta."""

from __future__ import annotations

from .io import format_bytes, format_display_path, normalize_newlines, read_text_file

__all__ = [
    "format_bytes",
    "format_display_path",
    "normalize_newlines",
    "read_text_file",
]
