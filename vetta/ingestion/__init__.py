"""Document ingestion capabilities."""
from __future__ import annotations

from .pdf_loader import extract_text

__all__ = ["extract_text"]
