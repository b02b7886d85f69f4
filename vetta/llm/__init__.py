"""LLM integration gateway helpers."""
from __future__ import annotations

from .client import OpenRouterAnalysisClient
from .prompts import build_messages

__all__ = ["OpenRouterAnalysisClient", "build_messages"]
