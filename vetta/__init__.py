"""Vetta resume critique package."""
from __future__ import annotations

from .errors import VettaError

__all__ = ("__version__", "VettaError")

__version__ = "0.1.0"
