"""Shared exit code definitions for Vetta CLI operations."""
from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Deterministic exit codes, one per family of error categories."""

    SUCCESS = 0
    UNEXPECTED_ERROR = 1
    INVALID_INPUT = 2
    DOCUMENT_ERROR = 3
    AUTH_ERROR = 4
    NETWORK_ERROR = 5
    SERVICE_ERROR = 6


__all__ = ["ExitCode"]
