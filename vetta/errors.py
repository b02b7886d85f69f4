"""Domain-specific exception hierarchy for Vetta."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExtractionFailure(str, Enum):
    """Typed reasons a text extraction capability can fail with."""

    EMPTY = "Extracted text is empty"
    MALFORMED = "Invalid PDF format or corrupted file"
    PROTECTED = "PDF is password protected"
    TOO_LARGE = "File size exceeds the maximum upload limit"


class AnalysisFailure(str, Enum):
    """Typed reasons an analysis capability can fail with."""

    AUTH = "Authentication failed: the analysis service rejected the API key"
    NETWORK = "Network error while contacting the analysis service"
    TIMEOUT = "Network timeout: the analysis service did not respond in time"
    MALFORMED_RESPONSE = "malformed response"
    SERVICE = "service error"


@dataclass
class VettaError(Exception):
    """Base exception for Vetta-specific errors with optional remediation text."""

    message: str
    remediation: str | None = None

    def __post_init__(self) -> None:  # pragma: no cover - dataclass validation hook
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InputValidationError(VettaError):
    """Raised when the CLI receives invalid or missing input."""


class ConfigurationError(VettaError):
    """Raised when runtime settings cannot be loaded."""


@dataclass
class DocumentExtractionError(VettaError):
    """Raised by a text extraction capability when a document cannot be read."""

    reason: ExtractionFailure = ExtractionFailure.MALFORMED


@dataclass
class AnalysisRequestError(VettaError):
    """Raised by an analysis capability when the remote call fails."""

    reason: AnalysisFailure = AnalysisFailure.SERVICE


class PipelineBusyError(VettaError):
    """Raised when an attempt is requested while another one is in flight."""


class InvalidTransitionError(VettaError):
    """Raised when the pipeline is asked to move along an undefined transition."""


__all__ = [
    "AnalysisFailure",
    "AnalysisRequestError",
    "ConfigurationError",
    "DocumentExtractionError",
    "ExtractionFailure",
    "InputValidationError",
    "InvalidTransitionError",
    "PipelineBusyError",
    "VettaError",
]
