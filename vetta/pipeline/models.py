"""Dataclasses describing pipeline inputs, results and observable state."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


def utc_now() -> datetime:
    """Return the current time as an aware UTC timestamp."""

    return datetime.now(timezone.utc)


class ErrorCategory(str, Enum):
    """Flat taxonomy of user-facing failure kinds."""

    MISSING_INPUT = "MissingInput"
    NETWORK = "Network"
    AUTH = "Auth"
    EMPTY_DOCUMENT = "EmptyDocument"
    INVALID_FORMAT = "InvalidFormat"
    PROTECTED_DOCUMENT = "ProtectedDocument"
    TOO_LARGE = "TooLarge"
    SERVICE_ERROR = "ServiceError"
    UNKNOWN = "Unknown"


CATEGORY_EXPLANATIONS: dict[ErrorCategory, str] = {
    ErrorCategory.MISSING_INPUT: "Please upload a resume and enter a job description.",
    ErrorCategory.NETWORK: (
        "Failed to analyze resume. Network error. Please check your internet connection."
    ),
    ErrorCategory.AUTH: (
        "Authentication error. Please check that your analysis service API key is "
        "correctly configured."
    ),
    ErrorCategory.EMPTY_DOCUMENT: (
        "The PDF appears to be empty, corrupted, or contains no extractable text. "
        "Please try a different file."
    ),
    ErrorCategory.INVALID_FORMAT: (
        "The file is not a valid PDF or is corrupted. Please try a different file."
    ),
    ErrorCategory.PROTECTED_DOCUMENT: (
        "Password-protected PDFs are not supported. Please remove the password and try again."
    ),
    ErrorCategory.TOO_LARGE: "The file is too large. Maximum size is 10MB.",
    ErrorCategory.SERVICE_ERROR: "Error from the analysis service:",
    ErrorCategory.UNKNOWN: "Failed to analyze resume.",
}


class Stage(str, Enum):
    """Tags for the pipeline state machine."""

    IDLE = "Idle"
    VALIDATING = "Validating"
    EXTRACTING = "Extracting"
    ANALYZING = "Analyzing"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    @property
    def is_busy(self) -> bool:
        """Return True while an attempt is in flight."""

        return self in _BUSY_STAGES

    @property
    def is_terminal(self) -> bool:
        """Return True for the two outcomes of an attempt."""

        return self in (Stage.SUCCEEDED, Stage.FAILED)


_BUSY_STAGES = frozenset({Stage.VALIDATING, Stage.EXTRACTING, Stage.ANALYZING})
_UNKNOWN_FALLBACK = "Unknown error occurred"


@dataclass(frozen=True)
class UploadedFile:
    """Binary document supplied by the user."""

    name: str
    content: bytes

    @property
    def size(self) -> int:
        """Return the document length in bytes."""

        return len(self.content)


@dataclass(frozen=True)
class AnalysisRequest:
    """Immutable input for a single analysis attempt."""

    file: UploadedFile | None
    job_description: str
    advanced: bool = False


@dataclass(frozen=True)
class ValidatedRequest:
    """Request that passed validation; the file is guaranteed to be present."""

    file: UploadedFile
    job_description: str
    advanced: bool = False


@dataclass(frozen=True)
class ExtractedText:
    """Text recovered from the uploaded document."""

    content: str
    source_file_name: str

    def __post_init__(self) -> None:
        if not self.content.strip():
            raise ValueError("ExtractedText content must not be blank")


@dataclass(frozen=True)
class AnalysisResult:
    """Critique returned by the analysis service."""

    report_text: str
    generated_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class PipelineError:
    """Classified failure placed into the Failed state."""

    category: ErrorCategory
    raw_message: str
    occurred_at: datetime = field(default_factory=utc_now)

    @property
    def explanation(self) -> str:
        """Return the fixed, user-facing template for the category."""

        return CATEGORY_EXPLANATIONS[self.category]

    @property
    def display_message(self) -> str:
        """Return the message a user should see for this failure."""

        if self.category is ErrorCategory.SERVICE_ERROR:
            return f"{self.explanation} {self.raw_message}"
        if self.category is ErrorCategory.UNKNOWN:
            return f"{self.explanation} Error: {self.raw_message or _UNKNOWN_FALLBACK}"
        return self.explanation


@dataclass(frozen=True)
class AttemptMetadata:
    """Debugging details captured when an attempt starts."""

    file_name: str | None
    file_size: int | None
    job_description_length: int
    started_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_request(cls, request: AnalysisRequest) -> "AttemptMetadata":
        file = request.file
        return cls(
            file_name=file.name if file is not None else None,
            file_size=file.size if file is not None else None,
            job_description_length=len(request.job_description or ""),
        )


@dataclass(frozen=True)
class PipelineState:
    """Tagged pipeline state; only Succeeded carries a result, only Failed an error."""

    stage: Stage
    result: AnalysisResult | None = None
    error: PipelineError | None = None
    attempt: AttemptMetadata | None = None

    def __post_init__(self) -> None:
        if (self.stage is Stage.SUCCEEDED) != (self.result is not None):
            raise ValueError("Only the Succeeded state carries an AnalysisResult")
        if (self.stage is Stage.FAILED) != (self.error is not None):
            raise ValueError("Only the Failed state carries a PipelineError")

    @classmethod
    def idle(cls) -> "PipelineState":
        return cls(stage=Stage.IDLE)

    @classmethod
    def succeeded(
        cls, result: AnalysisResult, attempt: AttemptMetadata | None = None
    ) -> "PipelineState":
        return cls(stage=Stage.SUCCEEDED, result=result, attempt=attempt)

    @classmethod
    def failed(
        cls, error: PipelineError, attempt: AttemptMetadata | None = None
    ) -> "PipelineState":
        return cls(stage=Stage.FAILED, error=error, attempt=attempt)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful stage outcome."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Failed stage outcome carrying an already-classified error."""

    error: PipelineError


StageOutcome = Union[Ok[T], Failure]


__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "AttemptMetadata",
    "CATEGORY_EXPLANATIONS",
    "ErrorCategory",
    "ExtractedText",
    "Failure",
    "Ok",
    "PipelineError",
    "PipelineState",
    "Stage",
    "StageOutcome",
    "UploadedFile",
    "ValidatedRequest",
    "utc_now",
]
