"""Input validation for analysis requests."""
from __future__ import annotations

from vetta.pipeline.models import (
    AnalysisRequest,
    ErrorCategory,
    Failure,
    Ok,
    PipelineError,
    StageOutcome,
    ValidatedRequest,
)

MISSING_FILE_MESSAGE = "Please upload a resume first"
MISSING_JOB_DESCRIPTION_MESSAGE = "Please enter a job description"


def validate(request: AnalysisRequest) -> StageOutcome[ValidatedRequest]:
    """Check that a resume file and a non-blank job description were supplied."""

    if request.file is None:
        return _missing(MISSING_FILE_MESSAGE)

    job_description = (request.job_description or "").strip()
    if not job_description:
        return _missing(MISSING_JOB_DESCRIPTION_MESSAGE)

    return Ok(
        ValidatedRequest(
            file=request.file,
            job_description=job_description,
            advanced=request.advanced,
        )
    )


def _missing(message: str) -> Failure:
    return Failure(PipelineError(category=ErrorCategory.MISSING_INPUT, raw_message=message))


__all__ = ["MISSING_FILE_MESSAGE", "MISSING_JOB_DESCRIPTION_MESSAGE", "validate"]
