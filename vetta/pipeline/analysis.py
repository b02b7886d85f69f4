"""Adapter normalizing the remote analysis capability into stage outcomes."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Protocol

from vetta.errors import AnalysisFailure, AnalysisRequestError
from vetta.pipeline.classifier import SERVICE_ERROR_PREFIX, classify
from vetta.pipeline.models import AnalysisResult, ExtractedText, Failure, Ok, StageOutcome

logger = logging.getLogger("vetta.pipeline.analysis")

DEFAULT_TIMEOUT_SECONDS = 60.0


class Analyzer(Protocol):
    """Remote capability producing a free-text critique."""

    def __call__(
        self,
        resume_text: str,
        job_description: str,
        *,
        advanced: bool = False,
    ) -> Awaitable[str]:
        ...


class AnalysisServiceAdapter:
    """Issue at most one analysis call per attempt, bounded by a timeout."""

    def __init__(
        self,
        analyzer: Analyzer,
        *,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._analyzer = analyzer
        self._timeout_seconds = timeout_seconds

    async def analyze(
        self,
        extracted: ExtractedText,
        job_description: str,
        *,
        advanced: bool = False,
    ) -> StageOutcome[AnalysisResult]:
        try:
            report = await asyncio.wait_for(
                self._analyzer(extracted.content, job_description, advanced=advanced),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Analysis call exceeded the timeout",
                extra={"timeout_seconds": self._timeout_seconds},
            )
            return Failure(classify(AnalysisFailure.TIMEOUT.value))
        except AnalysisRequestError as exc:
            logger.warning(
                "Analysis call failed",
                extra={"reason": exc.reason.name, "detail": exc.message},
            )
            return Failure(classify(_raw_message(exc)))
        except Exception as exc:
            logger.warning("Analysis call raised an unexpected error", exc_info=True)
            return Failure(classify(exc))

        if not isinstance(report, str) or not report.strip():
            malformed = AnalysisRequestError(
                message="The analysis service returned an empty critique.",
                reason=AnalysisFailure.MALFORMED_RESPONSE,
            )
            return Failure(classify(_raw_message(malformed)))

        return Ok(AnalysisResult(report_text=report))


def _raw_message(error: AnalysisRequestError) -> str:
    """Turn a typed analysis failure into the raw message the classifier expects."""

    if error.reason is AnalysisFailure.SERVICE:
        return f"{SERVICE_ERROR_PREFIX} {error.message}"
    if error.reason is AnalysisFailure.MALFORMED_RESPONSE:
        return f"{SERVICE_ERROR_PREFIX} {error.reason.value}"
    return error.reason.value


__all__ = ["Analyzer", "AnalysisServiceAdapter", "DEFAULT_TIMEOUT_SECONDS"]
