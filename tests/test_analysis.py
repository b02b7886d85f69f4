from __future__ import annotations

import asyncio

import pytest

from vetta.errors import AnalysisFailure, AnalysisRequestError
from vetta.pipeline import (
    AnalysisResult,
    AnalysisServiceAdapter,
    ErrorCategory,
    ExtractedText,
    Failure,
    Ok,
)

EXTRACTED = ExtractedText(content="John Doe, 5 years experience", source_file_name="resume.pdf")


def _failing(error: Exception):
    async def _analyze(resume_text: str, job_description: str, *, advanced: bool = False) -> str:
        raise error

    return _analyze


@pytest.mark.asyncio
async def test_analyze_returns_result_and_forwards_inputs() -> None:
    calls: list[tuple[str, str, bool]] = []

    async def _analyze(resume_text: str, job_description: str, *, advanced: bool = False) -> str:
        calls.append((resume_text, job_description, advanced))
        return "Strong match; add metrics."

    outcome = await AnalysisServiceAdapter(_analyze).analyze(
        EXTRACTED, "Senior Engineer", advanced=True
    )

    assert isinstance(outcome, Ok)
    assert isinstance(outcome.value, AnalysisResult)
    assert outcome.value.report_text == "Strong match; add metrics."
    assert calls == [("John Doe, 5 years experience", "Senior Engineer", True)]


@pytest.mark.asyncio
async def test_analyze_times_out_as_network_error() -> None:
    async def _slow(resume_text: str, job_description: str, *, advanced: bool = False) -> str:
        await asyncio.sleep(5)
        return "never"

    outcome = await AnalysisServiceAdapter(_slow, timeout_seconds=0.01).analyze(
        EXTRACTED, "Senior Engineer"
    )

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.NETWORK
    assert outcome.error.raw_message == AnalysisFailure.TIMEOUT.value


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("reason", "expected"),
    [
        (AnalysisFailure.AUTH, ErrorCategory.AUTH),
        (AnalysisFailure.NETWORK, ErrorCategory.NETWORK),
        (AnalysisFailure.TIMEOUT, ErrorCategory.NETWORK),
        (AnalysisFailure.MALFORMED_RESPONSE, ErrorCategory.SERVICE_ERROR),
        (AnalysisFailure.SERVICE, ErrorCategory.SERVICE_ERROR),
    ],
)
async def test_analyze_classifies_typed_failures(
    reason: AnalysisFailure, expected: ErrorCategory
) -> None:
    error = AnalysisRequestError(message="upstream detail", reason=reason)

    outcome = await AnalysisServiceAdapter(_failing(error)).analyze(EXTRACTED, "Engineer")

    assert isinstance(outcome, Failure)
    assert outcome.error.category is expected


@pytest.mark.asyncio
async def test_analyze_preserves_service_message_for_display() -> None:
    error = AnalysisRequestError(message="Model overloaded", reason=AnalysisFailure.SERVICE)

    outcome = await AnalysisServiceAdapter(_failing(error)).analyze(EXTRACTED, "Engineer")

    assert isinstance(outcome, Failure)
    assert outcome.error.raw_message == "Model overloaded"
    assert outcome.error.display_message == "Error from the analysis service: Model overloaded"


@pytest.mark.asyncio
async def test_analyze_reports_malformed_response() -> None:
    error = AnalysisRequestError(message="bad json", reason=AnalysisFailure.MALFORMED_RESPONSE)

    outcome = await AnalysisServiceAdapter(_failing(error)).analyze(EXTRACTED, "Engineer")

    assert isinstance(outcome, Failure)
    assert outcome.error.raw_message == "malformed response"


@pytest.mark.asyncio
@pytest.mark.parametrize("report", ["", "   \n"])
async def test_analyze_treats_empty_report_as_malformed(report: str) -> None:
    async def _analyze(resume_text: str, job_description: str, *, advanced: bool = False) -> str:
        return report

    outcome = await AnalysisServiceAdapter(_analyze).analyze(EXTRACTED, "Engineer")

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.SERVICE_ERROR
    assert outcome.error.raw_message == "malformed response"


@pytest.mark.asyncio
async def test_analyze_classifies_unexpected_exceptions() -> None:
    outcome = await AnalysisServiceAdapter(_failing(ConnectionError("Connection reset"))).analyze(
        EXTRACTED, "Engineer"
    )

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.NETWORK
