"""Execution orchestrator for Vetta CLI commands."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from vetta.configuration import Settings
from vetta.errors import ConfigurationError, InputValidationError, VettaError
from vetta.exit_codes import ExitCode
from vetta.pipeline import (
    AnalysisPipeline,
    AnalysisRequest,
    Analyzer,
    ErrorCategory,
    Observer,
    PipelineState,
    Stage,
    TextExtractor,
    UploadedFile,
)
from vetta.reporting import export_result
from vetta.utils import format_bytes, format_display_path

logger = logging.getLogger("vetta.orchestration.runner")


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of invoking the orchestration pipeline."""

    exit_code: ExitCode
    status: str
    message: str | None = None
    remediation: str | None = None
    state: PipelineState | None = None
    artifact_path: Path | None = None


_CATEGORY_MAPPINGS: dict[ErrorCategory, tuple[ExitCode, str | None]] = {
    ErrorCategory.MISSING_INPUT: (
        ExitCode.INVALID_INPUT,
        "Pass --resume and either --jd or a non-blank --jd-text.",
    ),
    ErrorCategory.NETWORK: (
        ExitCode.NETWORK_ERROR,
        "Verify network connectivity and HTTPS_PROXY/HTTP_PROXY settings, then retry.",
    ),
    ErrorCategory.AUTH: (
        ExitCode.AUTH_ERROR,
        "Set the OPENROUTER_API_KEY environment variable to a valid key.",
    ),
    ErrorCategory.EMPTY_DOCUMENT: (
        ExitCode.DOCUMENT_ERROR,
        "Run OCR and export a text-based PDF before retrying.",
    ),
    ErrorCategory.INVALID_FORMAT: (
        ExitCode.DOCUMENT_ERROR,
        "Provide a valid PDF export of the resume.",
    ),
    ErrorCategory.PROTECTED_DOCUMENT: (
        ExitCode.DOCUMENT_ERROR,
        "Remove the password or export an unencrypted copy before retrying.",
    ),
    ErrorCategory.TOO_LARGE: (
        ExitCode.DOCUMENT_ERROR,
        "Compress the PDF or remove embedded images to get below the size limit.",
    ),
    ErrorCategory.SERVICE_ERROR: (
        ExitCode.SERVICE_ERROR,
        "Check https://status.openrouter.ai/ and retry later.",
    ),
    ErrorCategory.UNKNOWN: (
        ExitCode.UNEXPECTED_ERROR,
        "Re-run with --debug and inspect the logs before retrying.",
    ),
}

_ERROR_MAPPINGS: tuple[tuple[type[VettaError], ExitCode, str, str | None], ...] = (
    (
        InputValidationError,
        ExitCode.INVALID_INPUT,
        "Input validation failed.",
        "Double-check the resume and job description paths and file permissions.",
    ),
    (
        ConfigurationError,
        ExitCode.INVALID_INPUT,
        "Settings could not be loaded.",
        "Fix the settings file or unset VETTA_CONFIG.",
    ),
)


def run_analysis(
    resume_path: Path,
    *,
    job_description: str,
    settings: Settings,
    advanced: bool = False,
    output_path: Path | None = None,
    observer: Observer | None = None,
    extractor: TextExtractor | None = None,
    analyzer: Analyzer | None = None,
) -> ExecutionOutcome:
    """Run a single analysis attempt and translate its terminal state."""

    try:
        request = build_request(resume_path, job_description, advanced=advanced)
        pipeline = AnalysisPipeline.from_settings(settings, extractor=extractor, analyzer=analyzer)
        if observer is not None:
            pipeline.subscribe(observer)

        logger.info(
            "Starting analysis attempt",
            extra={
                "resume": format_display_path(resume_path),
                "resume_size": format_bytes(request.file.size) if request.file else None,
                "advanced": advanced,
            },
        )
        state = asyncio.run(pipeline.run_analysis(request))
        return outcome_from_state(state, output_path=output_path)
    except VettaError as error:
        return handle_domain_error(error)
    except Exception as error:  # pragma: no cover - last-resort guard
        logger.exception("Unexpected error occurred during orchestration.")
        return ExecutionOutcome(
            exit_code=ExitCode.UNEXPECTED_ERROR,
            status="failure",
            message=str(error) or "An unexpected error occurred during the analysis run.",
            remediation="Re-run with --debug and inspect the logs before retrying.",
        )


def build_request(
    resume_path: Path,
    job_description: str,
    *,
    advanced: bool = False,
) -> AnalysisRequest:
    """Read the resume bytes from disk into an immutable AnalysisRequest."""

    try:
        content = resume_path.read_bytes()
    except OSError as exc:
        raise InputValidationError(
            message=f"Unable to read the resume file {format_display_path(resume_path)}.",
            remediation=(
                "Verify file permissions and that the file is not locked by another process."
            ),
        ) from exc

    return AnalysisRequest(
        file=UploadedFile(name=resume_path.name, content=content),
        job_description=job_description,
        advanced=advanced,
    )


def outcome_from_state(
    state: PipelineState,
    *,
    output_path: Path | None = None,
) -> ExecutionOutcome:
    """Map a terminal pipeline state to an exit code, exporting on success."""

    if state.stage is Stage.SUCCEEDED and state.result is not None:
        artifact_path = None
        if output_path is not None:
            artifact = export_result(state.result)
            try:
                artifact_path = artifact.write_to(output_path)
            except OSError:
                logger.warning("Unable to write exported analysis", exc_info=True)
                return handle_domain_error(
                    InputValidationError(
                        message=f"Unable to write the analysis to {output_path}.",
                        remediation="Choose a writable --output location.",
                    )
                )
            logger.info("Exported analysis", extra={"artifact_path": str(artifact_path)})
        return ExecutionOutcome(
            exit_code=ExitCode.SUCCESS,
            status="success",
            state=state,
            artifact_path=artifact_path,
        )

    if state.stage is Stage.FAILED and state.error is not None:
        exit_code, remediation = map_category(state.error.category)
        return ExecutionOutcome(
            exit_code=exit_code,
            status="failure",
            message=state.error.display_message,
            remediation=remediation,
            state=state,
        )

    return ExecutionOutcome(
        exit_code=ExitCode.UNEXPECTED_ERROR,
        status="failure",
        message=f"Analysis stopped in the {state.stage.value} stage.",
        state=state,
    )


def map_category(category: ErrorCategory) -> tuple[ExitCode, str | None]:
    """Return the exit code and remediation hint for an error category."""

    return _CATEGORY_MAPPINGS[category]


def handle_domain_error(error: VettaError) -> ExecutionOutcome:
    """Translate a domain error into an execution outcome and log remediation hints."""

    exit_code, default_message, default_remediation = _map_error(error)
    message = error.message or default_message
    remediation = error.remediation or default_remediation

    logger.error(message, extra={"exit_code": int(exit_code)})
    if remediation:
        logger.error("Remediation: %s", remediation)

    return ExecutionOutcome(
        exit_code=exit_code,
        status="failure",
        message=message,
        remediation=remediation,
    )


def _map_error(error: VettaError) -> tuple[ExitCode, str, str | None]:
    """Match an error instance to its configured exit code and remediation."""

    for error_type, exit_code, message, remediation in _ERROR_MAPPINGS:
        if isinstance(error, error_type):
            return exit_code, message, remediation

    return (
        ExitCode.UNEXPECTED_ERROR,
        "An unexpected error occurred during the analysis run.",
        "Enable --debug and retry. If the issue persists, open a bug ticket with the logs.",
    )


__all__ = [
    "ExecutionOutcome",
    "build_request",
    "handle_domain_error",
    "map_category",
    "outcome_from_state",
    "run_analysis",
]
