"""Rendering utilities for terminal pipeline states."""
from __future__ import annotations

import json
from dataclasses import dataclass

from vetta.pipeline.models import AnalysisResult, AttemptMetadata, PipelineError

_RESULT_TITLE = "Analysis Results"
_ERROR_TITLE = "Oops! Something went wrong"
_DEBUG_TITLE = "Debug info:"
_RULE_WIDTH = 60


@dataclass(frozen=True)
class ReportRenderOptions:
    """Render-time switches influencing CLI layout."""

    quiet: bool = False
    debug: bool = False


def render_result(result: AnalysisResult, options: ReportRenderOptions | None = None) -> str:
    """Render a successful critique, preserving its line structure."""

    options = options or ReportRenderOptions()
    if options.quiet:
        return result.report_text

    lines = [
        _RESULT_TITLE,
        "=" * _RULE_WIDTH,
        result.report_text,
        "=" * _RULE_WIDTH,
        f"Generated at {result.generated_at.isoformat(timespec='seconds')}",
    ]
    return "\n".join(lines)


def render_error(
    error: PipelineError,
    *,
    attempt: AttemptMetadata | None = None,
    remediation: str | None = None,
    options: ReportRenderOptions | None = None,
) -> str:
    """Render a classified failure with an optional diagnostic block."""

    options = options or ReportRenderOptions()
    lines = [f"{_ERROR_TITLE} [{error.category.value}]", error.display_message]
    if remediation and not options.quiet:
        lines.append(f"Remediation: {remediation}")

    if options.debug:
        lines.append("")
        lines.append(_DEBUG_TITLE)
        lines.append(json.dumps(_debug_payload(error, attempt), indent=2))

    return "\n".join(lines)


def _debug_payload(error: PipelineError, attempt: AttemptMetadata | None) -> dict[str, object]:
    payload: dict[str, object] = {
        "category": error.category.value,
        "rawMessage": error.raw_message,
        "timestamp": error.occurred_at.isoformat(),
    }
    if attempt is not None:
        payload["fileName"] = attempt.file_name
        payload["fileSize"] = (
            f"{attempt.file_size / 1024:.2f} KB" if attempt.file_size is not None else "No file"
        )
        payload["jobDescLength"] = attempt.job_description_length
    return payload


__all__ = ["ReportRenderOptions", "render_error", "render_result"]
