"""Map raw failures from any stage onto the flat error taxonomy."""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from vetta.pipeline.models import ErrorCategory, PipelineError

logger = logging.getLogger("vetta.pipeline.classifier")

SERVICE_ERROR_PREFIX = "Analysis service error:"

# Evaluated top to bottom; the first matching pattern decides the category.
_CATEGORY_PATTERNS: tuple[tuple[ErrorCategory, re.Pattern[str]], ...] = (
    (
        ErrorCategory.NETWORK,
        re.compile(r"network|connectivity|connection (?:refused|reset|error)|timed? ?out", re.I),
    ),
    (
        ErrorCategory.AUTH,
        re.compile(r"api[ _-]?key|authenticat|credential|unauthori[sz]ed", re.I),
    ),
    (
        ErrorCategory.EMPTY_DOCUMENT,
        re.compile(r"extracted text is empty|no extractable text", re.I),
    ),
    (
        ErrorCategory.INVALID_FORMAT,
        re.compile(r"invalid pdf|corrupt", re.I),
    ),
    (
        ErrorCategory.PROTECTED_DOCUMENT,
        re.compile(r"password", re.I),
    ),
    (
        ErrorCategory.TOO_LARGE,
        re.compile(r"file size|too large", re.I),
    ),
)
_SERVICE_PREFIX_PATTERN = re.compile(rf"^\s*{re.escape(SERVICE_ERROR_PREFIX)}\s*", re.I)


def classify(raw_failure: object) -> PipelineError:
    """Return a PipelineError for *raw_failure*; never raises."""

    try:
        message = _extract_message(raw_failure)
    except Exception:  # pragma: no cover - __str__ of arbitrary objects
        logger.debug("Unable to read failure message", exc_info=True)
        message = ""

    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(message):
            return PipelineError(category=category, raw_message=message)

    if _SERVICE_PREFIX_PATTERN.match(message):
        upstream = _SERVICE_PREFIX_PATTERN.sub("", message, count=1)
        return PipelineError(category=ErrorCategory.SERVICE_ERROR, raw_message=upstream)

    return PipelineError(category=ErrorCategory.UNKNOWN, raw_message=message)


def _extract_message(raw_failure: object) -> str:
    """Pull a message string out of strings, exceptions, mappings or other objects."""

    if raw_failure is None:
        return ""
    if isinstance(raw_failure, str):
        return raw_failure.strip()
    if isinstance(raw_failure, BaseException):
        text = str(raw_failure).strip()
        return text or type(raw_failure).__name__
    if isinstance(raw_failure, Mapping):
        value = raw_failure.get("message")
        return str(value).strip() if value is not None else ""
    value = getattr(raw_failure, "message", None)
    if isinstance(value, str):
        return value.strip()
    return str(raw_failure).strip()


__all__ = ["SERVICE_ERROR_PREFIX", "classify"]
