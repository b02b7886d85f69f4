from __future__ import annotations

import pytest

from vetta.errors import AnalysisFailure, ExtractionFailure
from vetta.pipeline import ErrorCategory, PipelineError, classify


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("network request failed", ErrorCategory.NETWORK),
        (AnalysisFailure.NETWORK.value, ErrorCategory.NETWORK),
        (AnalysisFailure.TIMEOUT.value, ErrorCategory.NETWORK),
        ("Invalid API key provided", ErrorCategory.AUTH),
        ("Missing OPENROUTER_API_KEY", ErrorCategory.AUTH),
        ("authentication required", ErrorCategory.AUTH),
        (AnalysisFailure.AUTH.value, ErrorCategory.AUTH),
        (ExtractionFailure.EMPTY.value, ErrorCategory.EMPTY_DOCUMENT),
        ("PDF has no extractable text", ErrorCategory.EMPTY_DOCUMENT),
        (ExtractionFailure.MALFORMED.value, ErrorCategory.INVALID_FORMAT),
        ("Invalid PDF structure", ErrorCategory.INVALID_FORMAT),
        (ExtractionFailure.PROTECTED.value, ErrorCategory.PROTECTED_DOCUMENT),
        (ExtractionFailure.TOO_LARGE.value, ErrorCategory.TOO_LARGE),
        ("Analysis service error: quota exhausted", ErrorCategory.SERVICE_ERROR),
        ("something odd happened", ErrorCategory.UNKNOWN),
    ],
)
def test_classify_maps_messages_to_categories(message: str, expected: ErrorCategory) -> None:
    assert classify(message).category is expected


@pytest.mark.parametrize(
    "message",
    [
        "password",
        "PASSWORD required",
        "This document is Password-Protected.",
        "unable to open: the file requires a pAsSwOrD to continue",
    ],
)
def test_classify_detects_password_protection_regardless_of_case(message: str) -> None:
    error = classify(RuntimeError(message))

    assert error.category is ErrorCategory.PROTECTED_DOCUMENT


def test_network_outranks_auth_when_both_match() -> None:
    error = classify("network failure while validating API key")

    assert error.category is ErrorCategory.NETWORK


def test_empty_outranks_invalid_format() -> None:
    error = classify("Extracted text is empty; file may be corrupted")

    assert error.category is ErrorCategory.EMPTY_DOCUMENT


def test_service_error_strips_upstream_prefix() -> None:
    error = classify("Analysis service error: Model overloaded, try again")

    assert error.category is ErrorCategory.SERVICE_ERROR
    assert error.raw_message == "Model overloaded, try again"
    assert error.display_message.endswith("Model overloaded, try again")


def test_unknown_keeps_raw_message_and_prefixes_display() -> None:
    error = classify(ValueError("boom"))

    assert error.category is ErrorCategory.UNKNOWN
    assert error.raw_message == "boom"
    assert error.display_message == "Failed to analyze resume. Error: boom"


@pytest.mark.parametrize("raw", [None, "", "   ", object()])
def test_classify_never_raises_on_unclassifiable_input(raw: object) -> None:
    error = classify(raw)

    assert error.category is ErrorCategory.UNKNOWN
    assert error.display_message.startswith("Failed to analyze resume. Error: ")


def test_classify_blank_message_uses_fallback_text_for_display() -> None:
    error = classify("")

    assert error.raw_message == ""
    assert error.display_message == "Failed to analyze resume. Error: Unknown error occurred"


def test_classify_reads_message_from_mappings_and_objects() -> None:
    class _Failure:
        message = "Connection refused by host"

    assert classify({"message": "password needed"}).category is ErrorCategory.PROTECTED_DOCUMENT
    assert classify(_Failure()).category is ErrorCategory.NETWORK


def test_classify_uses_exception_type_when_message_is_empty() -> None:
    error = classify(KeyError())

    assert error.category is ErrorCategory.UNKNOWN
    assert error.raw_message == "KeyError"


@pytest.mark.parametrize("category", list(ErrorCategory))
def test_every_category_has_an_explanation(category: ErrorCategory) -> None:
    error = PipelineError(category=category, raw_message="detail")

    assert error.explanation
    assert error.display_message.startswith(error.explanation)
