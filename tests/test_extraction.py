from __future__ import annotations

import pytest

from vetta.errors import DocumentExtractionError, ExtractionFailure
from vetta.pipeline import (
    ErrorCategory,
    ExtractedText,
    Failure,
    Ok,
    TextExtractorAdapter,
    UploadedFile,
)


def _raising(reason: ExtractionFailure):
    def _extract(content: bytes) -> str:
        raise DocumentExtractionError(message="details for logs", reason=reason)

    return _extract


@pytest.mark.asyncio
async def test_extract_returns_text(resume_file: UploadedFile) -> None:
    adapter = TextExtractorAdapter(lambda content: "John Doe, 5 years experience")

    outcome = await adapter.extract(resume_file)

    assert isinstance(outcome, Ok)
    assert outcome.value == ExtractedText(
        content="John Doe, 5 years experience",
        source_file_name="resume.pdf",
    )


@pytest.mark.asyncio
async def test_extract_supports_async_capabilities(resume_file: UploadedFile) -> None:
    async def _extract(content: bytes) -> str:
        return "async text"

    outcome = await TextExtractorAdapter(_extract).extract(resume_file)

    assert isinstance(outcome, Ok)
    assert outcome.value.content == "async text"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   \n\t"])
async def test_extract_treats_blank_output_as_empty_document(
    resume_file: UploadedFile, text: str
) -> None:
    outcome = await TextExtractorAdapter(lambda content: text).extract(resume_file)

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.EMPTY_DOCUMENT


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("reason", "expected"),
    [
        (ExtractionFailure.EMPTY, ErrorCategory.EMPTY_DOCUMENT),
        (ExtractionFailure.MALFORMED, ErrorCategory.INVALID_FORMAT),
        (ExtractionFailure.PROTECTED, ErrorCategory.PROTECTED_DOCUMENT),
        (ExtractionFailure.TOO_LARGE, ErrorCategory.TOO_LARGE),
    ],
)
async def test_extract_classifies_typed_failures(
    resume_file: UploadedFile,
    reason: ExtractionFailure,
    expected: ErrorCategory,
) -> None:
    outcome = await TextExtractorAdapter(_raising(reason)).extract(resume_file)

    assert isinstance(outcome, Failure)
    assert outcome.error.category is expected
    assert outcome.error.raw_message == reason.value


@pytest.mark.asyncio
async def test_extract_rejects_oversized_files_without_calling_capability() -> None:
    calls: list[bytes] = []

    def _extract(content: bytes) -> str:
        calls.append(content)
        return "text"

    adapter = TextExtractorAdapter(_extract, max_file_size_bytes=10)
    outcome = await adapter.extract(UploadedFile(name="big.pdf", content=b"x" * 11))

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.TOO_LARGE
    assert calls == []


@pytest.mark.asyncio
async def test_extract_accepts_file_at_the_size_ceiling() -> None:
    adapter = TextExtractorAdapter(lambda content: "ok", max_file_size_bytes=10)

    outcome = await adapter.extract(UploadedFile(name="edge.pdf", content=b"x" * 10))

    assert isinstance(outcome, Ok)


@pytest.mark.asyncio
async def test_extract_default_ceiling_is_ten_megabytes() -> None:
    adapter = TextExtractorAdapter(lambda content: "ok")

    outcome = await adapter.extract(
        UploadedFile(name="huge.pdf", content=b"x" * (10 * 1024 * 1024 + 1))
    )

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.TOO_LARGE


@pytest.mark.asyncio
async def test_extract_classifies_unexpected_exceptions(resume_file: UploadedFile) -> None:
    def _extract(content: bytes) -> str:
        raise RuntimeError("PDF requires a password")

    outcome = await TextExtractorAdapter(_extract).extract(resume_file)

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.PROTECTED_DOCUMENT


@pytest.mark.asyncio
async def test_extract_awaits_async_callable_objects(resume_file: UploadedFile) -> None:
    class _RemoteExtractor:
        async def __call__(self, content: bytes) -> str:
            return f"{len(content)} bytes of text"

    outcome = await TextExtractorAdapter(_RemoteExtractor()).extract(resume_file)

    assert isinstance(outcome, Ok)
    assert outcome.value.content == f"{resume_file.size} bytes of text"


@pytest.mark.asyncio
async def test_extract_awaits_coroutines_returned_by_plain_functions(
    resume_file: UploadedFile,
) -> None:
    async def _remote(content: bytes) -> str:
        return "text from a remote service"

    outcome = await TextExtractorAdapter(lambda content: _remote(content)).extract(resume_file)

    assert isinstance(outcome, Ok)
    assert outcome.value.content == "text from a remote service"


@pytest.mark.asyncio
async def test_extract_classifies_failures_raised_by_returned_coroutines(
    resume_file: UploadedFile,
) -> None:
    async def _remote(content: bytes) -> str:
        raise DocumentExtractionError(message="locked", reason=ExtractionFailure.PROTECTED)

    outcome = await TextExtractorAdapter(lambda content: _remote(content)).extract(resume_file)

    assert isinstance(outcome, Failure)
    assert outcome.error.category is ErrorCategory.PROTECTED_DOCUMENT
