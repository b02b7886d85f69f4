"""Adapter normalizing document-to-text capabilities into stage outcomes."""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Union

from vetta.configuration import DEFAULT_MAX_FILE_SIZE_BYTES
from vetta.errors import DocumentExtractionError, ExtractionFailure
from vetta.ingestion import extract_text as extract_pdf_text
from vetta.pipeline.classifier import classify
from vetta.pipeline.models import ExtractedText, Failure, Ok, StageOutcome, UploadedFile

logger = logging.getLogger("vetta.pipeline.extraction")

TextExtractor = Callable[[bytes], Union[str, Awaitable[str]]]


class TextExtractorAdapter:
    """Run a text extraction capability once and classify whatever goes wrong."""

    def __init__(
        self,
        extractor: TextExtractor = extract_pdf_text,
        *,
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
    ) -> None:
        self._extractor = extractor
        self._max_file_size_bytes = max_file_size_bytes

    async def extract(self, file: UploadedFile) -> StageOutcome[ExtractedText]:
        if file.size > self._max_file_size_bytes:
            logger.warning(
                "Rejected document above the size ceiling",
                extra={"file_name": file.name, "file_size": file.size},
            )
            return Failure(classify(ExtractionFailure.TOO_LARGE.value))

        try:
            if _is_async_callable(self._extractor):
                text = await self._extractor(file.content)
            else:
                text = await asyncio.to_thread(self._extractor, file.content)
                if inspect.isawaitable(text):
                    text = await text
        except DocumentExtractionError as exc:
            logger.warning(
                "Text extraction failed",
                extra={"file_name": file.name, "reason": exc.reason.name, "detail": exc.message},
            )
            return Failure(classify(exc.reason.value))
        except Exception as exc:
            logger.warning(
                "Text extraction raised an unexpected error",
                exc_info=True,
                extra={"file_name": file.name},
            )
            return Failure(classify(exc))

        if not isinstance(text, str) or not text.strip():
            return Failure(classify(ExtractionFailure.EMPTY.value))

        return Ok(ExtractedText(content=text, source_file_name=file.name))


def _is_async_callable(extractor: TextExtractor) -> bool:
    return inspect.iscoroutinefunction(extractor) or inspect.iscoroutinefunction(
        getattr(extractor, "__call__", None)
    )


__all__ = ["TextExtractor", "TextExtractorAdapter"]
