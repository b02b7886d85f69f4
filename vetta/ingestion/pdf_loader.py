"""PDF ingestion helpers for Vetta."""

from __future__ import annotations

import io
import logging

from pypdf import PdfReader
from pypdf.errors import FileNotDecryptedError, PdfReadError

from vetta.errors import DocumentExtractionError, ExtractionFailure
from vetta.utils import normalize_newlines

logger = logging.getLogger("vetta.ingestion.pdf_loader")


def extract_text(content: bytes) -> str:
    """Extract text content from PDF bytes with whitespace normalization."""

    try:
        reader = PdfReader(io.BytesIO(content))
    except PdfReadError as exc:
        raise DocumentExtractionError(
            message="The uploaded document is not a readable PDF.",
            remediation="Provide a valid text-based PDF export and retry.",
            reason=ExtractionFailure.MALFORMED,
        ) from exc

    if reader.is_encrypted:
        raise DocumentExtractionError(
            message="The uploaded document is password protected.",
            remediation="Remove the password or export an unencrypted copy before retrying.",
            reason=ExtractionFailure.PROTECTED,
        )

    if not reader.pages:
        raise DocumentExtractionError(
            message="The uploaded document does not contain any pages.",
            remediation="Export the document as a standard PDF and retry.",
            reason=ExtractionFailure.MALFORMED,
        )

    processed_pages: list[str] = []
    for index, page in enumerate(reader.pages, start=1):
        try:
            raw_text = page.extract_text() or ""
        except FileNotDecryptedError as exc:
            raise DocumentExtractionError(
                message=f"Page {index} of the uploaded document is encrypted.",
                remediation="Remove the password or export an unencrypted copy before retrying.",
                reason=ExtractionFailure.PROTECTED,
            ) from exc
        except Exception as exc:  # pypdf raises a wide range of errors on broken content streams
            raise DocumentExtractionError(
                message=f"An error occurred while extracting text from page {index}.",
                remediation="Re-export the document as a searchable PDF and retry.",
                reason=ExtractionFailure.MALFORMED,
            ) from exc

        cleaned = _normalize(raw_text)
        if cleaned:
            processed_pages.append(cleaned)

    if not processed_pages:
        raise DocumentExtractionError(
            message="The uploaded document appears to be image-only.",
            remediation="Run OCR and export a text-based PDF before retrying.",
            reason=ExtractionFailure.EMPTY,
        )

    logger.debug(
        "Extracted PDF text",
        extra={"page_count": len(reader.pages), "text_pages": len(processed_pages)},
    )
    return _join_pages(processed_pages)


def _normalize(raw_text: str) -> str:
    """Trim extraneous whitespace while keeping line structure."""

    if not raw_text:
        return ""

    normalized = normalize_newlines(raw_text.replace("\u00a0", " "))
    lines = [line.strip() for line in normalized.split("\n")]

    collapsed: list[str] = []
    previous_blank = False
    for line in lines:
        if not line:
            if previous_blank:
                continue
            previous_blank = True
            collapsed.append("")
            continue
        previous_blank = False
        collapsed.append(" ".join(line.split()))

    return "\n".join(collapsed).strip()


def _join_pages(pages: list[str]) -> str:
    """Combine normalized page content into a single string."""

    return "\n\n".join(page for page in pages if page).strip()


__all__ = ["extract_text"]
