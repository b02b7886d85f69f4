"""Serialize completed analyses into downloadable artifacts."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vetta.pipeline.models import AnalysisResult

EXPORT_FILENAME = "resume-analysis.txt"
EXPORT_MEDIA_TYPE = "text/plain; charset=utf-8"
_EXPORT_ENCODING = "utf-8"


@dataclass(frozen=True)
class ExportedArtifact:
    """Bytes of an exported critique plus the suggested download name."""

    filename: str
    media_type: str
    content: bytes

    def write_to(self, target: Path) -> Path:
        """Write the artifact to *target*; directories receive the suggested filename."""

        destination = target / self.filename if target.is_dir() else target
        destination.write_bytes(self.content)
        return destination


def export_result(result: AnalysisResult) -> ExportedArtifact:
    """Return the critique text verbatim as a UTF-8 plain-text artifact."""

    return ExportedArtifact(
        filename=EXPORT_FILENAME,
        media_type=EXPORT_MEDIA_TYPE,
        content=result.report_text.encode(_EXPORT_ENCODING),
    )


__all__ = ["EXPORT_FILENAME", "EXPORT_MEDIA_TYPE", "ExportedArtifact", "export_result"]
