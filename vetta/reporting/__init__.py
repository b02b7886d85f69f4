"""Reporting helpers for Vetta CLI output."""
from __future__ import annotations

from .exporter import EXPORT_FILENAME, ExportedArtifact, export_result
from .renderer import ReportRenderOptions, render_error, render_result

__all__ = [
    "EXPORT_FILENAME",
    "ExportedArtifact",
    "ReportRenderOptions",
    "export_result",
    "render_error",
    "render_result",
]
