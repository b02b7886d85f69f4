"""Document-analysis pipeline: validation, extraction, analysis and classification."""
from __future__ import annotations

from .analysis import AnalysisServiceAdapter, Analyzer
from .classifier import classify
from .extraction import TextExtractor, TextExtractorAdapter
from .machine import AnalysisPipeline, Observer
from .models import (
    AnalysisRequest,
    AnalysisResult,
    AttemptMetadata,
    ErrorCategory,
    ExtractedText,
    Failure,
    Ok,
    PipelineError,
    PipelineState,
    Stage,
    UploadedFile,
    ValidatedRequest,
)
from .validator import validate

__all__ = [
    "AnalysisPipeline",
    "AnalysisRequest",
    "AnalysisResult",
    "AnalysisServiceAdapter",
    "Analyzer",
    "AttemptMetadata",
    "ErrorCategory",
    "ExtractedText",
    "Failure",
    "Observer",
    "Ok",
    "PipelineError",
    "PipelineState",
    "Stage",
    "TextExtractor",
    "TextExtractorAdapter",
    "UploadedFile",
    "ValidatedRequest",
    "classify",
    "validate",
]
