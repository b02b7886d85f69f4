"""Single-flight state machine sequencing validation, extraction and analysis."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from vetta.configuration import Settings
from vetta.errors import InvalidTransitionError, PipelineBusyError
from vetta.llm import OpenRouterAnalysisClient
from vetta.pipeline.analysis import AnalysisServiceAdapter, Analyzer
from vetta.pipeline.classifier import classify
from vetta.pipeline.extraction import TextExtractor, TextExtractorAdapter
from vetta.pipeline.models import (
    AnalysisRequest,
    AttemptMetadata,
    Failure,
    PipelineError,
    PipelineState,
    Stage,
)
from vetta.pipeline.validator import validate

logger = logging.getLogger("vetta.pipeline.machine")

Observer = Callable[[PipelineState], None]

_PREVIEW_CHARS = 200

_TRANSITIONS: dict[Stage, frozenset[Stage]] = {
    Stage.IDLE: frozenset({Stage.VALIDATING}),
    Stage.VALIDATING: frozenset({Stage.EXTRACTING, Stage.FAILED, Stage.IDLE}),
    Stage.EXTRACTING: frozenset({Stage.ANALYZING, Stage.FAILED, Stage.IDLE}),
    Stage.ANALYZING: frozenset({Stage.SUCCEEDED, Stage.FAILED, Stage.IDLE}),
    Stage.SUCCEEDED: frozenset({Stage.VALIDATING}),
    Stage.FAILED: frozenset({Stage.VALIDATING}),
}


class AnalysisPipeline:
    """Owns the current PipelineState; the only place it is ever replaced.

    One attempt may be in flight at a time. Calling :meth:`run_analysis` while
    an attempt is validating, extracting or analyzing raises
    :class:`PipelineBusyError` and leaves the running attempt untouched.
    :meth:`cancel` interrupts the running attempt at its current await point
    and returns the machine to Idle.
    """

    def __init__(
        self,
        extractor: TextExtractorAdapter,
        analyzer: AnalysisServiceAdapter,
        *,
        pacing_delay: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._extractor = extractor
        self._analyzer = analyzer
        self._pacing_delay = pacing_delay
        self._sleep = sleep
        self._state = PipelineState.idle()
        self._observers: list[Observer] = []
        self._task: asyncio.Task | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        extractor: TextExtractor | None = None,
        analyzer: Analyzer | None = None,
    ) -> "AnalysisPipeline":
        """Wire the default pypdf and OpenRouter capabilities using *settings*."""

        extraction = (
            TextExtractorAdapter(extractor, max_file_size_bytes=settings.max_file_size_bytes)
            if extractor is not None
            else TextExtractorAdapter(max_file_size_bytes=settings.max_file_size_bytes)
        )
        remote = analyzer or OpenRouterAnalysisClient(settings).critique
        return cls(
            extraction,
            AnalysisServiceAdapter(remote, timeout_seconds=settings.request_timeout_seconds),
            pacing_delay=settings.pacing_delay_seconds,
        )

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state.stage.is_busy

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer* for every state change; returns an unsubscribe callable."""

        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def cancel(self) -> bool:
        """Cancel the in-flight attempt; returns False when nothing is running."""

        if self._task is None or self._task.done():
            return False
        logger.info("Cancelling analysis attempt", extra={"stage": self._state.stage.value})
        self._task.cancel()
        return True

    async def run_analysis(self, request: AnalysisRequest) -> PipelineState:
        """Run one attempt to a terminal state and return that state."""

        if self.is_busy:
            raise PipelineBusyError(
                message="An analysis attempt is already in progress.",
                remediation="Wait for the current attempt to finish or cancel it first.",
            )

        attempt = AttemptMetadata.from_request(request)
        self._transition(PipelineState(stage=Stage.VALIDATING, attempt=attempt))
        self._task = asyncio.create_task(self._run_stages(request, attempt))
        try:
            return await self._task
        except asyncio.CancelledError:
            if self.is_busy:
                self._transition(PipelineState.idle())
            raise
        except Exception as exc:
            if not self.is_busy:
                raise
            logger.exception("Analysis attempt raised outside a stage adapter.")
            return self._fail(classify(exc), attempt)
        finally:
            self._task = None

    async def _run_stages(
        self,
        request: AnalysisRequest,
        attempt: AttemptMetadata,
    ) -> PipelineState:
        validated = validate(request)
        if isinstance(validated, Failure):
            return self._fail(validated.error, attempt)
        valid = validated.value

        self._transition(PipelineState(stage=Stage.EXTRACTING, attempt=attempt))
        extracted = await self._extractor.extract(valid.file)
        if isinstance(extracted, Failure):
            return self._fail(extracted.error, attempt)

        text = extracted.value.content
        logger.debug(
            "Extracted text preview",
            extra={
                "length": len(text),
                "preview": text[:_PREVIEW_CHARS] + ("..." if len(text) > _PREVIEW_CHARS else ""),
            },
        )

        self._transition(PipelineState(stage=Stage.ANALYZING, attempt=attempt))
        if self._pacing_delay > 0:
            await self._sleep(self._pacing_delay)
        analysis = await self._analyzer.analyze(
            extracted.value,
            valid.job_description,
            advanced=valid.advanced,
        )
        if isinstance(analysis, Failure):
            return self._fail(analysis.error, attempt)

        final = PipelineState.succeeded(analysis.value, attempt)
        self._transition(final)
        return final

    def _fail(self, error: PipelineError, attempt: AttemptMetadata) -> PipelineState:
        logger.warning(
            "Analysis attempt failed",
            extra={"category": error.category.value, "raw_message": error.raw_message},
        )
        final = PipelineState.failed(error, attempt)
        self._transition(final)
        return final

    def _transition(self, new_state: PipelineState) -> None:
        current = self._state.stage
        if new_state.stage not in _TRANSITIONS[current]:
            raise InvalidTransitionError(
                message=f"Cannot move from {current.value} to {new_state.stage.value}.",
            )

        self._state = new_state
        logger.info(
            "Pipeline stage changed",
            extra={"from_stage": current.value, "to_stage": new_state.stage.value},
        )
        for observer in list(self._observers):
            try:
                observer(new_state)
            except Exception:
                logger.exception("Pipeline observer raised while handling a state change.")


__all__ = ["AnalysisPipeline", "Observer"]
