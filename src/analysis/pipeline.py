"""Analysis pipeline: estimate -> (analyse | split -> analyse each -> combine)."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from src.analysis.analyzer import SegmentAnalyzer
from src.analysis.chunking import split_text
from src.analysis.combiner import combine_analyses
from src.analysis.errors import (
    AnalysisError,
    InvalidInputError,
    ModelContextOverflowError,
    ProcessingTimeoutError,
    UpstreamFaultError,
)
from src.analysis.models import AnalysisResult, Chunk, PartialAnalysis, PipelineState
from src.analysis.tokens import estimate_tokens
from src.analysis_config import AnalysisConfig, AnalysisKind, parse_analysis_kind

logger = logging.getLogger(__name__)

Splitter = Callable[[str, int, int], list[Chunk]]

_TRANSITIONS: dict[PipelineState, set[PipelineState]] = {
    PipelineState.IDLE: {PipelineState.ESTIMATING, PipelineState.FAILED},
    PipelineState.ESTIMATING: {
        PipelineState.DIRECT_ANALYZING,
        PipelineState.CHUNK_SPLITTING,
        PipelineState.FAILED,
    },
    PipelineState.DIRECT_ANALYZING: {PipelineState.DONE, PipelineState.FAILED},
    PipelineState.CHUNK_SPLITTING: {PipelineState.CHUNK_ANALYZING, PipelineState.FAILED},
    PipelineState.CHUNK_ANALYZING: {PipelineState.COMBINING, PipelineState.FAILED},
    PipelineState.COMBINING: {PipelineState.DONE, PipelineState.FAILED},
    PipelineState.DONE: set(),
    PipelineState.FAILED: set(),
}


class AnalysisPipeline:
    """Single-use state machine that turns one transcript into one analysis.

    Build a new instance per request. Chunks are analysed strictly in order,
    one at a time, and any failure fails the whole run: a partial report is
    never returned.
    """

    def __init__(
        self,
        analyzer: SegmentAnalyzer,
        config: AnalysisConfig | None = None,
        splitter: Splitter = split_text,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.analyzer = analyzer
        self.config = config or AnalysisConfig()
        self.splitter = splitter
        self.clock = clock
        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]

    def _transition(self, new_state: PipelineState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {new_state.value}")
        logger.debug("Pipeline %s -> %s", self.state.value, new_state.value)
        self.state = new_state
        self.history.append(new_state)

    def run(self, text: object, kind: object) -> AnalysisResult:
        """Analyse *text* with the instruction profile named by *kind*.

        Raises:
            InvalidInputError: Empty/non-string text or unknown kind. No
                upstream call is made.
            ModelContextOverflowError: The model rejected a segment as too
                long; carries the estimate that drove routing.
            ProcessingTimeoutError: The time budget ran out between chunks.
            AnalysisError: Any other classified collaborator failure.
            UpstreamFaultError: Wraps anything unclassified.
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError("AnalysisPipeline instances are single-use")

        try:
            if not isinstance(text, str) or not text.strip():
                raise InvalidInputError("No transcript text was provided")
            analysis_kind = parse_analysis_kind(kind)
        except InvalidInputError:
            self._transition(PipelineState.FAILED)
            raise

        started = self.clock()
        self._transition(PipelineState.ESTIMATING)
        estimated = estimate_tokens(text, self.config.chars_per_token)
        logger.info("Estimated %d tokens (budget %d)", estimated, self.config.token_budget)

        try:
            if estimated <= self.config.token_budget:
                self._transition(PipelineState.DIRECT_ANALYZING)
                analysis = self.analyzer.analyze(text, analysis_kind)
                chunk_count = 1
                was_chunked = False
            else:
                analysis, chunk_count = self._run_chunked(text, analysis_kind, started)
                was_chunked = True
        except ModelContextOverflowError as exc:
            exc.estimated_tokens = estimated
            self._transition(PipelineState.FAILED)
            raise
        except AnalysisError:
            self._transition(PipelineState.FAILED)
            raise
        except Exception as exc:
            logger.exception("Unexpected failure during analysis")
            self._transition(PipelineState.FAILED)
            raise UpstreamFaultError("Error analysing the transcript", details=str(exc)) from exc

        self._transition(PipelineState.DONE)
        return AnalysisResult(
            transcript=text,
            analysis=analysis,
            kind=analysis_kind.value,
            estimated_tokens=estimated,
            was_chunked=was_chunked,
            chunk_count=chunk_count,
        )

    def _run_chunked(self, text: str, kind: AnalysisKind, started: float) -> tuple[str, int]:
        self._transition(PipelineState.CHUNK_SPLITTING)
        chunks = self.splitter(text, self.config.token_budget, self.config.chars_per_token)
        logger.info("Transcript split into %d chunks", len(chunks))

        self._transition(PipelineState.CHUNK_ANALYZING)
        partials: list[PartialAnalysis] = []
        for chunk in chunks:
            elapsed = self.clock() - started
            if elapsed > self.config.time_budget_seconds:
                raise ProcessingTimeoutError(
                    "Analysis took too long",
                    details=(
                        f"Stopped before {chunk.label.lower()} after {elapsed:.0f}s "
                        f"(budget {self.config.time_budget_seconds:.0f}s)."
                    ),
                )
            logger.info("Analysing %s", chunk.label.lower())
            partial_text = self.analyzer.analyze(chunk.text, kind, label=chunk.label)
            partials.append(PartialAnalysis(text=partial_text, index=chunk.index, total=chunk.total))

        self._transition(PipelineState.COMBINING)
        return combine_analyses(partials, kind), len(chunks)
