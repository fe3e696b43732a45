"""Data models for the analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class PipelineState(str, Enum):
    """States of one pipeline run."""

    IDLE = "idle"
    ESTIMATING = "estimating"
    DIRECT_ANALYZING = "direct_analyzing"
    CHUNK_SPLITTING = "chunk_splitting"
    CHUNK_ANALYZING = "chunk_analyzing"
    COMBINING = "combining"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of a transcript, tagged with its place among siblings.

    ``text`` is the raw slice, separators included, so joining the texts of
    every chunk of a split gives back the source exactly.
    """

    text: str
    index: int  # 1-based
    total: int
    start: int = 0

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def label(self) -> str:
        return f"Part {self.index} of {self.total}"


@dataclass(frozen=True)
class PartialAnalysis:
    """Model output for one chunk (or for the whole text on the direct path)."""

    text: str
    index: int = 1
    total: int = 1


@dataclass
class AnalysisResult:
    """Exit payload of a successful pipeline run."""

    transcript: str
    analysis: str
    kind: str
    estimated_tokens: int
    was_chunked: bool
    chunk_count: int = 1


@dataclass
class AnalysisRecord:
    """A persisted audio analysis."""

    kind: str
    transcript: str
    analysis: str
    client_ip: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: str | None = None
