"""Pydantic request/response schemas for the Transcript Analysis API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from src.analysis.models import AnalysisResult


class AnalyzeTextRequest(BaseModel):
    """Request body for the /api/analyze-text endpoint.

    Both fields default to empty so that missing values are reported by the
    pipeline as invalid input rather than as schema errors.
    """

    text: str = ""
    kind: str = ""


class AnalysisMetadata(BaseModel):
    estimated_tokens: int
    was_chunked: bool
    chunk_count: int = 1


class AnalysisData(BaseModel):
    """The analysis of one transcript."""

    transcript: str
    analysis: str
    kind: str
    id: str | None = None
    metadata: AnalysisMetadata

    @classmethod
    def from_result(cls, result: AnalysisResult, record_id: str | None = None) -> AnalysisData:
        return cls(
            transcript=result.transcript,
            analysis=result.analysis,
            kind=result.kind,
            id=record_id,
            metadata=AnalysisMetadata(
                estimated_tokens=result.estimated_tokens,
                was_chunked=result.was_chunked,
                chunk_count=result.chunk_count,
            ),
        )


class AnalysisResponse(BaseModel):
    """Success envelope for both analysis endpoints."""

    success: bool = True
    data: AnalysisData


class HistoryResponse(BaseModel):
    """Response body for the /api/history endpoint."""

    data: list[dict[str, Any]]


class DiagnosticsResponse(BaseModel):
    """Which credentials are configured. Never includes the values."""

    anthropic_configured: bool
    assemblyai_configured: bool
    supabase_configured: bool
    all_configured: bool
