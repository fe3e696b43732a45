"""Analysis endpoints: analyse pasted text or an uploaded audio recording."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from src.analysis.analyzer import SamplingConfig, SegmentAnalyzer, TextGenerator
from src.analysis.errors import CapacityExhaustedError, OversizedInputError, PersistenceFaultError
from src.analysis.models import AnalysisRecord, AnalysisResult
from src.analysis.pipeline import AnalysisPipeline
from src.analysis_config import AnalysisConfig, parse_analysis_kind
from src.api.dependencies import (
    get_analysis_config,
    get_record_store,
    get_text_generator,
    get_transcriber,
)
from src.api.models import AnalysisData, AnalysisResponse, AnalyzeTextRequest
from src.config import settings
from src.storage.records import RecordStore
from src.transcription.transcriber import Transcriber

logger = logging.getLogger(__name__)

router = APIRouter()


def _run_pipeline(
    generator: TextGenerator,
    config: AnalysisConfig,
    text: str,
    kind: str,
) -> AnalysisResult:
    """Build a fresh pipeline for this request and run it."""
    sampling = SamplingConfig(
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
    )
    pipeline = AnalysisPipeline(SegmentAnalyzer(generator, sampling), config)
    return pipeline.run(text, kind)


@router.post("/api/analyze-text", response_model=AnalysisResponse)
async def analyze_text(
    body: AnalyzeTextRequest,
    generator: Annotated[TextGenerator, Depends(get_text_generator)],
    config: Annotated[AnalysisConfig, Depends(get_analysis_config)],
) -> AnalysisResponse:
    """Analyse a pasted transcript. The result is not persisted."""
    logger.info("Analysing pasted text (%d characters)", len(body.text))
    # The pipeline is synchronous; keep it off the event loop
    result = await asyncio.to_thread(_run_pipeline, generator, config, body.text, body.kind)
    return AnalysisResponse(data=AnalysisData.from_result(result))


@router.post("/api/analyze-audio", response_model=AnalysisResponse)
async def analyze_audio(
    request: Request,
    audio: Annotated[UploadFile, File(...)],
    generator: Annotated[TextGenerator, Depends(get_text_generator)],
    transcriber: Annotated[Transcriber, Depends(get_transcriber)],
    store: Annotated[RecordStore, Depends(get_record_store)],
    config: Annotated[AnalysisConfig, Depends(get_analysis_config)],
    kind: Annotated[str, Form()] = "",
) -> AnalysisResponse:
    """Transcribe an audio file, analyse the transcript, and save the result.

    Checks run cheapest first: analysis kind, upload size, and the caller's
    hourly quota are all verified before the transcription service is called.
    """
    analysis_kind = parse_analysis_kind(kind)

    raw = await audio.read()
    if len(raw) > settings.max_audio_bytes:
        raise OversizedInputError(
            "Audio file too large",
            size_bytes=len(raw),
            limit_bytes=settings.max_audio_bytes,
        )

    client_ip = request.client.host if request.client else None
    if settings.audio_rate_limit_per_hour > 0 and client_ip:
        since = datetime.now(UTC) - timedelta(hours=1)
        used = await asyncio.to_thread(
            store.count_where, equals={"client_ip": client_ip}, created_after=since
        )
        if used >= settings.audio_rate_limit_per_hour:
            logger.info("Rate limit reached for %s (%d in the last hour)", client_ip, used)
            raise CapacityExhaustedError(
                f"You have reached the limit of {settings.audio_rate_limit_per_hour} "
                "audio analyses per hour"
            )

    logger.info("Transcribing %s (%d bytes)", audio.filename or "<unnamed>", len(raw))
    transcript = await asyncio.to_thread(
        transcriber.transcribe, raw, settings.transcription_language
    )

    result = await asyncio.to_thread(
        _run_pipeline, generator, config, transcript, analysis_kind.value
    )

    record = AnalysisRecord(
        kind=result.kind,
        transcript=result.transcript,
        analysis=result.analysis,
        client_ip=client_ip,
    )
    try:
        record_id = await asyncio.to_thread(store.insert, record)
    except PersistenceFaultError as exc:
        # The analysis itself succeeded; hand it back with the error
        exc.data = AnalysisData.from_result(result).model_dump()
        raise

    return AnalysisResponse(data=AnalysisData.from_result(result, record_id))
