"""FastAPI dependency providers for the pipeline's collaborators.

Routes never build SDK clients themselves; tests swap these out through
``app.dependency_overrides``.
"""

from __future__ import annotations

from src.analysis.analyzer import AnthropicTextGenerator, TextGenerator
from src.analysis.errors import ConfigurationError
from src.analysis_config import AnalysisConfig
from src.config import settings
from src.storage.records import RecordStore, SupabaseRecordStore, get_supabase_client
from src.transcription.transcriber import AssemblyAITranscriber, Transcriber


def get_analysis_config() -> AnalysisConfig:
    return AnalysisConfig.from_settings(settings)


def get_text_generator() -> TextGenerator:
    if not settings.anthropic_api_key:
        raise ConfigurationError(
            "Incomplete configuration",
            details="ANTHROPIC_API_KEY is not set.",
        )
    return AnthropicTextGenerator(
        api_key=settings.anthropic_api_key,
        model=settings.llm_model,
        timeout=settings.time_budget_seconds,
    )


def get_transcriber() -> Transcriber:
    if not settings.assemblyai_api_key:
        raise ConfigurationError(
            "Audio transcription is not configured",
            details="ASSEMBLYAI_API_KEY is not set. Paste the transcript as text instead.",
        )
    return AssemblyAITranscriber(
        api_key=settings.assemblyai_api_key,
        speech_model=settings.transcription_speech_model,
    )


def get_record_store() -> RecordStore:
    if not settings.supabase_url or not settings.supabase_key:
        raise ConfigurationError(
            "Incomplete configuration",
            details="SUPABASE_URL and SUPABASE_KEY must be set.",
        )
    client = get_supabase_client(settings.supabase_url, settings.supabase_key)
    return SupabaseRecordStore(client, table=settings.records_table)
