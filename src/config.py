from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    assemblyai_api_key: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    records_table: str = "audio_analyses"

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # Analysis pipeline
    llm_model: str = "claude-sonnet-4-20250514"
    token_budget: int = 6000  # leaves headroom for the system prompt and the reply
    chars_per_token: int = 4
    analysis_temperature: float = 0.7
    analysis_max_output_tokens: int = 2000
    time_budget_seconds: float = 60.0

    # Audio
    max_audio_bytes: int = 25 * 1024 * 1024
    transcription_language: str = "es"
    transcription_speech_model: str = "universal-3-pro"
    audio_rate_limit_per_hour: int = 10  # 0 disables the limit

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
