"""Speech-to-text via the AssemblyAI SDK."""

from __future__ import annotations

import logging
from typing import Protocol

from src.analysis.errors import (
    AnalysisError,
    CapacityExhaustedError,
    InvalidInputError,
    OversizedInputError,
    UpstreamFaultError,
)

logger = logging.getLogger(__name__)

_SIZE_SIGNALS = ("too large", "file size", "exceeds the maximum", "payload too large", "413")
_CAPACITY_SIGNALS = ("rate limit", "too many requests", "quota", "429", "insufficient")


class Transcriber(Protocol):
    def transcribe(self, audio: bytes, language_hint: str | None = None) -> str: ...


def _classify_failure(message: str, size_bytes: int) -> AnalysisError | None:
    lowered = message.lower()
    if any(signal in lowered for signal in _SIZE_SIGNALS):
        return OversizedInputError(
            "Audio file too large for the transcription service",
            size_bytes=size_bytes,
            details=message,
        )
    if any(signal in lowered for signal in _CAPACITY_SIGNALS):
        return CapacityExhaustedError(
            "The transcription service is rate limited, try again later",
            details=message,
        )
    return None


class AssemblyAITranscriber:
    """Transcribes audio bytes with AssemblyAI.

    The SDK accepts bytes directly, no temp file needed.
    """

    def __init__(self, api_key: str, speech_model: str = "universal-3-pro") -> None:
        self.api_key = api_key
        self.speech_model = speech_model

    def transcribe(self, audio: bytes, language_hint: str | None = None) -> str:
        """Return the plain-text transcript of *audio*.

        Raises:
            OversizedInputError: The service rejected the file as too large.
            CapacityExhaustedError: The service reported quota exhaustion.
            InvalidInputError: The service could not process the audio.
            UpstreamFaultError: Network, credential or provider failure.
        """
        import assemblyai as aai  # type: ignore[import-untyped]  # no stubs; import inside function

        aai.settings.api_key = self.api_key
        config = aai.TranscriptionConfig(
            speech_models=[self.speech_model],
            language_code=language_hint,
        )

        try:
            transcript = aai.Transcriber().transcribe(audio, config=config)
        except Exception as exc:
            # Infrastructure error: invalid API key, network failure, provider outage
            error = _classify_failure(str(exc), len(audio))
            if error is not None:
                raise error from exc
            raise UpstreamFaultError("Error transcribing the audio", details=str(exc)) from exc

        if transcript.status == aai.TranscriptStatus.error:
            message = str(transcript.error or "unknown transcription error")
            error = _classify_failure(message, len(audio))
            if error is not None:
                raise error
            # AssemblyAI rejected the audio content (corrupted, unsupported format, etc.)
            raise InvalidInputError("Transcription failed", details=message)

        text = transcript.text or ""
        logger.info("Transcribed %d bytes of audio into %d characters", len(audio), len(text))
        return text
