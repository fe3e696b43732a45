"""Error taxonomy for the analysis pipeline and its collaborators.

Every failure that can reach a caller is one of these. Each carries the HTTP
status it maps to, a stable ``code`` tag, a short user-facing ``message`` and
optional ``details`` (the underlying upstream message). ``data`` holds context
worth returning alongside the error, e.g. an analysis that was computed but
could not be saved.
"""

from __future__ import annotations

from typing import Any


class AnalysisError(Exception):
    """Base class for all tagged analysis failures."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(
        self,
        message: str,
        details: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.data = data

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": False,
            "code": self.code,
            "error": self.message,
        }
        if self.details:
            payload["details"] = self.details
        if self.data:
            payload["data"] = self.data
        return payload


class InvalidInputError(AnalysisError):
    """Missing or malformed text, or an unknown analysis kind."""

    status_code = 400
    code = "invalid_input"


class OversizedInputError(AnalysisError):
    """Input exceeds a hard ceiling before any model call is attempted."""

    status_code = 413
    code = "oversized_input"

    def __init__(
        self,
        message: str,
        size_bytes: int | None = None,
        limit_bytes: int | None = None,
        details: str | None = None,
    ) -> None:
        if details is None and size_bytes is not None:
            details = f"Received {size_bytes / (1024 * 1024):.2f} MB"
            if limit_bytes is not None:
                details += f"; the limit is {limit_bytes // (1024 * 1024)} MB."
        super().__init__(message, details=details)
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class ModelContextOverflowError(AnalysisError):
    """The text-generation model rejected a segment as too long for its context."""

    status_code = 413
    code = "model_context_overflow"

    def __init__(
        self,
        message: str = "Transcript too long for the language model",
        details: str | None = None,
        estimated_tokens: int | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.estimated_tokens = estimated_tokens

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.estimated_tokens is not None:
            payload["details"] = (
                f"The transcript produced too many tokens "
                f"({self.estimated_tokens} estimated). Try a shorter input."
            )
        return payload


class CapacityExhaustedError(AnalysisError):
    """An upstream service (or our own rate limit) reports exhausted quota."""

    status_code = 429
    code = "capacity_exhausted"


class UpstreamFaultError(AnalysisError):
    """Any other failure from the transcription or text-generation service."""

    status_code = 500
    code = "upstream_fault"


class PersistenceFaultError(AnalysisError):
    """The record store rejected a read or write."""

    status_code = 500
    code = "persistence_fault"


class ProcessingTimeoutError(AnalysisError):
    """The pipeline ran past its wall-clock budget."""

    status_code = 504
    code = "processing_timeout"


class ConfigurationError(AnalysisError):
    """A required credential is not configured."""

    status_code = 500
    code = "not_configured"
