"""Claude-powered analysis of a single transcript segment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import anthropic
from anthropic import Anthropic
from anthropic.types import TextBlock

from src.analysis.errors import (
    CapacityExhaustedError,
    ModelContextOverflowError,
    UpstreamFaultError,
)
from src.analysis_config import AnalysisKind, system_prompt_for

logger = logging.getLogger(__name__)

ANALYSIS_UNAVAILABLE = "The analysis could not be generated for this section."

# Substrings of provider error messages that mean "input too long for the model"
_CONTEXT_OVERFLOW_SIGNALS = (
    "prompt is too long",
    "maximum context length",
    "context window",
    "context length",
    "too many tokens",
    "request_too_large",
)

# 529 is Anthropic's "overloaded"
_CAPACITY_STATUS_CODES = {429, 529}


@dataclass(frozen=True)
class SamplingConfig:
    """Fixed sampling parameters for every analysis call."""

    temperature: float = 0.7
    max_output_tokens: int = 2000


class TextGenerator(Protocol):
    def complete(
        self, system: str, user_content: str, sampling: SamplingConfig
    ) -> str | None: ...


def is_context_overflow(message: str) -> bool:
    lowered = message.lower()
    return any(signal in lowered for signal in _CONTEXT_OVERFLOW_SIGNALS)


class AnthropicTextGenerator:
    """Text generation via the Anthropic Messages API.

    Provider failures are translated into the analysis error taxonomy so
    callers never handle SDK exceptions directly.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = 60.0,
        client: Anthropic | None = None,
    ) -> None:
        self.model = model
        # Retries are a deployment concern; fail fast here
        self.client = client or Anthropic(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(self, system: str, user_content: str, sampling: SamplingConfig) -> str | None:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=sampling.max_output_tokens,
                temperature=sampling.temperature,
                system=system,
                messages=[{"role": "user", "content": user_content}],
            )
        except anthropic.RateLimitError as exc:
            raise CapacityExhaustedError(
                "The language model is rate limited, try again later",
                details=exc.message,
            ) from exc
        except anthropic.APIStatusError as exc:
            if exc.status_code in _CAPACITY_STATUS_CODES:
                raise CapacityExhaustedError(
                    "The language model is over capacity, try again later",
                    details=exc.message,
                ) from exc
            if exc.status_code in (400, 413) and is_context_overflow(exc.message):
                raise ModelContextOverflowError(details=exc.message) from exc
            raise UpstreamFaultError("Error analysing the transcript", details=exc.message) from exc
        except anthropic.APIError as exc:
            # Connection errors and timeouts
            raise UpstreamFaultError("Error analysing the transcript", details=exc.message) from exc

        text = "".join(block.text for block in response.content if isinstance(block, TextBlock))
        return text or None


class SegmentAnalyzer:
    """Runs one analysis call for one piece of transcript."""

    def __init__(self, generator: TextGenerator, sampling: SamplingConfig | None = None) -> None:
        self.generator = generator
        self.sampling = sampling or SamplingConfig()

    def analyze(self, text: str, kind: AnalysisKind, label: str | None = None) -> str:
        """Analyse *text* with the instruction profile for *kind*.

        Args:
            text: Transcript segment. Surrounding whitespace is dropped.
            kind: Selects the system prompt.
            label: Position hint such as ``"Part 2 of 4"``, prefixed to the
                user message on the chunked path.

        Returns:
            The model's analysis, or :data:`ANALYSIS_UNAVAILABLE` when the
            model returned no content.
        """
        user_content = f"Transcript to analyse:\n\n{text.strip()}"
        if label:
            user_content = f"{label}\n\n{user_content}"

        result = self.generator.complete(system_prompt_for(kind), user_content, self.sampling)
        if not result or not result.strip():
            logger.warning("Empty analysis returned%s", f" for {label}" if label else "")
            return ANALYSIS_UNAVAILABLE
        return result
