"""Tests for the segment analyzer and Anthropic error classification."""

from __future__ import annotations

from unittest.mock import MagicMock

import anthropic
import httpx
import pytest
from anthropic.types import TextBlock

from src.analysis.analyzer import (
    ANALYSIS_UNAVAILABLE,
    AnthropicTextGenerator,
    SamplingConfig,
    SegmentAnalyzer,
    is_context_overflow,
)
from src.analysis.errors import (
    CapacityExhaustedError,
    ModelContextOverflowError,
    UpstreamFaultError,
)
from src.analysis_config import AnalysisKind, system_prompt_for

from fakes import FakeGenerator

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls: type[anthropic.APIStatusError], status: int, message: str) -> anthropic.APIStatusError:
    return cls(message=message, response=httpx.Response(status, request=_REQUEST), body=None)


def _generator_raising(exc: Exception) -> AnthropicTextGenerator:
    client = MagicMock()
    client.messages.create.side_effect = exc
    return AnthropicTextGenerator(api_key="test", model="claude-test", client=client)


class TestSegmentAnalyzer:
    def test_uses_kind_prompt_and_sampling(self) -> None:
        gen = FakeGenerator()
        sampling = SamplingConfig(temperature=0.7, max_output_tokens=2000)
        result = SegmentAnalyzer(gen, sampling).analyze("  Hello there.  ", AnalysisKind.JOB_INTERVIEW)

        assert result == "analysis #1"
        call = gen.calls[0]
        assert call["system"] == system_prompt_for(AnalysisKind.JOB_INTERVIEW)
        assert call["user_content"] == "Transcript to analyse:\n\nHello there."
        assert call["sampling"] is sampling

    def test_label_is_prefixed(self) -> None:
        gen = FakeGenerator()
        SegmentAnalyzer(gen).analyze("Text.", AnalysisKind.GENERAL_SUMMARY, label="Part 2 of 3")
        assert gen.calls[0]["user_content"].startswith("Part 2 of 3\n\nTranscript to analyse:")

    def test_empty_content_becomes_placeholder(self) -> None:
        gen = FakeGenerator(empty_on={1})
        assert SegmentAnalyzer(gen).analyze("Text.", AnalysisKind.GENERAL_SUMMARY) == ANALYSIS_UNAVAILABLE

    def test_whitespace_content_becomes_placeholder(self) -> None:
        gen = MagicMock()
        gen.complete.return_value = "   \n"
        assert SegmentAnalyzer(gen).analyze("Text.", AnalysisKind.GENERAL_SUMMARY) == ANALYSIS_UNAVAILABLE

    def test_errors_propagate(self) -> None:
        gen = FakeGenerator(fail_on={1: CapacityExhaustedError("busy")})
        with pytest.raises(CapacityExhaustedError):
            SegmentAnalyzer(gen).analyze("Text.", AnalysisKind.GENERAL_SUMMARY)


class TestAnthropicTextGenerator:
    def test_returns_joined_text_blocks(self) -> None:
        client = MagicMock()
        client.messages.create.return_value.content = [
            TextBlock(type="text", text="First. "),
            TextBlock(type="text", text="Second."),
        ]
        gen = AnthropicTextGenerator(api_key="test", model="claude-test", client=client)

        result = gen.complete("system", "user", SamplingConfig(temperature=0.7, max_output_tokens=2000))

        assert result == "First. Second."
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 2000
        assert kwargs["system"] == "system"
        assert kwargs["messages"] == [{"role": "user", "content": "user"}]

    def test_no_text_blocks_returns_none(self) -> None:
        client = MagicMock()
        client.messages.create.return_value.content = []
        gen = AnthropicTextGenerator(api_key="test", model="claude-test", client=client)
        assert gen.complete("s", "u", SamplingConfig()) is None

    def test_rate_limit_is_capacity_exhausted(self) -> None:
        gen = _generator_raising(_status_error(anthropic.RateLimitError, 429, "rate_limit_error"))
        with pytest.raises(CapacityExhaustedError):
            gen.complete("s", "u", SamplingConfig())

    def test_overloaded_is_capacity_exhausted(self) -> None:
        gen = _generator_raising(_status_error(anthropic.APIStatusError, 529, "overloaded_error"))
        with pytest.raises(CapacityExhaustedError):
            gen.complete("s", "u", SamplingConfig())

    def test_prompt_too_long_is_context_overflow(self) -> None:
        exc = _status_error(
            anthropic.BadRequestError, 400, "prompt is too long: 210000 tokens > 200000 maximum"
        )
        gen = _generator_raising(exc)
        with pytest.raises(ModelContextOverflowError) as info:
            gen.complete("s", "u", SamplingConfig())
        assert "prompt is too long" in (info.value.details or "")

    def test_other_bad_request_is_upstream_fault(self) -> None:
        gen = _generator_raising(_status_error(anthropic.BadRequestError, 400, "invalid model"))
        with pytest.raises(UpstreamFaultError) as info:
            gen.complete("s", "u", SamplingConfig())
        assert info.value.details == "invalid model"

    def test_connection_error_is_upstream_fault(self) -> None:
        gen = _generator_raising(anthropic.APIConnectionError(request=_REQUEST))
        with pytest.raises(UpstreamFaultError):
            gen.complete("s", "u", SamplingConfig())


class TestContextOverflowSignals:
    @pytest.mark.parametrize(
        "message",
        [
            "prompt is too long: 210000 tokens > 200000 maximum",
            "This model's maximum context length is 8192 tokens",
            "Input exceeds the context window",
        ],
    )
    def test_detected(self, message: str) -> None:
        assert is_context_overflow(message)

    def test_not_detected(self) -> None:
        assert not is_context_overflow("invalid x-api-key")
