"""Analysis configuration: analysis kinds, their prompts, and AnalysisConfig."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, assert_never

from src.analysis.errors import InvalidInputError

if TYPE_CHECKING:
    from src.config import Settings


class AnalysisKind(str, Enum):
    """Instruction profiles available for transcript analysis."""

    JOB_INTERVIEW = "job-interview"
    CLIENT_MEETING = "client-meeting"
    GENERAL_SUMMARY = "general-summary"


def parse_analysis_kind(value: object) -> AnalysisKind:
    """Return the AnalysisKind for *value*, rejecting anything unregistered."""
    if isinstance(value, AnalysisKind):
        return value
    try:
        return AnalysisKind(value)
    except ValueError:
        raise InvalidInputError(
            "Invalid analysis type",
            details=f"Expected one of: {', '.join(k.value for k in AnalysisKind)}",
        ) from None


def system_prompt_for(kind: AnalysisKind) -> str:
    """Return the system instructions that govern analysis of *kind*."""
    match kind:
        case AnalysisKind.JOB_INTERVIEW:
            return (
                "You are a human resources expert. Analyse this job interview "
                "transcript and provide:\n\n"
                "1. **Candidate Profile**: Summary of their experience and skills\n"
                "2. **Main Strengths**: The 3-5 most notable strengths\n"
                "3. **Areas for Improvement**: 2-3 weaknesses or development areas\n"
                "4. **Recommendation**: Whether you would hire the candidate and why\n"
                "5. **Key Points**: Any other relevant information\n\n"
                "Format your answer clearly and in a structured way."
            )
        case AnalysisKind.CLIENT_MEETING:
            return (
                "You are an expert business analyst. Analyse this client meeting "
                "transcript and extract:\n\n"
                "1. **Identified Requirements**: Every requirement mentioned\n"
                "2. **Task List**: Specific actions that need to be done\n"
                "3. **Client Tone and Attitude**: Satisfaction and commitment level\n"
                "4. **Priorities**: What is most urgent or important\n"
                "5. **Next Steps**: Follow-up recommendations\n\n"
                "Organise the information clearly and make it actionable."
            )
        case AnalysisKind.GENERAL_SUMMARY:
            return (
                "You are an expert content analyst. Provide a complete summary of "
                "this transcript including:\n\n"
                "1. **Executive Summary**: 2-3 paragraphs covering the main content\n"
                "2. **Key Points**: The 5-7 most important points\n"
                "3. **Main Topics**: Categorise the topics discussed\n"
                "4. **Conclusions**: Main conclusions or decisions\n"
                "5. **Relevant Information**: Any data, dates or commitments mentioned\n\n"
                "Present the information clearly and well structured."
            )
        case _:
            assert_never(kind)


def display_name_for(kind: AnalysisKind) -> str:
    """Human-readable name of *kind*."""
    match kind:
        case AnalysisKind.JOB_INTERVIEW:
            return "Job Interview"
        case AnalysisKind.CLIENT_MEETING:
            return "Client Meeting"
        case AnalysisKind.GENERAL_SUMMARY:
            return "General Summary"
        case _:
            assert_never(kind)


@dataclass(frozen=True)
class AnalysisConfig:
    """Immutable configuration for one run of the analysis pipeline.

    Defaults mirror the ``Settings`` defaults so the pipeline can be used
    without an environment (scripts, tests).
    """

    token_budget: int = 6000
    chars_per_token: int = 4
    temperature: float = 0.7
    max_output_tokens: int = 2000
    time_budget_seconds: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> AnalysisConfig:
        return cls(
            token_budget=settings.token_budget,
            chars_per_token=settings.chars_per_token,
            temperature=settings.analysis_temperature,
            max_output_tokens=settings.analysis_max_output_tokens,
            time_budget_seconds=settings.time_budget_seconds,
        )
