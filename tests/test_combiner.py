"""Tests for the composite report formatter."""

from __future__ import annotations

import re

import pytest

from src.analysis.combiner import combine_analyses, kind_display_name
from src.analysis.models import PartialAnalysis
from src.analysis_config import AnalysisKind


def _partials(n: int) -> list[PartialAnalysis]:
    return [PartialAnalysis(text=f"Findings for section {i}.", index=i, total=n) for i in range(1, n + 1)]


class TestCombineAnalyses:
    def test_deterministic(self) -> None:
        partials = _partials(3)
        first = combine_analyses(partials, AnalysisKind.CLIENT_MEETING)
        second = combine_analyses(partials, AnalysisKind.CLIENT_MEETING)
        assert first == second

    def test_part_sections_match_count(self) -> None:
        report = combine_analyses(_partials(4), AnalysisKind.GENERAL_SUMMARY)
        labels = re.findall(r"^Part (\d+) of (\d+)$", report, flags=re.MULTILINE)
        assert labels == [("1", "4"), ("2", "4"), ("3", "4"), ("4", "4")]

    def test_keeps_order(self) -> None:
        report = combine_analyses(_partials(3), AnalysisKind.GENERAL_SUMMARY)
        positions = [report.index(f"Findings for section {i}.") for i in (1, 2, 3)]
        assert positions == sorted(positions)

    def test_header_and_footer(self) -> None:
        report = combine_analyses(_partials(2), AnalysisKind.JOB_INTERVIEW)
        assert report.startswith("COMPLETE ANALYSIS OF A LONG TRANSCRIPT\n")
        assert "processed in 2 parts" in report
        assert report.endswith("Total parts analysed: 2\nAnalysis type: Job Interview\n")

    def test_accepts_raw_kind_string(self) -> None:
        report = combine_analyses(_partials(2), "client-meeting")
        assert "Analysis type: Client Meeting" in report

    def test_unknown_kind_is_echoed(self) -> None:
        report = combine_analyses(_partials(2), "sales-call")
        assert "Analysis type: sales-call" in report

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            combine_analyses([], AnalysisKind.GENERAL_SUMMARY)


class TestKindDisplayName:
    def test_every_kind_has_a_name(self) -> None:
        for kind in AnalysisKind:
            assert kind_display_name(kind) != kind.value

    def test_unknown(self) -> None:
        assert kind_display_name("foo") == "foo"
