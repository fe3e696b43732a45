"""Merge per-chunk analyses into one composite report."""

from __future__ import annotations

from collections.abc import Sequence

from src.analysis.models import PartialAnalysis
from src.analysis_config import AnalysisKind, display_name_for

RULE = "=" * 63


def kind_display_name(kind: AnalysisKind | str) -> str:
    """Display name for *kind*; unregistered raw strings are echoed back."""
    try:
        return display_name_for(AnalysisKind(kind))
    except ValueError:
        return str(kind)


def combine_analyses(partials: Sequence[PartialAnalysis], kind: AnalysisKind | str) -> str:
    """Format partial analyses as a single report with labelled part sections.

    The output depends only on the inputs (no timestamps), so the same
    partials always produce byte-identical reports.

    Args:
        partials: Per-chunk analyses in chunk order.
        kind: Analysis kind named in the footer.

    Returns:
        Header, one ``Part i of N`` section per partial, and a footer.
    """
    if not partials:
        raise ValueError("combine_analyses needs at least one partial analysis")

    total = len(partials)
    header = (
        "COMPLETE ANALYSIS OF A LONG TRANSCRIPT\n"
        f"{RULE}\n"
        f"This content was processed in {total} parts because of its length.\n"
        "The analysis of each part follows:\n\n"
    )

    sections = "\n".join(
        f"\n{RULE}\nPart {i} of {total}\n{RULE}\n\n{partial.text}\n"
        for i, partial in enumerate(partials, start=1)
    )

    footer = (
        f"\n{RULE}\n"
        "ANALYSIS COMPLETE\n"
        f"{RULE}\n"
        f"Total parts analysed: {total}\n"
        f"Analysis type: {kind_display_name(kind)}\n"
    )

    return header + sections + footer
