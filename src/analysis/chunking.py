"""Split long transcripts into model-sized chunks on natural boundaries."""

from __future__ import annotations

import logging
import re

from src.analysis.models import Chunk
from src.analysis.tokens import CHARS_PER_TOKEN

logger = logging.getLogger(__name__)

# Fraction of the per-chunk character ceiling searched backwards for a boundary
BOUNDARY_LOOKBACK_RATIO = 0.5

# Sentence end: terminal punctuation, optional closing quotes/brackets, then whitespace
_SENTENCE_END = re.compile(r"[.!?][\"'”’)\]]*\s+")


def _find_boundary(text: str, window_start: int, limit: int) -> int | None:
    """Return the cut offset of the best boundary in ``text[window_start:limit]``.

    Boundaries are tried from coarsest to finest: paragraph break, line break,
    sentence end, any whitespace. The separator is kept at the end of the
    preceding chunk, so the returned offset is just past it.
    """
    for separator in ("\n\n", "\n"):
        idx = text.rfind(separator, window_start, limit)
        if idx != -1:
            return idx + len(separator)

    last_sentence_end = None
    for match in _SENTENCE_END.finditer(text, window_start, limit):
        last_sentence_end = match.end()
    if last_sentence_end is not None:
        return last_sentence_end

    for idx in range(limit - 1, window_start - 1, -1):
        if text[idx].isspace():
            return idx + 1

    return None


def split_text(
    text: str,
    max_tokens_per_chunk: int,
    chars_per_token: int = CHARS_PER_TOKEN,
) -> list[Chunk]:
    """Partition *text* into ordered chunks that each fit the token budget.

    Every chunk holds at most ``max_tokens_per_chunk * chars_per_token``
    characters, so its estimate never exceeds the budget. Cuts land on the
    nearest paragraph, line, sentence or word boundary within the lookback
    window; when none exists (e.g. one enormous "word") the text is hard-cut
    at the ceiling instead.

    Args:
        text: Full transcript text.
        max_tokens_per_chunk: Token budget for a single chunk (>= 1).
        chars_per_token: Ratio used by the token estimator.

    Returns:
        List of :class:`Chunk` whose texts concatenate back to *text*.
        Empty if *text* is empty.
    """
    if max_tokens_per_chunk < 1:
        raise ValueError("max_tokens_per_chunk must be at least 1")

    max_chars = max_tokens_per_chunk * chars_per_token
    lookback = max(1, int(max_chars * BOUNDARY_LOOKBACK_RATIO))
    text_len = len(text)

    spans: list[tuple[int, int]] = []
    start = 0
    while start < text_len:
        limit = start + max_chars
        if limit >= text_len:
            spans.append((start, text_len))
            break

        # Never search at `start` itself, so every chunk is non-empty
        window_start = max(start + 1, limit - lookback)
        end = _find_boundary(text, window_start, limit)
        if end is None:
            logger.debug("No boundary in window ending at %d, hard cut", limit)
            end = limit

        spans.append((start, end))
        start = end

    total = len(spans)
    return [
        Chunk(text=text[s:e], index=i, total=total, start=s)
        for i, (s, e) in enumerate(spans, start=1)
    ]
