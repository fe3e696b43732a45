"""Token estimation for routing decisions."""

from __future__ import annotations

import math

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str, chars_per_token: int = CHARS_PER_TOKEN) -> int:
    """Rough token estimate: one token per *chars_per_token* characters.

    Only used to choose between the direct and chunked paths, never for
    billing. Always non-negative; ``""`` gives 0.
    """
    if chars_per_token < 1:
        raise ValueError("chars_per_token must be at least 1")
    return math.ceil(len(text) / chars_per_token)
