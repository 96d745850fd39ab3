from __future__ import annotations

import math
import re
from collections.abc import Callable

Matcher = Callable[[str], float]

EXACT_BASE = 40.0
EXACT_INDEX_PENALTY = 1.5
FUZZY_BASE = 20.0
FUZZY_LENGTH_PENALTY = 0.02
FUZZY_FIRST_CHAR_BONUS = 6.0


def _subsequence_pattern(query: str) -> re.Pattern[str]:
    # One escaped literal per character, each preceded by a possessive run that
    # cannot contain it: matching is a single left-to-right pass, never a backtrack.
    units = [f"[^{re.escape(ch)}]*+{re.escape(ch)}" for ch in query]
    return re.compile("".join(units))


def make_matcher(query: str) -> Matcher:
    """Build a scorer for one query string.

    The returned callable is pure: build a new matcher whenever the query
    changes instead of reusing one across queries.
    """
    q = (query or "").casefold()
    pattern = _subsequence_pattern(q)
    first = q[:1]

    def score(candidate: str) -> float:
        if not candidate:
            return -math.inf
        lowered = candidate.casefold()
        index = lowered.find(q)
        if index >= 0:
            return EXACT_BASE - index * EXACT_INDEX_PENALTY
        if pattern.match(lowered) is None:
            return -math.inf
        value = FUZZY_BASE - len(lowered) * FUZZY_LENGTH_PENALTY
        if first and lowered.startswith(first):
            value += FUZZY_FIRST_CHAR_BONUS
        return value

    return score
