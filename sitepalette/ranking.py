from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from .fuzzy import make_matcher
from .types import Entry, ScoredEntry

MAX_USAGE_BOOST = 8.0
USAGE_BOOST_SCALE = 3.0
EMPTY_QUERY_BASE = 0.0001
URL_PENALTY = 4.0
TAGS_PENALTY = 2.0


def usage_boost(entry: Entry, usage_counts: Mapping[str, int]) -> float:
    if not entry or not entry.id:
        return 0.0
    count = max(0, int(usage_counts.get(entry.id, 0) or 0))
    return min(MAX_USAGE_BOOST, math.log(count + 1) * USAGE_BOOST_SCALE)


def rank_entries(
    entries: Iterable[Entry],
    text_query: str,
    usage_counts: Mapping[str, int] | None = None,
) -> list[ScoredEntry]:
    """Score entries against ``text_query`` and order them best first.

    Entries no field matches are dropped; the usage boost is only ever added
    to a real match. Equal scores keep their input order.
    """
    usage = usage_counts or {}
    scored: list[ScoredEntry] = []
    if not text_query:
        for entry in entries:
            scored.append(ScoredEntry(entry, EMPTY_QUERY_BASE + usage_boost(entry, usage)))
    else:
        matcher = make_matcher(text_query)
        for entry in entries:
            best = max(
                matcher(entry.name or ""),
                matcher(entry.url or "") - URL_PENALTY,
                matcher(" ".join(entry.tags or ())) - TAGS_PENALTY,
            )
            if best == -math.inf:
                continue
            scored.append(ScoredEntry(entry, best + usage_boost(entry, usage)))
    # list.sort is stable, including with reverse=True
    scored.sort(key=lambda item: item.score, reverse=True)
    return scored
