from __future__ import annotations

from collections.abc import Iterable, Mapping

from .query import is_bare_tag_token, parse_query
from .ranking import rank_entries
from .tags import all_tags, build_tag_suggestions, filter_entries_by_tag, tag_counts
from .types import Entry, ScoredEntry, TagSuggestion


def search(
    entries: Iterable[Entry],
    raw_query: str,
    usage_counts: Mapping[str, int] | None = None,
) -> list[ScoredEntry]:
    parsed = parse_query(raw_query)
    candidates = list(entries)
    if parsed.tag_filter:
        candidates = filter_entries_by_tag(candidates, parsed.tag_filter)
    return rank_entries(candidates, parsed.text_query, usage_counts)


def suggest_tags(entries: Iterable[Entry], raw_query: str) -> list[TagSuggestion]:
    if not is_bare_tag_token(raw_query):
        return []
    entries = list(entries)
    query = raw_query.strip()[1:]
    return build_tag_suggestions(all_tags(entries), tag_counts(entries), query)
