from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .types import Entry, TagSuggestion

SEPARATOR = "/"


def _clean_tags(entry: Entry) -> list[str]:
    tags: list[str] = []
    for tag in entry.tags or ():
        if not isinstance(tag, str):
            continue
        cleaned = tag.strip()
        if cleaned:
            tags.append(cleaned)
    return tags


def all_tags(entries: Iterable[Entry]) -> list[str]:
    seen: set[str] = set()
    for entry in entries:
        seen.update(_clean_tags(entry))
    return sorted(seen)


def tag_counts(entries: Iterable[Entry]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entry in entries:
        for tag in _clean_tags(entry):
            counts[tag] = counts.get(tag, 0) + 1
    return counts


def tag_depth(tag: str) -> int:
    return tag.count(SEPARATOR)


def parent_tag(tag: str) -> str | None:
    index = tag.rfind(SEPARATOR)
    if index == -1:
        return None
    return tag[:index]


def is_descendant_tag(tag: str, ancestor: str) -> bool:
    return tag.startswith(ancestor + SEPARATOR)


def tag_path(tag: str) -> list[str]:
    return [part for part in tag.split(SEPARATOR) if part]


def _hierarchy_key(tag: str) -> tuple[int, str, str]:
    # casefold first so "Beta" sorts between "alpha" and "gamma", raw text breaks ties
    return (tag_depth(tag), tag.casefold(), tag)


def sort_tags_by_hierarchy(tags: Iterable[str]) -> list[str]:
    return sorted(tags, key=_hierarchy_key)


def group_tags_by_depth(tags: Iterable[str]) -> dict[int, list[str]]:
    groups: dict[int, list[str]] = {}
    for tag in sort_tags_by_hierarchy(tags):
        groups.setdefault(tag_depth(tag), []).append(tag)
    return groups


def child_tag_candidates(tags: Iterable[str], parent: str) -> list[str]:
    return [tag for tag in tags if parent_tag(tag) == parent]


def _matches_plain_query(tag: str, query: str) -> bool:
    lowered = tag.lower()
    if lowered == query:
        return True
    if any(part.lower() == query for part in tag.split(SEPARATOR)):
        return True
    return query in lowered


def filter_tags(tags: Iterable[str], query: str) -> list[str]:
    """Keep the tags an autocomplete query should offer.

    A query containing ``/`` is a path: only descendants of its parent path
    survive, with the last segment matched as a substring of the remainder.
    Other queries match case-insensitively on the whole tag, on any path
    segment, or as a substring.
    """
    query = query or ""
    if SEPARATOR in query:
        parent, _, child = query.rpartition(SEPARATOR)
        prefix = parent + SEPARATOR
        child = child.lower()
        return [
            tag
            for tag in tags
            if tag.startswith(prefix) and child in tag[len(prefix) :].lower()
        ]
    lowered = query.lower()
    return [tag for tag in tags if _matches_plain_query(tag, lowered)]


def _display_count(tag: str, counts: Mapping[str, int]) -> int:
    count = counts.get(tag, 0)
    if SEPARATOR in tag:
        return count
    # only top-level tags absorb their descendants
    prefix = tag + SEPARATOR
    return count + sum(value for key, value in counts.items() if key.startswith(prefix))


def build_tag_suggestions(
    tags: Iterable[str],
    counts: Mapping[str, int],
    query: str | None = None,
) -> list[TagSuggestion]:
    candidates: Sequence[str] = list(tags)
    if query is not None:
        candidates = filter_tags(candidates, query)
    suggestions: list[TagSuggestion] = []
    for tag in sort_tags_by_hierarchy(candidates):
        parent = parent_tag(tag)
        suggestions.append(
            TagSuggestion(
                name=tag,
                count=_display_count(tag, counts),
                depth=tag_depth(tag),
                parent_path=parent or None,
            )
        )
    return suggestions


def filter_entries_by_tag(entries: Iterable[Entry], tag_filter: str | None) -> list[Entry]:
    entries = list(entries)
    if not tag_filter:
        return entries
    wanted = tag_filter.lower()
    prefix = wanted + SEPARATOR
    matched: list[Entry] = []
    for entry in entries:
        for tag in entry.tags or ():
            lowered = tag.lower()
            if lowered == wanted or lowered.startswith(prefix):
                matched.append(entry)
                break
    return matched
