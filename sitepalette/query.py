from __future__ import annotations

from .types import ParsedQuery


def parse_query(raw: str) -> ParsedQuery:
    """Split raw palette input into a tag filter and free text.

    Input whose trimmed form starts with ``#`` carries a tag filter in its
    first whitespace-delimited token; the remaining tokens are re-joined with
    single spaces. Anything else is returned untouched as free text.
    """
    raw = raw or ""
    trimmed = raw.strip()
    if not trimmed.startswith("#"):
        return ParsedQuery(tag_filter=None, text_query=raw)
    parts = trimmed.split()
    tag = parts[0][1:].strip().lower()
    return ParsedQuery(tag_filter=tag or None, text_query=" ".join(parts[1:]))


def is_bare_tag_token(raw: str) -> bool:
    trimmed = (raw or "").strip()
    if not trimmed.startswith("#"):
        return False
    return len(trimmed.split()) == 1
