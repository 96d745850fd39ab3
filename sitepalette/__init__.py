from __future__ import annotations

from .fuzzy import make_matcher
from .palette import search, suggest_tags
from .query import is_bare_tag_token, parse_query
from .ranking import rank_entries, usage_boost
from .tags import all_tags, build_tag_suggestions, filter_entries_by_tag, tag_counts
from .types import (
    Entry,
    ParsedQuery,
    ScoredEntry,
    TagSuggestion,
    ViewportItem,
    ViewportRange,
    VisibleItem,
)
from .viewport import ViewportEngine

__version__ = "0.1.0"

__all__ = [
    "Entry",
    "ParsedQuery",
    "ScoredEntry",
    "TagSuggestion",
    "ViewportEngine",
    "ViewportItem",
    "ViewportRange",
    "VisibleItem",
    "all_tags",
    "build_tag_suggestions",
    "filter_entries_by_tag",
    "is_bare_tag_token",
    "make_matcher",
    "parse_query",
    "rank_entries",
    "search",
    "suggest_tags",
    "tag_counts",
    "usage_boost",
]
