from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Entry:
    id: str
    name: str
    url: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedQuery:
    tag_filter: str | None
    text_query: str


@dataclass(frozen=True)
class ScoredEntry:
    entry: Entry
    score: float


@dataclass(frozen=True)
class TagSuggestion:
    name: str
    count: int
    depth: int
    parent_path: str | None = None


@dataclass(frozen=True)
class ViewportItem:
    id: str
    height: float | None = None
    data: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class ViewportRange:
    scroll_top: float
    start_index: int
    end_index: int
    offset_y: float


@dataclass(frozen=True)
class VisibleItem:
    item: ViewportItem
    index: int
    top: float
    height: float
