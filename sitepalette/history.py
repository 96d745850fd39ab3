from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass

from .store import SiteStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "search_history"
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_MAX_AGE_DAYS = 30


@dataclass(frozen=True)
class HistoryEntry:
    query: str
    timestamp: float
    selected_id: str | None = None


def _parse_entries(raw: object) -> list[HistoryEntry]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("stored search history has unexpected shape: %s", type(raw).__name__)
        return []
    entries: list[HistoryEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        query = item.get("query")
        timestamp = item.get("timestamp")
        if not isinstance(query, str) or not isinstance(timestamp, (int, float)):
            continue
        selected = item.get("selected_id")
        entries.append(
            HistoryEntry(
                query=query,
                timestamp=float(timestamp),
                selected_id=selected if isinstance(selected, str) else None,
            )
        )
    return entries


class SearchHistory:
    """Most-recent-first list of submitted queries, one entry per query text."""

    def __init__(self, store: SiteStore, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.store = store
        self.limit = max(1, limit)

    def entries(self) -> list[HistoryEntry]:
        return _parse_entries(self.store.read_blob(HISTORY_KEY))

    def _save(self, entries: list[HistoryEntry]) -> None:
        self.store.write_blob(HISTORY_KEY, [asdict(entry) for entry in entries])

    def add(self, query: str, selected_id: str | None = None, *, now: float | None = None) -> None:
        cleaned = (query or "").strip()
        if not cleaned:
            return
        entry = HistoryEntry(
            query=cleaned,
            timestamp=time.time() if now is None else now,
            selected_id=selected_id,
        )
        existing = [item for item in self.entries() if item.query != cleaned]
        self._save([entry, *existing][: self.limit])

    def search(self, query: str) -> list[HistoryEntry]:
        entries = self.entries()
        needle = (query or "").strip().lower()
        if not needle:
            return entries
        return [entry for entry in entries if needle in entry.query.lower()]

    def recent_suggestions(self, limit: int = 5) -> list[str]:
        return [entry.query for entry in self.entries()[:limit]]

    def clear(self) -> None:
        self._save([])

    def cleanup(self, max_age_days: int = DEFAULT_MAX_AGE_DAYS, *, now: float | None = None) -> int:
        cutoff = (time.time() if now is None else now) - max_age_days * 24 * 60 * 60
        entries = self.entries()
        kept = [entry for entry in entries if entry.timestamp > cutoff]
        removed = len(entries) - len(kept)
        if removed:
            self._save(kept)
        return removed
