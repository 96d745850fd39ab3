from __future__ import annotations

from pathlib import Path

import pytest

from sitepalette.history import HISTORY_KEY, HistoryEntry, SearchHistory
from sitepalette.store import SiteStore

DAY = 24 * 60 * 60


@pytest.fixture
def store(tmp_path: Path):
    store = SiteStore(tmp_path / "sites.sqlite")
    try:
        yield store
    finally:
        store.close()


def test_add_keeps_newest_first_and_dedupes(store: SiteStore) -> None:
    history = SearchHistory(store)
    history.add("git", now=1.0)
    history.add("docs", selected_id="site-mdn", now=2.0)
    history.add("  git ", now=3.0)
    assert history.entries() == [
        HistoryEntry(query="git", timestamp=3.0),
        HistoryEntry(query="docs", timestamp=2.0, selected_id="site-mdn"),
    ]


def test_blank_queries_are_ignored(store: SiteStore) -> None:
    history = SearchHistory(store)
    history.add("   ")
    assert history.entries() == []


def test_limit_drops_oldest(store: SiteStore) -> None:
    history = SearchHistory(store, limit=3)
    for index in range(5):
        history.add(f"q{index}", now=float(index))
    assert history.recent_suggestions() == ["q4", "q3", "q2"]
    assert history.recent_suggestions(limit=1) == ["q4"]


def test_search_is_case_insensitive(store: SiteStore) -> None:
    history = SearchHistory(store)
    history.add("GitHub issues", now=1.0)
    history.add("calendar", now=2.0)
    assert [entry.query for entry in history.search("github")] == ["GitHub issues"]
    assert len(history.search("")) == 2


def test_cleanup_removes_old_entries(store: SiteStore) -> None:
    history = SearchHistory(store)
    now = 100 * DAY
    history.add("old", now=now - 40 * DAY)
    history.add("new", now=now - DAY)
    assert history.cleanup(30, now=now) == 1
    assert [entry.query for entry in history.entries()] == ["new"]
    assert history.cleanup(30, now=now) == 0


def test_clear(store: SiteStore) -> None:
    history = SearchHistory(store)
    history.add("git")
    history.clear()
    assert history.entries() == []


def test_malformed_history_is_ignored(store: SiteStore) -> None:
    store.write_blob(
        HISTORY_KEY,
        [{"query": "ok", "timestamp": 5}, {"query": 1, "timestamp": 2}, "junk"],
    )
    assert SearchHistory(store).entries() == [HistoryEntry(query="ok", timestamp=5.0)]
    store.write_blob(HISTORY_KEY, {"query": "x"})
    assert SearchHistory(store).entries() == []
