from __future__ import annotations

import datetime as dt

from rich import print
from rich.markup import escape

from ..config import PaletteConfig
from ..history import SearchHistory


def init_db_cmd(*, store_from_path, config: PaletteConfig, db_path: str | None) -> None:
    store = store_from_path(db_path, config)
    try:
        store.get_entries()
        print(f"Initialized database at {store.db_path}")
    finally:
        store.close()


def stats_cmd(*, store_from_path, config: PaletteConfig, db_path: str | None) -> None:
    """Print site and usage counts."""

    store = store_from_path(db_path, config)
    try:
        stats = store.stats()
    finally:
        store.close()
    print(f"Sites: {stats['sites']}")
    print(f"Usage records: {stats['usage_entries']}")


def prune_usage_cmd(*, store_from_path, config: PaletteConfig, db_path: str | None) -> None:
    """Drop usage counts for sites that no longer exist."""

    store = store_from_path(db_path, config)
    try:
        removed = store.prune_usage()
    finally:
        store.close()
    print(f"Pruned {removed} usage records")


def history_cmd(
    *,
    store_from_path,
    config: PaletteConfig,
    db_path: str | None,
    query: str | None,
    clear: bool,
) -> None:
    """Show (or clear) recent palette queries."""

    store = store_from_path(db_path, config)
    try:
        history = SearchHistory(store, limit=config.history_limit)
        if clear:
            history.clear()
            print("Search history cleared")
            return
        history.cleanup(config.history_max_age_days)
        entries = history.search(query or "")
    finally:
        store.close()
    if not entries:
        print("[yellow]No history[/yellow]")
        return
    for entry in entries:
        when = dt.datetime.fromtimestamp(entry.timestamp, dt.UTC).strftime("%Y-%m-%d %H:%M")
        suffix = f" -> {entry.selected_id}" if entry.selected_id else ""
        print(f"[dim]{when}[/dim] {escape(entry.query)}{escape(suffix)}")
