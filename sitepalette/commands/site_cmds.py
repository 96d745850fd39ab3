from __future__ import annotations

import webbrowser
from urllib.parse import quote

import typer
from rich import print
from rich.markup import escape

from ..config import PaletteConfig
from ..history import SearchHistory
from ..palette import search, suggest_tags
from ..query import is_bare_tag_token
from ..tags import all_tags, build_tag_suggestions, tag_counts
from ..types import ViewportItem
from ..viewport import ViewportEngine
from .common import format_entry


def search_cmd(
    *,
    store_from_path,
    config: PaletteConfig,
    db_path: str | None,
    query: str,
    limit: int | None,
) -> None:
    """Rank sites against a palette query ("#tag words" or free text)."""

    store = store_from_path(db_path, config)
    try:
        entries = store.get_entries()
        if is_bare_tag_token(query) and query.strip() != "#":
            for suggestion in suggest_tags(entries, query):
                print(f"#{escape(suggestion.name)} ({suggestion.count})")
        results = search(entries, query, store.get_usage_counts())
        if not results:
            print("[yellow]No matches[/yellow]")
            return
        shown = config.result_limit if limit is None else limit
        for item in results[:shown]:
            print(f"{escape(f'[{item.entry.id}]')} {format_entry(item.entry)} score={item.score:.2f}")
    finally:
        store.close()


def tags_cmd(
    *,
    store_from_path,
    config: PaletteConfig,
    db_path: str | None,
    query: str | None,
) -> None:
    """List tags, parents first, with aggregated counts."""

    store = store_from_path(db_path, config)
    try:
        entries = store.get_entries()
        suggestions = build_tag_suggestions(all_tags(entries), tag_counts(entries), query)
        if not suggestions:
            print("[yellow]No tags[/yellow]")
            return
        for suggestion in suggestions:
            indent = "  " * suggestion.depth
            print(f"{indent}{escape(suggestion.name)} ({suggestion.count})")
    finally:
        store.close()


def list_cmd(
    *,
    store_from_path,
    config: PaletteConfig,
    db_path: str | None,
    query: str,
    scroll_top: float,
) -> None:
    """Print the rows a viewport of the configured height would render."""

    store = store_from_path(db_path, config)
    try:
        results = search(store.get_entries(), query, store.get_usage_counts())
    finally:
        store.close()
    engine = ViewportEngine(
        container_height=config.container_height,
        item_height=config.item_height,
        overscan=config.overscan,
        estimated_item_height=config.estimated_item_height,
    )
    engine.set_items([ViewportItem(id=item.entry.id, data=item) for item in results])
    if not engine.get_item_count():
        print("[yellow]No matches[/yellow]")
        return
    visible = engine.get_visible_items(scroll_top)
    first, last = visible[0].index, visible[-1].index
    print(
        f"[dim]rows {first}-{last} of {engine.get_item_count()} "
        f"(total height {engine.get_total_height():.0f})[/dim]"
    )
    for row in visible:
        print(f"{row.top:>7.0f} {escape(f'[{row.item.id}]')} {format_entry(row.item.data.entry)}")


def expand_url(url: str, query: str | None) -> str:
    if "%s" not in url:
        return url
    return url.replace("%s", quote(query or ""))


def open_cmd(
    *,
    store_from_path,
    config: PaletteConfig,
    db_path: str | None,
    entry_id: str,
    query: str | None,
    launch: bool | None,
) -> None:
    """Record a visit to a site and optionally open it in the browser."""

    store = store_from_path(db_path, config)
    try:
        entry = store.get_entry(entry_id)
        if entry is None:
            print(f"[red]Site {escape(entry_id)} not found[/red]")
            raise typer.Exit(code=1)
        count = store.increment_usage(entry.id)
        if query:
            SearchHistory(store, limit=config.history_limit).add(query, selected_id=entry.id)
    finally:
        store.close()
    url = expand_url(entry.url, query)
    should_launch = config.open_in_browser if launch is None else launch
    if should_launch and url:
        webbrowser.open(url)
    print(f"[green]{escape(entry.name or url)}[/green] {escape(url)} (opened {count} times)")


def add_cmd(
    *,
    store_from_path,
    config: PaletteConfig,
    db_path: str | None,
    name: str,
    url: str,
    tags: list[str] | None,
) -> None:
    """Add a site."""

    store = store_from_path(db_path, config)
    try:
        try:
            entry = store.add_site({"name": name, "url": url, "tags": tags or []})
        except ValueError as exc:
            print(f"[red]{escape(str(exc))}[/red]")
            raise typer.Exit(code=1) from exc
        print(f"Added site {entry.id}")
    finally:
        store.close()


def remove_cmd(
    *,
    store_from_path,
    config: PaletteConfig,
    db_path: str | None,
    entry_id: str,
) -> None:
    """Delete a site by id."""

    store = store_from_path(db_path, config)
    try:
        if not store.delete_site(entry_id):
            print(f"[red]Site {escape(entry_id)} not found[/red]")
            raise typer.Exit(code=1)
    finally:
        store.close()
    print(f"Removed site {entry_id}")
