from __future__ import annotations

from typing import Any

import typer
from rich import print
from rich.markup import escape

from sitepalette.config import PaletteConfig, load_config, read_config_file, write_config_file
from sitepalette.store import SiteStore
from sitepalette.types import Entry


def store_from_path(db_path: str | None, config: PaletteConfig | None = None) -> SiteStore:
    cfg = config or load_config()
    return SiteStore(db_path or cfg.db_path)


def read_config_or_exit() -> dict[str, Any]:
    try:
        return read_config_file()
    except ValueError as exc:
        print(f"[red]Invalid config file: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


def write_config_or_exit(data: dict[str, Any]) -> None:
    try:
        write_config_file(data)
    except OSError as exc:
        print(f"[red]Failed to write config: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


def format_tags(tags: tuple[str, ...]) -> str:
    if not tags:
        return ""
    return " ".join(f"#{escape(tag)}" for tag in tags)


def format_entry(entry: Entry) -> str:
    tags = format_tags(entry.tags)
    line = f"[bold]{escape(entry.name or entry.url)}[/bold] [dim]{escape(entry.url)}[/dim]"
    if tags:
        line += f" [cyan]{tags}[/cyan]"
    return line
