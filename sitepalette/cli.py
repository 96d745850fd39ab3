from __future__ import annotations

import logging
from typing import List, Optional

import typer

from .commands.common import read_config_or_exit, store_from_path, write_config_or_exit
from .commands.config_cmds import config_cmd
from .commands.maintenance_cmds import history_cmd, init_db_cmd, prune_usage_cmd, stats_cmd
from .commands.site_cmds import add_cmd, list_cmd, open_cmd, remove_cmd, search_cmd, tags_cmd
from .config import load_config

app = typer.Typer(help="sitepalette: fuzzy launcher for your bookmarked sites")

DB_PATH_HELP = "Path to SQLite database"


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def init_db(db_path: str = typer.Option(None, help=DB_PATH_HELP)) -> None:
    """Create the database and seed the default sites."""

    init_db_cmd(store_from_path=store_from_path, config=load_config(), db_path=db_path)


@app.command()
def search(
    query: str = typer.Argument("", help='Query text, optionally starting with "#tag"'),
    limit: Optional[int] = typer.Option(None, min=0, help="Maximum results to show"),
    db_path: str = typer.Option(None, help=DB_PATH_HELP),
) -> None:
    """Fuzzy-search sites, ranked by relevance and usage."""

    search_cmd(
        store_from_path=store_from_path,
        config=load_config(),
        db_path=db_path,
        query=query,
        limit=limit,
    )


@app.command()
def tags(
    query: Optional[str] = typer.Argument(None, help="Filter tags (use a/b for paths)"),
    db_path: str = typer.Option(None, help=DB_PATH_HELP),
) -> None:
    """List tags with hierarchical counts."""

    tags_cmd(store_from_path=store_from_path, config=load_config(), db_path=db_path, query=query)


@app.command("list")
def list_sites(
    query: str = typer.Argument("", help="Optional palette query"),
    scroll_top: float = typer.Option(0.0, help="Scroll offset of the viewport"),
    db_path: str = typer.Option(None, help=DB_PATH_HELP),
) -> None:
    """Show one viewport page of the ranked site list."""

    list_cmd(
        store_from_path=store_from_path,
        config=load_config(),
        db_path=db_path,
        query=query,
        scroll_top=scroll_top,
    )


@app.command("open")
def open_site(
    entry_id: str,
    query: Optional[str] = typer.Option(None, help="Query to record and fill into %s URLs"),
    launch: Optional[bool] = typer.Option(
        None, "--launch/--no-launch", help="Open the URL in the browser"
    ),
    db_path: str = typer.Option(None, help=DB_PATH_HELP),
) -> None:
    """Open a site and count the visit."""

    open_cmd(
        store_from_path=store_from_path,
        config=load_config(),
        db_path=db_path,
        entry_id=entry_id,
        query=query,
        launch=launch,
    )


@app.command()
def add(
    name: str,
    url: str,
    tag: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable)"),
    db_path: str = typer.Option(None, help=DB_PATH_HELP),
) -> None:
    """Add a site."""

    add_cmd(
        store_from_path=store_from_path,
        config=load_config(),
        db_path=db_path,
        name=name,
        url=url,
        tags=tag,
    )


@app.command()
def remove(entry_id: str, db_path: str = typer.Option(None, help=DB_PATH_HELP)) -> None:
    """Remove a site."""

    remove_cmd(
        store_from_path=store_from_path,
        config=load_config(),
        db_path=db_path,
        entry_id=entry_id,
    )


@app.command()
def history(
    query: Optional[str] = typer.Argument(None, help="Filter history"),
    clear: bool = typer.Option(False, "--clear", help="Clear search history"),
    db_path: str = typer.Option(None, help=DB_PATH_HELP),
) -> None:
    """Show recent searches."""

    history_cmd(
        store_from_path=store_from_path,
        config=load_config(),
        db_path=db_path,
        query=query,
        clear=clear,
    )


@app.command()
def prune_usage(db_path: str = typer.Option(None, help=DB_PATH_HELP)) -> None:
    """Forget usage counts of deleted sites."""

    prune_usage_cmd(store_from_path=store_from_path, config=load_config(), db_path=db_path)


@app.command()
def stats(db_path: str = typer.Option(None, help=DB_PATH_HELP)) -> None:
    """Show store statistics."""

    stats_cmd(store_from_path=store_from_path, config=load_config(), db_path=db_path)


@app.command("config")
def config_command(
    key: Optional[str] = typer.Argument(None, help="Config key to show or set"),
    value: Optional[str] = typer.Argument(None, help="New value (JSON literals are parsed)"),
    unset: bool = typer.Option(False, "--unset", help="Remove the key from the config file"),
) -> None:
    """Show or edit the config file."""

    config_cmd(
        read_config_or_exit=read_config_or_exit,
        write_config_or_exit=write_config_or_exit,
        load_config=load_config,
        key=key,
        value=value,
        unset=unset,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
