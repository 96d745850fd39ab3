from __future__ import annotations

import json
from dataclasses import asdict, fields
from typing import Any

import typer
from rich import print
from rich.markup import escape

from ..config import PaletteConfig


def _parse_value(raw: str) -> Any:
    # "400", "false" and "null" keep their JSON types, anything else stays a string
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def config_cmd(
    *,
    read_config_or_exit,
    write_config_or_exit,
    load_config,
    key: str | None,
    value: str | None,
    unset: bool,
) -> None:
    """Show the effective config, or set/unset one key in the config file."""

    if key is None:
        for name, current in asdict(load_config()).items():
            print(f"{name} = {escape(json.dumps(current))}")
        return
    if key not in {item.name for item in fields(PaletteConfig)}:
        print(f"[red]Unknown config key {escape(key)}[/red]")
        raise typer.Exit(code=1)
    if unset:
        data = read_config_or_exit()
        data.pop(key, None)
        write_config_or_exit(data)
        print(f"Unset {key}")
        return
    if value is None:
        print(escape(json.dumps(getattr(load_config(), key))))
        return
    data = read_config_or_exit()
    data[key] = _parse_value(value)
    write_config_or_exit(data)
    print(f"Set {key} = {escape(json.dumps(data[key]))}")
