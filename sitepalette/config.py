from __future__ import annotations

import json
import os
import warnings
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("~/.config/sitepalette/config.json").expanduser()

CONFIG_ENV_OVERRIDES = {
    "db_path": "SITEPALETTE_DB_PATH",
    "container_height": "SITEPALETTE_CONTAINER_HEIGHT",
    "item_height": "SITEPALETTE_ITEM_HEIGHT",
    "overscan": "SITEPALETTE_OVERSCAN",
    "estimated_item_height": "SITEPALETTE_ESTIMATED_ITEM_HEIGHT",
    "result_limit": "SITEPALETTE_RESULT_LIMIT",
    "history_limit": "SITEPALETTE_HISTORY_LIMIT",
    "history_max_age_days": "SITEPALETTE_HISTORY_MAX_AGE_DAYS",
    "open_in_browser": "SITEPALETTE_OPEN_IN_BROWSER",
}

INT_KEYS = {
    "container_height",
    "item_height",
    "overscan",
    "result_limit",
    "history_limit",
    "history_max_age_days",
}
OPTIONAL_INT_KEYS = {"estimated_item_height"}
BOOL_KEYS = {"open_in_browser"}


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("SITEPALETTE_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    config_path = get_config_path(path)
    if not config_path.exists():
        return {}
    raw = config_path.read_text()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid config json") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be an object")
    return data


def write_config_file(data: dict[str, Any], path: Path | None = None) -> Path:
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n")
    return config_path


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass
class PaletteConfig:
    db_path: str = "~/.sitepalette.sqlite"
    container_height: int = 400
    item_height: int = 40
    overscan: int = 5
    # None falls back to item_height
    estimated_item_height: int | None = None
    result_limit: int = 20
    history_limit: int = 50
    history_max_age_days: int = 30
    open_in_browser: bool = True


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    if value.lower() in {"1", "true", "yes", "on"}:
        return True
    if value.lower() in {"0", "false", "off", "no"}:
        return False
    return default


def _parse_int(value: object, default: int, *, key: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default


def _coerce_bool(value: object, default: bool, *, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return _parse_bool(value, default)
    warnings.warn(f"Invalid bool for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def load_config(path: Path | None = None) -> PaletteConfig:
    cfg = PaletteConfig()
    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = read_config_file(config_path)
        except ValueError as exc:
            warnings.warn(f"Invalid config file {config_path}: {exc}", RuntimeWarning, stacklevel=2)
            data = {}
        cfg = _apply_dict(cfg, data)
    cfg = _apply_dict(cfg, get_env_overrides())
    return cfg


def _apply_dict(cfg: PaletteConfig, data: dict[str, Any]) -> PaletteConfig:
    known = {item.name for item in fields(cfg)}
    for key, value in data.items():
        if key not in known:
            continue
        if key in INT_KEYS:
            setattr(cfg, key, _parse_int(value, getattr(cfg, key), key=key))
            continue
        if key in OPTIONAL_INT_KEYS:
            if value is None or value == "":
                setattr(cfg, key, None)
            else:
                current = getattr(cfg, key)
                parsed = _parse_int(value, -1, key=key)
                setattr(cfg, key, current if parsed < 0 else parsed)
            continue
        if key in BOOL_KEYS:
            setattr(cfg, key, _coerce_bool(value, getattr(cfg, key), key=key))
            continue
        setattr(cfg, key, str(value))
    return cfg
