from __future__ import annotations

import json
import logging
import re
import secrets
import time
from collections.abc import Iterable
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

from . import db
from .types import Entry

logger = logging.getLogger(__name__)

SITES_KEY = "sites"
USAGE_KEY = "usage"
ID_PREFIX = "site"

DEFAULT_SITES: tuple[dict[str, Any], ...] = (
    {"id": "site-github", "name": "GitHub", "url": "https://github.com/", "tags": ["dev"]},
    {
        "id": "site-stackoverflow",
        "name": "Stack Overflow",
        "url": "https://stackoverflow.com/",
        "tags": ["dev"],
    },
    {
        "id": "site-mdn",
        "name": "MDN Web Docs",
        "url": "https://developer.mozilla.org/",
        "tags": ["dev/docs"],
    },
    {
        "id": "site-bing",
        "name": "Bing Search",
        "url": "https://www.bing.com/search?q=%s",
        "tags": ["search"],
    },
    {"id": "site-youtube", "name": "YouTube", "url": "https://www.youtube.com/", "tags": ["video"]},
    {
        "id": "site-gcal",
        "name": "Google Calendar",
        "url": "https://calendar.google.com/",
        "tags": ["work"],
    },
)


def generate_id() -> str:
    return f"{ID_PREFIX}-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def _coerce_tags(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(part for part in re.split(r"[,\s]+", value) if part)
    if isinstance(value, (list, tuple)):
        return tuple(str(tag) for tag in value if isinstance(tag, str) and tag.strip())
    return ()


def normalize_site(record: object) -> Entry | None:
    """Turn a stored or user-supplied record into an ``Entry``.

    Returns None for anything that is not a mapping. Missing ids are
    generated; tags given as a string are split on commas and whitespace.
    """
    if isinstance(record, Entry):
        return record
    if not isinstance(record, dict):
        return None
    entry_id = record.get("id")
    if not isinstance(entry_id, str) or not entry_id.strip():
        entry_id = generate_id()
    name = record.get("name")
    url = record.get("url")
    return Entry(
        id=entry_id,
        name=name if isinstance(name, str) else "",
        url=url if isinstance(url, str) else "",
        tags=_coerce_tags(record.get("tags")),
    )


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    data = asdict(entry)
    data["tags"] = list(entry.tags)
    return data


class SiteStore:
    """Sites and usage counts kept as JSON blobs in a SQLite key/value table.

    Reads never raise on bad data: an unreadable blob is logged and treated
    as empty.
    """

    def __init__(self, db_path: Path | str = db.DEFAULT_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser()
        self.conn = db.connect(self.db_path)
        db.initialize_schema(self.conn)

    def close(self) -> None:
        self.conn.close()

    def read_blob(self, key: str) -> Any:
        try:
            return db.from_json(db.get_value(self.conn, key))
        except json.JSONDecodeError as exc:
            logger.warning("stored value for %s is not valid json", key, exc_info=exc)
            return None

    def write_blob(self, key: str, value: Any) -> None:
        db.set_value(self.conn, key, value)

    # sites

    def get_entries(self) -> list[Entry]:
        raw = self.read_blob(SITES_KEY)
        if raw is not None and not isinstance(raw, list):
            logger.warning("stored sites have unexpected shape: %s", type(raw).__name__)
            raw = None
        entries: list[Entry] = []
        mutated = False
        for record in raw or []:
            entry = normalize_site(record)
            if entry is None:
                mutated = True
                continue
            if entry_to_dict(entry) != record:
                mutated = True
            entries.append(entry)
        if not entries:
            entries = [entry for entry in map(normalize_site, DEFAULT_SITES) if entry]
            mutated = True
        if mutated:
            self.set_entries(entries)
        return entries

    def set_entries(self, entries: Iterable[Entry]) -> None:
        self.write_blob(SITES_KEY, [entry_to_dict(entry) for entry in entries])

    def get_entry(self, entry_id: str) -> Entry | None:
        for entry in self.get_entries():
            if entry.id == entry_id:
                return entry
        return None

    def add_site(self, record: dict[str, Any] | Entry) -> Entry:
        entry = normalize_site(record)
        if entry is None:
            raise ValueError("invalid site record")
        entries = self.get_entries()
        if any(existing.id == entry.id for existing in entries):
            raise ValueError(f"site {entry.id} already exists")
        entries.append(entry)
        self.set_entries(entries)
        return entry

    def update_site(self, entry_id: str, **changes: Any) -> Entry | None:
        entries = self.get_entries()
        for index, entry in enumerate(entries):
            if entry.id != entry_id:
                continue
            if "tags" in changes:
                changes["tags"] = _coerce_tags(changes["tags"])
            changes.pop("id", None)
            updated = replace(entry, **changes)
            entries[index] = updated
            self.set_entries(entries)
            return updated
        return None

    def delete_site(self, entry_id: str) -> bool:
        entries = self.get_entries()
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self.set_entries(remaining)
        return True

    # usage

    def get_usage_counts(self) -> dict[str, int]:
        raw = self.read_blob(USAGE_KEY)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning("stored usage has unexpected shape: %s", type(raw).__name__)
            return {}
        counts: dict[str, int] = {}
        for key, value in raw.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                continue
            counts[str(key)] = value
        return counts

    def increment_usage(self, entry_id: str) -> int:
        if not entry_id:
            raise ValueError("entry id is required")
        counts = self.get_usage_counts()
        counts[entry_id] = counts.get(entry_id, 0) + 1
        self.write_blob(USAGE_KEY, counts)
        return counts[entry_id]

    def set_usage(self, entry_id: str, count: int) -> None:
        counts = self.get_usage_counts()
        counts[entry_id] = max(0, int(count))
        self.write_blob(USAGE_KEY, counts)

    def prune_usage(self, valid_ids: Iterable[str] | None = None) -> int:
        keep = set(valid_ids) if valid_ids is not None else {e.id for e in self.get_entries()}
        counts = self.get_usage_counts()
        pruned = {key: value for key, value in counts.items() if key in keep}
        removed = len(counts) - len(pruned)
        self.write_blob(USAGE_KEY, pruned)
        if removed:
            logger.info("pruned %d stale usage records", removed)
        return removed

    def clear_usage(self) -> None:
        self.write_blob(USAGE_KEY, {})

    def stats(self) -> dict[str, int]:
        return {
            "sites": len(self.get_entries()),
            "usage_entries": len(self.get_usage_counts()),
        }
