from __future__ import annotations

from sitepalette import search, suggest_tags
from sitepalette.types import Entry

ENTRIES = [
    Entry(id="gh", name="GitHub", url="https://github.com/", tags=("dev",)),
    Entry(id="mdn", name="MDN Web Docs", url="https://developer.mozilla.org/", tags=("dev/docs",)),
    Entry(id="notes", name="Team Notes", url="https://notes.example/", tags=("work/notes",)),
    Entry(id="cal", name="Calendar", url="https://calendar.example/", tags=("work",)),
]


def _ids(results) -> list[str]:
    return [item.entry.id for item in results]


def test_plain_query_searches_all_entries() -> None:
    assert _ids(search(ENTRIES, "git")) == ["gh"]


def test_tag_filter_includes_descendants() -> None:
    assert _ids(search(ENTRIES, "#dev")) == ["gh", "mdn"]
    assert _ids(search(ENTRIES, "#work")) == ["notes", "cal"]


def test_tag_filter_then_text() -> None:
    assert _ids(search(ENTRIES, "#dev docs")) == ["mdn"]
    assert _ids(search(ENTRIES, "#work git")) == []


def test_tag_filter_is_case_insensitive() -> None:
    assert _ids(search(ENTRIES, "#DEV/Docs")) == ["mdn"]


def test_empty_tag_searches_everything() -> None:
    assert _ids(search(ENTRIES, "# github")) == ["gh"]
    assert len(search(ENTRIES, "#")) == len(ENTRIES)


def test_usage_orders_empty_query() -> None:
    assert _ids(search(ENTRIES, "", {"cal": 2}))[0] == "cal"


def test_suggest_tags_only_for_bare_token() -> None:
    assert suggest_tags(ENTRIES, "#dev github") == []
    assert suggest_tags(ENTRIES, "github") == []


def test_suggest_tags_for_partial_tag() -> None:
    suggestions = suggest_tags(ENTRIES, "#wo")
    assert [(s.name, s.count) for s in suggestions] == [("work", 2), ("work/notes", 1)]


def test_suggest_tags_for_path_query() -> None:
    suggestions = suggest_tags(ENTRIES, "#dev/")
    assert [s.name for s in suggestions] == ["dev/docs"]
    assert suggestions[0].parent_path == "dev"


def test_bare_hash_suggests_every_tag() -> None:
    names = [s.name for s in suggest_tags(ENTRIES, "#")]
    assert names == ["dev", "work", "dev/docs", "work/notes"]
