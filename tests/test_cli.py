from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sitepalette.cli import app

runner = CliRunner()


@pytest.fixture
def db_args(tmp_path: Path) -> list[str]:
    return ["--db-path", str(tmp_path / "sites.sqlite")]


def test_root_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ["search", "tags", "open", "list", "history", "prune-usage", "init-db"]:
        assert command in result.stdout


def test_init_db(tmp_path: Path) -> None:
    path = tmp_path / "sites.sqlite"
    result = runner.invoke(app, ["init-db", "--db-path", str(path)])
    assert result.exit_code == 0
    assert "Initialized database" in result.stdout
    assert path.exists()


def test_search_ranks_sites(db_args: list[str]) -> None:
    result = runner.invoke(app, ["search", "git", *db_args])
    assert result.exit_code == 0
    assert "[site-github]" in result.stdout
    assert "score=40.00" in result.stdout


def test_search_without_matches(db_args: list[str]) -> None:
    result = runner.invoke(app, ["search", "zzqqxx", *db_args])
    assert result.exit_code == 0
    assert "No matches" in result.stdout


def test_search_bare_tag_prints_suggestions(db_args: list[str]) -> None:
    result = runner.invoke(app, ["search", "#de", *db_args])
    assert result.exit_code == 0
    assert "#dev (3)" in result.stdout
    assert "#dev/docs (1)" in result.stdout


def test_search_with_tag_filter(db_args: list[str]) -> None:
    result = runner.invoke(app, ["search", "#dev docs", *db_args])
    assert result.exit_code == 0
    assert "site-mdn" in result.stdout
    assert "site-youtube" not in result.stdout


def test_search_limit(db_args: list[str]) -> None:
    result = runner.invoke(app, ["search", "", "--limit", "2", *db_args])
    assert result.exit_code == 0
    assert result.stdout.count("score=") == 2


def test_tags_lists_hierarchy(db_args: list[str]) -> None:
    result = runner.invoke(app, ["tags", *db_args])
    assert result.exit_code == 0
    assert "dev (3)" in result.stdout
    assert "dev/docs (1)" in result.stdout


def test_add_list_remove(db_args: list[str]) -> None:
    added = runner.invoke(
        app, ["add", "Python Docs", "https://docs.python.org/", "-t", "dev/docs", *db_args]
    )
    assert added.exit_code == 0
    assert "Added site site-" in added.stdout
    entry_id = added.stdout.strip().rsplit(" ", 1)[-1]

    listed = runner.invoke(app, ["list", "python", *db_args])
    assert listed.exit_code == 0
    assert "rows 0-0 of 1" in listed.stdout
    assert "Python Docs" in listed.stdout

    removed = runner.invoke(app, ["remove", entry_id, *db_args])
    assert removed.exit_code == 0
    assert f"Removed site {entry_id}" in removed.stdout

    missing = runner.invoke(app, ["remove", entry_id, *db_args])
    assert missing.exit_code == 1
    assert "not found" in missing.stdout


def test_list_shows_viewport_window(db_args: list[str]) -> None:
    result = runner.invoke(app, ["list", *db_args])
    assert result.exit_code == 0
    assert "rows 0-5 of 6 (total height 240)" in result.stdout


def test_open_counts_usage_and_records_history(db_args: list[str]) -> None:
    result = runner.invoke(
        app, ["open", "site-github", "--query", "git", "--no-launch", *db_args]
    )
    assert result.exit_code == 0
    assert "(opened 1 times)" in result.stdout

    history = runner.invoke(app, ["history", *db_args])
    assert "git -> site-github" in history.stdout

    stats = runner.invoke(app, ["stats", *db_args])
    assert "Usage records: 1" in stats.stdout

    cleared = runner.invoke(app, ["history", "--clear", *db_args])
    assert "Search history cleared" in cleared.stdout
    assert "No history" in runner.invoke(app, ["history", *db_args]).stdout


def test_open_launches_browser_with_query(
    db_args: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    opened: list[str] = []
    monkeypatch.setattr("webbrowser.open", lambda url: opened.append(url))
    result = runner.invoke(app, ["open", "site-bing", "--query", "py test", "--launch", *db_args])
    assert result.exit_code == 0
    assert opened == ["https://www.bing.com/search?q=py%20test"]


def test_open_respects_config_default(
    db_args: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    opened: list[str] = []
    monkeypatch.setattr("webbrowser.open", lambda url: opened.append(url))
    monkeypatch.setenv("SITEPALETTE_OPEN_IN_BROWSER", "false")
    result = runner.invoke(app, ["open", "site-github", *db_args])
    assert result.exit_code == 0
    assert opened == []


def test_open_unknown_site(db_args: list[str]) -> None:
    result = runner.invoke(app, ["open", "site-missing", "--no-launch", *db_args])
    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_prune_usage_after_remove(db_args: list[str]) -> None:
    runner.invoke(app, ["open", "site-youtube", "--no-launch", *db_args])
    runner.invoke(app, ["remove", "site-youtube", *db_args])
    result = runner.invoke(app, ["prune-usage", *db_args])
    assert result.exit_code == 0
    assert "Pruned 1 usage records" in result.stdout


def test_search_limit_zero_shows_nothing(db_args: list[str]) -> None:
    result = runner.invoke(app, ["search", "", "--limit", "0", *db_args])
    assert result.exit_code == 0
    assert "score=" not in result.stdout


def test_search_uses_configured_result_limit(
    db_args: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SITEPALETTE_RESULT_LIMIT", "3")
    result = runner.invoke(app, ["search", "", *db_args])
    assert result.exit_code == 0
    assert result.stdout.count("score=") == 3


def test_config_set_show_and_unset(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"

    result = runner.invoke(app, ["config", "overscan", "2"])
    assert result.exit_code == 0
    assert "Set overscan = 2" in result.stdout
    assert json.loads(config_path.read_text()) == {"overscan": 2}

    runner.invoke(app, ["config", "open_in_browser", "false"])
    assert json.loads(config_path.read_text()) == {"overscan": 2, "open_in_browser": False}

    shown = runner.invoke(app, ["config", "overscan"])
    assert shown.stdout.strip() == "2"

    listing = runner.invoke(app, ["config"])
    assert "open_in_browser = false" in listing.stdout
    assert "container_height = 400" in listing.stdout

    unset = runner.invoke(app, ["config", "overscan", "--unset"])
    assert unset.exit_code == 0
    assert json.loads(config_path.read_text()) == {"open_in_browser": False}


def test_config_keeps_plain_strings(tmp_path: Path) -> None:
    result = runner.invoke(app, ["config", "db_path", "~/sites.sqlite"])
    assert result.exit_code == 0
    data = json.loads((tmp_path / "config.json").read_text())
    assert data == {"db_path": "~/sites.sqlite"}


def test_config_rejects_unknown_key() -> None:
    result = runner.invoke(app, ["config", "colour", "red"])
    assert result.exit_code == 1
    assert "Unknown config key colour" in result.stdout


def test_config_set_refuses_broken_config_file(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("{broken")
    result = runner.invoke(app, ["config", "overscan", "2"])
    assert result.exit_code == 1
    assert "Invalid config file" in result.stdout
    assert (tmp_path / "config.json").read_text() == "{broken"
