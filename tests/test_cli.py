"""CLI tests for listing, opening, and organizing projects."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, List

import pytest
from click.testing import CliRunner

from projopen.cli import cli
from projopen.state import StateRepository


def _env_with_home(tmp_path: Path, **extra: str) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    env.update(extra)
    return env


def _project(path: Path, *markers: str) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    for marker in markers or ("package.json",):
        (path / marker).write_text("{}", encoding="utf-8")
    return path


def _workspace(tmp_path: Path) -> Path:
    root = tmp_path / "code"
    _project(root / "web", "package.json", "tsconfig.json")
    _project(root / "engine", "Cargo.toml")
    _project(root / "clients" / "portal", "pyproject.toml")
    return root


def _state(tmp_path: Path) -> StateRepository:
    return StateRepository(tmp_path / ".projopen")


def _listed(runner: CliRunner, env: dict[str, Any], *query: str) -> dict[str, Any]:
    result = runner.invoke(cli, ["list", "--json", *query], env=env)
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def _names(payload: dict[str, Any]) -> List[str]:
    return [project["name"] for section in payload["sections"] for project in section["projects"]]


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "finds your local projects" in result.output
    for command in ("list", "open", "sources", "collections", "project", "config"):
        assert command in result.output


def test_sources_add_then_list(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    root = _workspace(tmp_path)

    added = runner.invoke(cli, ["sources", "add", "~/code", "--depth", "1"], env=env)

    assert added.exit_code == 0, added.output
    assert "Found 3 projects" in added.output

    payload = _listed(runner, env, "--group", "flat")
    assert payload["counts"] == {"total": 3, "matches": 3}
    assert _names(payload) == ["engine", "portal", "web"]
    portal = payload["sections"][0]["projects"][1]
    assert portal["path"] == str(root / "clients" / "portal")
    assert portal["relative_path"] == os.path.join("clients", "portal")
    assert portal["language"] == "python"


def test_sources_add_rejects_directory_without_projects(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    (tmp_path / "empty").mkdir()

    result = runner.invoke(cli, ["sources", "add", str(tmp_path / "empty")], env=env)

    assert result.exit_code != 0
    assert "No projects found at depth 2" in result.output
    assert _state(tmp_path).sources.load() == []


def test_sources_remove(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)
    source_id = _state(tmp_path).sources.load()[0].id

    removed = runner.invoke(cli, ["sources", "remove", source_id], env=env)
    missing = runner.invoke(cli, ["sources", "remove", source_id], env=env)

    assert removed.exit_code == 0
    assert missing.exit_code != 0
    assert _names(_listed(runner, env)) == []


def test_list_filters_with_query(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)

    assert _names(_listed(runner, env, "lang:ts")) == ["web"]
    assert _names(_listed(runner, env, "e")) == ["engine", "web"]
    assert _names(_listed(runner, env, "in:~/code/clients")) == ["portal"]

    payload = _listed(runner, env, "lang:rs", "#recent")
    assert payload["query"] == "#recent lang:rust"
    assert payload["counts"]["matches"] == 0


def test_list_table_output(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)

    result = runner.invoke(cli, ["list"], env=env)
    summary = runner.invoke(cli, ["list", "--summary"], env=env)

    assert result.exit_code == 0
    assert "Uncategorized" in result.output
    assert "3 of 3 project(s) shown." in result.output
    assert "Uncategorized" not in summary.output
    assert "3 of 3 project(s) shown." in summary.output


def test_list_table_shows_bracketed_names_literally(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _project(tmp_path / "code" / "[old]")
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)
    runner.invoke(cli, ["collections", "create", "[archive]"], env=env)

    listed = runner.invoke(cli, ["list", "--group", "flat"], env=env)
    assigned = runner.invoke(cli, ["collections", "assign", "[old]", "[archive]"], env=env)

    assert listed.exit_code == 0, listed.output
    assert "[old]" in listed.output
    assert assigned.exit_code == 0, assigned.output
    assert "Added [old] to [archive]." in assigned.output


def test_collections_assign_and_group(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)

    created = runner.invoke(cli, ["collections", "create", "Work"], env=env)
    assigned = runner.invoke(cli, ["collections", "assign", "engine", "work"], env=env)
    again = runner.invoke(cli, ["collections", "assign", "engine", "Work"], env=env)

    assert created.exit_code == 0, created.output
    assert assigned.exit_code == 0, assigned.output
    assert "already in" in again.output

    payload = _listed(runner, env)
    assert [(s["title"], len(s["projects"])) for s in payload["sections"]] == [
        ("Work", 1),
        ("Uncategorized", 2),
    ]
    assert _names(_listed(runner, env, "#work")) == ["engine"]
    assert payload["sections"][0]["projects"][0]["collections"] == ["Work"]

    duplicate = runner.invoke(cli, ["collections", "create", "WORK"], env=env)
    assert duplicate.exit_code != 0
    assert "already exists" in duplicate.output


def test_collections_delete_reports_cleanup(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)
    runner.invoke(cli, ["collections", "create", "Work"], env=env)
    runner.invoke(cli, ["collections", "assign", "engine", "Work"], env=env)
    runner.invoke(cli, ["collections", "assign", "web", "Work"], env=env)

    result = runner.invoke(cli, ["collections", "delete", "Work"], env=env)

    assert result.exit_code == 0, result.output
    assert "removed it from 2 project(s)" in result.output
    assert _names(_listed(runner, env, "#uncategorized")) == ["engine", "portal", "web"]


def test_collections_rename(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    runner.invoke(cli, ["collections", "create", "Work"], env=env)
    runner.invoke(cli, ["collections", "create", "Play"], env=env)

    clash = runner.invoke(cli, ["collections", "rename", "Work", "play"], env=env)
    renamed = runner.invoke(cli, ["collections", "rename", "Work", "Job"], env=env)

    assert clash.exit_code != 0
    assert renamed.exit_code == 0
    assert [c.name for c in _state(tmp_path).collections.load()] == ["Job", "Play"]


def test_open_launches_configured_editor(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path, PROJOPEN__IDE__PATH="/usr/bin/nvim", PROJOPEN__IDE__NAME="nvim")
    root = _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)
    calls: List[List[str]] = []

    def _popen(command: List[str], **_: Any) -> None:
        calls.append(command)

    monkeypatch.setattr("projopen.launcher.subprocess.Popen", _popen)
    monkeypatch.setattr("projopen.launcher.sys.platform", "linux")

    result = runner.invoke(cli, ["open", "web"], env=env)

    assert result.exit_code == 0, result.output
    assert "Opened web in nvim" in result.output
    assert calls == [["/usr/bin/nvim", str(root / "web")]]
    assert _state(tmp_path).settings.get(str(root / "web")).last_opened is not None
    assert _names(_listed(runner, env, "#recent")) == ["web"]


def test_open_without_editor_fails(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)

    result = runner.invoke(cli, ["open", "web"], env=env)
    unknown = runner.invoke(cli, ["open", "nothing-here"], env=env)

    assert result.exit_code != 0
    assert "No editor configured" in result.output
    assert unknown.exit_code != 0
    assert "No project matches" in unknown.output


def test_add_single_project(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    tool = _project(tmp_path / "tools" / "cli-tool", "go.mod")
    (tmp_path / "notes").mkdir()

    added = runner.invoke(cli, ["add", str(tool)], env=env)
    duplicate = runner.invoke(cli, ["add", str(tool)], env=env)
    plain = runner.invoke(cli, ["add", str(tmp_path / "notes")], env=env)

    assert added.exit_code == 0, added.output
    assert "Project added: cli-tool" in added.output
    assert duplicate.exit_code != 0
    assert plain.exit_code != 0
    assert "No project markers found" in plain.output
    assert _names(_listed(runner, env, "lang:go")) == ["cli-tool"]


def test_project_set_and_reset(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    root = _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)
    icon = tmp_path / "logo.png"
    icon.write_bytes(b"\x89PNG")

    updated = runner.invoke(
        cli,
        [
            "project",
            "set",
            "engine",
            "--name",
            "Game Engine",
            "--icon",
            "Rocket",
            "--color",
            "teal",
            "--custom-icon",
            str(icon),
        ],
        env=env,
    )

    assert updated.exit_code == 0, updated.output
    settings = _state(tmp_path).settings.get(str(root / "engine"))
    assert settings.display_name == "Game Engine"
    assert settings.icon == "Rocket"
    assert settings.icon_color == "#00897B"
    assert settings.custom_icon is not None
    assert Path(settings.custom_icon).exists()
    assert "Game Engine" in _names(_listed(runner, env))

    shown = runner.invoke(cli, ["project", "show", "game engine"], env=env)
    assert "displayName" not in shown.output
    assert "display_name: Game Engine" in shown.output

    reset = runner.invoke(cli, ["project", "reset", str(root / "engine")], env=env)
    assert reset.exit_code == 0
    assert not Path(settings.custom_icon).exists()


def test_project_set_validates_before_writing(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    root = _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)
    bitmap = tmp_path / "logo.bmp"
    bitmap.write_bytes(b"BM")

    bad_icon = runner.invoke(cli, ["project", "set", "web", "--icon", "Unicorn"], env=env)
    bad_color = runner.invoke(cli, ["project", "set", "web", "--color", "plaid"], env=env)
    bad_image = runner.invoke(
        cli, ["project", "set", "web", "--name", "X", "--custom-icon", str(bitmap)], env=env
    )

    assert bad_icon.exit_code != 0
    assert bad_color.exit_code != 0
    assert bad_image.exit_code != 0
    assert "Unsupported icon format" in bad_image.output
    assert _state(tmp_path).settings.get(str(root / "web")).display_name is None


def test_legacy_directory_is_migrated_on_first_list(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path, PROJOPEN__LEGACY__PROJECTS_DIRECTORY="~/code")
    _workspace(tmp_path)

    first = _listed(runner, env)
    state = _state(tmp_path)

    assert len(_names(first)) == 3
    assert [s.path for s in state.sources.load()] == ["~/code"]
    assert (state.support_dir / "migration-v2-done").exists()

    _listed(runner, env)
    assert len(state.sources.load()) == 1


def test_suggest_lists_filters(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _workspace(tmp_path)
    runner.invoke(cli, ["sources", "add", "~/code"], env=env)

    result = runner.invoke(cli, ["suggest", "lang:"], env=env)

    assert result.exit_code == 0
    assert "lang:python" in result.output
    assert "lang:rust" in result.output
    assert "#recent" not in result.output
