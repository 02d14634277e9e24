"""Tests for the directory scanner and source aggregation."""

from __future__ import annotations

import os
from pathlib import Path

from projopen.discovery import DirectoryScanner, find_projects, find_projects_from_all_sources
from projopen.state.models import SourceDirectory


def _project(path: Path, marker: str = "package.json") -> Path:
    path.mkdir(parents=True, exist_ok=True)
    (path / marker).write_text("{}", encoding="utf-8")
    return path


def _tree(root: Path) -> Path:
    """Build a small workspace used by several tests.

    Layout::

        root/alpha            project
        root/alpha/packages/a nested project (must not be reported)
        root/group/beta       project at depth 1
        root/group/deep/gamma project at depth 2
        root/node_modules/pkg excluded
        root/.hidden/secret   hidden
    """
    _project(root / "alpha")
    _project(root / "alpha" / "packages" / "a")
    _project(root / "group" / "beta", "Cargo.toml")
    _project(root / "group" / "deep" / "gamma", "go.mod")
    _project(root / "node_modules" / "pkg")
    _project(root / ".hidden" / "secret")
    (root / "notes.txt").write_text("", encoding="utf-8")
    return root


def test_find_projects_respects_depth(tmp_path: Path) -> None:
    root = _tree(tmp_path / "code")

    assert [p.name for p in find_projects(str(root), 0)] == ["alpha"]
    assert [p.name for p in find_projects(str(root), 1)] == ["alpha", "beta"]
    assert [p.name for p in find_projects(str(root), 2)] == ["alpha", "beta", "gamma"]


def test_find_projects_is_monotonic_in_depth(tmp_path: Path) -> None:
    root = _tree(tmp_path / "code")

    previous: set[str] = set()
    for depth in range(5):
        current = {p.path for p in find_projects(str(root), depth)}
        assert previous <= current
        previous = current


def test_find_projects_never_reports_nested_or_excluded(tmp_path: Path) -> None:
    root = _tree(tmp_path / "code")

    projects = find_projects(str(root), 10)
    paths = [p.path for p in projects]

    for path in paths:
        assert not any(
            other != path and path.startswith(other + os.sep) for other in paths
        ), path
        parts = Path(path).relative_to(root).parts
        assert "node_modules" not in parts
        assert not any(part.startswith(".") for part in parts)


def test_find_projects_reports_relative_paths(tmp_path: Path) -> None:
    root = _tree(tmp_path / "code")

    by_name = {p.name: p for p in find_projects(str(root), 2)}

    assert by_name["gamma"].relative_path == os.path.join("group", "deep", "gamma")
    assert by_name["gamma"].path == str(root / "group" / "deep" / "gamma")


def test_find_projects_sorts_case_insensitively(tmp_path: Path) -> None:
    for name in ("zeta", "Beta", "alpha"):
        _project(tmp_path / name)

    assert [p.name for p in find_projects(str(tmp_path), 0)] == ["alpha", "Beta", "zeta"]


def test_find_projects_missing_root_is_empty(tmp_path: Path) -> None:
    assert find_projects(str(tmp_path / "missing"), 3) == []


def test_scanner_swallows_listing_errors(tmp_path: Path) -> None:
    root = _tree(tmp_path / "code")

    class FlakyScanner(DirectoryScanner):
        def _list_directory(self, directory: Path) -> list[Path]:
            if directory.name == "group":
                raise PermissionError("denied")
            return super()._list_directory(directory)

    names = [p.name for p in FlakyScanner().scan(str(root), 3)]

    assert names == ["alpha"]


def test_scanner_expands_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    _project(tmp_path / "code" / "site")

    projects = DirectoryScanner().scan("~/code", 0)

    assert [p.path for p in projects] == [str(tmp_path / "code" / "site")]


def test_aggregator_deduplicates_first_source_wins(tmp_path: Path) -> None:
    root = _tree(tmp_path / "code")
    sources = [
        SourceDirectory(id="src_a", path=str(root / "group"), depth=0, default_collection="c1"),
        SourceDirectory(id="src_b", path=str(root), depth=2),
    ]

    projects = find_projects_from_all_sources(sources)
    by_name = {p.name: p for p in projects}

    assert [p.name for p in projects] == ["alpha", "beta", "gamma"]
    assert by_name["beta"].source_id == "src_a"
    assert by_name["beta"].collections == ["c1"]
    assert by_name["alpha"].source_id == "src_b"
    assert by_name["alpha"].collections == []
