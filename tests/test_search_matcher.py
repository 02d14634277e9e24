"""Tests for evaluating parsed queries against projects."""

from __future__ import annotations

from typing import Any

import pytest

from projopen.catalog.recency import DAY
from projopen.discovery import EnhancedProject
from projopen.search import filter_projects, matches_search, parse_search_query
from projopen.state.models import Collection

NOW = 1_700_000_000_000

WORK = Collection(id="coll_work", name="Work", type="manual")
CLIENT = Collection(id="coll_client", name="Client Projects", type="manual")


def _project(name: str, **overrides: Any) -> EnhancedProject:
    data: dict[str, Any] = {
        "name": name,
        "path": f"/home/dev/code/{name}",
        "relative_path": name,
    }
    data.update(overrides)
    return EnhancedProject(**data)


def _matches(project: EnhancedProject, query: str) -> bool:
    return matches_search(project, parse_search_query(query), [WORK, CLIENT], now=NOW)


def test_text_matches_name_case_insensitively() -> None:
    project = _project("MyApi")

    assert _matches(project, "api")
    assert not _matches(project, "code")


def test_empty_query_matches_everything() -> None:
    assert _matches(_project("anything"), "")


def test_manual_collection_by_name() -> None:
    member = _project("a", collections=["coll_work"])
    other = _project("b", collections=["coll_client"])

    assert _matches(member, "#work")
    assert not _matches(other, "#work")
    assert not _matches(member, "#unknown")


def test_collection_names_match_case_insensitively() -> None:
    member = _project("a", collections=["coll_work"])

    assert _matches(member, "#WORK")


def test_auto_collections_use_last_opened() -> None:
    recent = _project("fresh", last_opened=NOW - 2 * DAY)
    old = _project("old", last_opened=NOW - 120 * DAY)
    never = _project("never")

    assert _matches(recent, "#recent")
    assert not _matches(old, "#recent")
    assert _matches(old, "#stale")
    assert not _matches(never, "#recent")
    assert not _matches(never, "#stale")


def test_uncategorized_matches_projects_without_collections() -> None:
    assert _matches(_project("loose"), "#uncategorized")
    assert not _matches(_project("filed", collections=["coll_work"]), "#uncategorized")


def test_month_window_is_wider_than_recent() -> None:
    recent = _project("fresh", last_opened=NOW - 10 * DAY)

    assert matches_search(recent, parse_search_query("#recent"), [], now=NOW) is False
    assert _matches(recent, "#month")


def test_language_filter_requires_detected_language() -> None:
    ts = _project("web", detected_lang="typescript")
    unknown = _project("mystery")

    assert _matches(ts, "lang:ts")
    assert not _matches(ts, "lang:go")
    assert not _matches(unknown, "lang:ts")


def test_org_filter_is_substring_and_requires_org() -> None:
    project = _project("svc", git_org="Acme-Corp")

    assert _matches(project, "org:acme")
    assert not _matches(project, "org:globex")
    assert not _matches(_project("local"), "org:acme")


def test_in_path_filter_expands_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", "/home/dev")
    project = _project("site")

    assert _matches(project, "in:~/code")
    assert _matches(project, "in:/home/dev")
    assert not _matches(project, "in:~/other")


def test_filters_combine_with_and() -> None:
    project = _project(
        "dashboard", detected_lang="typescript", git_org="acme", collections=["coll_work"]
    )

    assert _matches(project, "#work lang:typescript org:acme dash")
    assert not _matches(project, "#work lang:typescript org:acme admin")


def test_filter_projects_preserves_order() -> None:
    projects = [
        _project("api-gateway", detected_lang="go"),
        _project("web", detected_lang="typescript"),
        _project("api-client", detected_lang="typescript"),
    ]

    matches = filter_projects(projects, "api", [WORK], now=NOW)

    assert [p.name for p in matches] == ["api-gateway", "api-client"]
