"""Tests for the legacy single-directory migration."""

from __future__ import annotations

from pathlib import Path

from projopen.config.models import LegacySettings
from projopen.state import StateRepository
from projopen.state.migration import (
    MIGRATION_MARKER,
    migrate_legacy_preferences,
    needs_migration,
    run_migration_if_needed,
)


def test_migration_creates_source_and_marker(tmp_path: Path) -> None:
    state = StateRepository(tmp_path / "support")

    source = run_migration_if_needed(
        state, LegacySettings(projects_directory="~/Projects", search_depth=3)
    )

    assert source is not None
    assert source.path == "~/Projects"
    assert source.depth == 3
    assert (state.support_dir / MIGRATION_MARKER).exists()
    assert not needs_migration(state)


def test_migration_runs_once(tmp_path: Path) -> None:
    state = StateRepository(tmp_path / "support")
    legacy = LegacySettings(projects_directory="~/Projects")

    first = run_migration_if_needed(state, legacy)
    state.sources.delete(first.id)  # type: ignore[union-attr]
    second = run_migration_if_needed(state, legacy)

    assert first is not None
    assert second is None
    assert state.sources.load() == []


def test_migration_skipped_without_legacy_directory(tmp_path: Path) -> None:
    state = StateRepository(tmp_path / "support")

    assert run_migration_if_needed(state, LegacySettings()) is None
    assert not (state.support_dir / MIGRATION_MARKER).exists()


def test_migration_skipped_when_sources_exist(tmp_path: Path) -> None:
    state = StateRepository(tmp_path / "support")
    state.sources.add("/srv/code", 1)

    assert not needs_migration(state)
    assert run_migration_if_needed(state, LegacySettings(projects_directory="~/P")) is None


def test_migrate_defaults_depth_to_two(tmp_path: Path) -> None:
    state = StateRepository(tmp_path / "support")

    source = migrate_legacy_preferences(state, "~/Projects")

    assert source.depth == 2
