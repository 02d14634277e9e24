"""One-time conversion of the legacy single-directory preferences."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from projopen.config.models import LegacySettings

from . import StateRepository
from .models import SourceDirectory

LOGGER = logging.getLogger(__name__)

MIGRATION_MARKER = "migration-v2-done"


def _marker_path(state: StateRepository) -> Path:
    return state.support_dir / MIGRATION_MARKER


def needs_migration(state: StateRepository) -> bool:
    """Return True when the marker is absent and no sources are configured."""
    if _marker_path(state).exists():
        return False
    return not state.sources.load()


def migrate_legacy_preferences(
    state: StateRepository,
    projects_directory: str,
    search_depth: Optional[int] = None,
) -> SourceDirectory:
    """Convert the legacy directory and depth into a source and write the marker."""
    source = state.sources.add(
        projects_directory, search_depth if search_depth is not None else 2
    )
    marker = _marker_path(state)
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.write_text(datetime.now(timezone.utc).isoformat(), encoding="utf-8")
    LOGGER.info("Migrated legacy directory %s into source %s", projects_directory, source.id)
    return source


def run_migration_if_needed(
    state: StateRepository, legacy: LegacySettings
) -> Optional[SourceDirectory]:
    """Run the migration at most once, and only when a legacy directory is configured."""
    if not legacy.projects_directory or not needs_migration(state):
        return None
    return migrate_legacy_preferences(state, legacy.projects_directory, legacy.search_depth)


__all__ = [
    "MIGRATION_MARKER",
    "needs_migration",
    "migrate_legacy_preferences",
    "run_migration_if_needed",
]
