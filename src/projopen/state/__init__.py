"""State persistence helpers for the projopen CLI."""

from __future__ import annotations

from pathlib import Path

from projopen.paths import expand_path

from .errors import MissingStateError, StateError, ValidationError
from .models import (
    AutoCriteria,
    Collection,
    ManualProject,
    ProjectIDE,
    ProjectSettings,
    SourceDirectory,
)
from .repositories import (
    CollectionRepository,
    ManualProjectRepository,
    SettingsRepository,
    SourceRepository,
)

DEFAULT_SUPPORT_DIR = "~/.projopen"


class StateRepository:
    """Bundle the repositories that share one support directory."""

    def __init__(self, support_dir: Path | str = DEFAULT_SUPPORT_DIR) -> None:
        """Initialize the repositories.

        Args:
            support_dir: Directory holding the JSON documents; ``~`` is expanded.
        """
        self._support_dir = Path(expand_path(str(support_dir)))
        self.sources = SourceRepository(self._support_dir)
        self.collections = CollectionRepository(self._support_dir)
        self.settings = SettingsRepository(self._support_dir)
        self.manual_projects = ManualProjectRepository(self._support_dir)

    @property
    def support_dir(self) -> Path:
        """Return the directory that stores state documents."""
        return self._support_dir


__all__ = [
    "StateRepository",
    "DEFAULT_SUPPORT_DIR",
    "SourceRepository",
    "CollectionRepository",
    "SettingsRepository",
    "ManualProjectRepository",
    "AutoCriteria",
    "Collection",
    "ManualProject",
    "ProjectIDE",
    "ProjectSettings",
    "SourceDirectory",
    "StateError",
    "MissingStateError",
    "ValidationError",
]
