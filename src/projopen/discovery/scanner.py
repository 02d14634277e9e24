"""Bounded-depth discovery of project roots."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import AbstractSet, Callable, List

from projopen.paths import expand_path

from .markers import EXCLUDED_DIRS, is_project
from .models import Project

LOGGER = logging.getLogger(__name__)


def project_sort_key(project: Project) -> tuple[str, str]:
    """Order projects by name, ignoring case."""
    return (project.name.casefold(), project.name)


class DirectoryScanner:
    """Walk a directory tree and record every project root it finds.

    A directory recognized as a project is never descended into, so nested
    packages inside a project are not reported separately.
    """

    def __init__(
        self,
        *,
        excluded: AbstractSet[str] = EXCLUDED_DIRS,
        matcher: Callable[[Path], bool] = is_project,
    ) -> None:
        self.excluded = excluded
        self.matcher = matcher

    def scan(self, root: str, max_depth: int) -> List[Project]:
        """Return the projects under ``root`` sorted by name.

        Args:
            root: Directory to scan; ``~`` is expanded.
            max_depth: Deepest level that is still listed; 0 inspects only the
                root's immediate children.

        Returns:
            List[Project]: Discovered projects.
        """
        expanded_root = Path(os.path.abspath(expand_path(root)))
        projects: List[Project] = []
        self._visit(expanded_root, expanded_root, 0, max_depth, projects)
        return sorted(projects, key=project_sort_key)

    def _visit(
        self,
        root: Path,
        directory: Path,
        depth: int,
        max_depth: int,
        projects: List[Project],
    ) -> None:
        if depth > max_depth:
            return

        try:
            entries = self._list_directory(directory)
        except OSError as exc:
            LOGGER.debug("Skipping %s (%s): %s", directory, type(exc).__name__, exc)
            return

        for entry in entries:
            if entry.name.startswith(".") or entry.name in self.excluded:
                continue
            try:
                if not entry.is_dir():
                    continue
                found = self.matcher(entry)
            except OSError as exc:
                LOGGER.debug("Skipping %s (%s): %s", entry, type(exc).__name__, exc)
                continue

            if found:
                relative = os.path.relpath(entry, root)
                projects.append(
                    Project(
                        name=entry.name,
                        path=str(entry),
                        relative_path=relative if relative not in ("", ".") else entry.name,
                    )
                )
            elif depth < max_depth:
                self._visit(root, entry, depth + 1, max_depth, projects)

    def _list_directory(self, directory: Path) -> List[Path]:
        """List a directory, raising ``OSError`` for permission or race failures."""
        return list(directory.iterdir())


def find_projects(root: str, max_depth: int) -> List[Project]:
    """Scan ``root`` with the default exclusion rules and project markers."""
    return DirectoryScanner().scan(root, max_depth)


__all__ = ["DirectoryScanner", "find_projects", "project_sort_key"]
