"""Assemble the project list shown to the user from scans and persisted settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import Field

from projopen.config.models import ProjopenConfig
from projopen.discovery import (
    DirectoryScanner,
    EnhancedProject,
    detect_language,
    extract_git_org,
    find_projects_from_all_sources,
    is_project,
)
from projopen.discovery.scanner import project_sort_key
from projopen.launcher import LaunchError, is_valid_ide, launch
from projopen.paths import expand_path
from projopen.state import StateRepository
from projopen.state.models import ProjectIDE, ProjectSettings

from .icons import random_icon_color

LOGGER = logging.getLogger(__name__)


class ProjectWithSettings(EnhancedProject):
    """A project ready for display.

    Attributes:
        settings: Persisted customizations for the project.
        missing: True when settings exist but the directory was not found.
        has_invalid_ide: True when the project's editor override no longer exists.
        default_ide: Editor inherited from the source or manual registration.
    """

    settings: ProjectSettings = Field(default_factory=ProjectSettings)
    missing: bool = False
    has_invalid_ide: bool = False
    default_ide: Optional[ProjectIDE] = None

    @property
    def display_name(self) -> str:
        return self.settings.display_name or self.name


class ProjectCatalog:
    """Scan every source, merge settings, and resolve how projects are opened."""

    def __init__(
        self,
        state: StateRepository,
        config: ProjopenConfig,
        *,
        scanner: Optional[DirectoryScanner] = None,
    ) -> None:
        self.state = state
        self.config = config
        self.scanner = scanner or DirectoryScanner()

    def discover(self) -> tuple[List[EnhancedProject], Dict[str, ProjectIDE]]:
        """Return discovered projects plus the default editor inherited by each path."""
        sources = self.state.sources.load()
        projects = find_projects_from_all_sources(sources, self.scanner)
        source_ides = {source.id: source.default_ide for source in sources if source.default_ide}
        default_ides = {
            project.path: source_ides[project.source_id]
            for project in projects
            if project.source_id in source_ides
        }

        seen = {expand_path(project.path) for project in projects}
        for manual in self.state.manual_projects.load():
            path = os.path.abspath(expand_path(manual.path))
            if path in seen or not Path(path).is_dir() or not is_project(Path(path)):
                continue
            seen.add(path)
            name = Path(path).name
            projects.append(
                EnhancedProject(
                    name=name,
                    path=path,
                    relative_path=name,
                    collections=[manual.default_collection] if manual.default_collection else [],
                    source_id=manual.id,
                )
            )
            if manual.default_ide:
                default_ides[path] = manual.default_ide

        projects.sort(key=project_sort_key)
        return projects, default_ides

    def load(self) -> List[ProjectWithSettings]:
        """Build the display list.

        Projects seen for the first time without an icon color get a random one,
        which is persisted. Settings records whose path was not discovered are
        appended as missing projects. Present projects sort before missing ones.
        """
        discovered, default_ides = self.discover()
        all_settings = self.state.settings.load_all()
        discovered_paths = {project.path for project in discovered}

        results: List[ProjectWithSettings] = []
        for project in discovered:
            settings = all_settings.get(project.path) or ProjectSettings()
            if not settings.icon_color:
                settings = settings.model_copy(update={"icon_color": random_icon_color()})
                self.state.settings.save(project.path, settings)

            results.append(
                ProjectWithSettings(
                    **project.model_dump(include={"name", "path", "relative_path", "source_id"}),
                    collections=settings.collections
                    if settings.collections is not None
                    else project.collections,
                    last_opened=settings.last_opened,
                    detected_lang=detect_language(project.path),
                    git_org=extract_git_org(project.path),
                    settings=settings,
                    missing=False,
                    has_invalid_ide=bool(settings.ide) and not is_valid_ide(settings.ide.path),
                    default_ide=default_ides.get(project.path),
                )
            )

        for path, settings in all_settings.items():
            if path in discovered_paths:
                continue
            name = Path(path).name or path
            results.append(
                ProjectWithSettings(
                    name=name,
                    path=path,
                    relative_path=path,
                    collections=settings.collections or [],
                    last_opened=settings.last_opened,
                    settings=settings,
                    missing=True,
                    has_invalid_ide=bool(settings.ide) and not is_valid_ide(settings.ide.path),
                )
            )

        results.sort(key=lambda project: (project.missing, *project_sort_key(project)))
        LOGGER.debug(
            "Loaded %d project(s), %d missing",
            len(results),
            sum(1 for project in results if project.missing),
        )
        return results

    def find(
        self, name_or_path: str, projects: Optional[List[ProjectWithSettings]] = None
    ) -> Optional[ProjectWithSettings]:
        """Locate a project by path, then by case-insensitive name or display name."""
        projects = projects if projects is not None else self.load()
        target = os.path.abspath(expand_path(name_or_path))
        for project in projects:
            if project.path == target:
                return project

        lowered = name_or_path.lower()
        for project in projects:
            if lowered in (project.name.lower(), project.display_name.lower()):
                return project
        return None

    def resolve_ide(self, project: ProjectWithSettings) -> Optional[ProjectIDE]:
        """Pick the editor: project override, then inherited default, then global."""
        if project.settings.ide:
            return project.settings.ide
        if project.default_ide:
            return project.default_ide
        if self.config.ide.path:
            return ProjectIDE(path=self.config.ide.path, name=self.config.ide.name)
        return None

    def open(
        self,
        project: ProjectWithSettings,
        *,
        ide: Optional[ProjectIDE] = None,
        launcher: Callable[[str, ProjectIDE], None] = launch,
        now: Optional[int] = None,
    ) -> ProjectIDE:
        """Record the open and hand the project to its editor.

        Raises:
            LaunchError: If no editor is configured or it cannot be started.
        """
        editor = ide or self.resolve_ide(project)
        if editor is None:
            raise LaunchError("No editor configured. Set one with `projopen config set ide.path`.")

        self.state.settings.touch_last_opened(project.path, now)
        launcher(project.path, editor)
        return editor


__all__ = ["ProjectCatalog", "ProjectWithSettings"]
