"""Validated registration of source directories and individual projects."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Tuple

from projopen.discovery import DirectoryScanner, is_project
from projopen.paths import expand_path
from projopen.state import StateRepository, ValidationError
from projopen.state.models import ManualProject, ProjectIDE, SourceDirectory


def ide_from_path(app_path: str) -> ProjectIDE:
    """Build an editor record, naming it after the application bundle."""
    name = Path(app_path.rstrip("/")).name
    if name.endswith(".app"):
        name = name[: -len(".app")]
    return ProjectIDE(path=app_path, name=name)


def resolve_collection_id(state: StateRepository, name_or_id: Optional[str]) -> Optional[str]:
    """Map a manual collection name or id to its id.

    Raises:
        ValidationError: If no manual collection matches.
    """
    if not name_or_id:
        return None
    collection = state.collections.get(name_or_id) or state.collections.find_by_name(name_or_id)
    if collection is None:
        raise ValidationError(f"Unknown collection '{name_or_id}'.")
    return collection.id


def _require_directory(path: str) -> str:
    if not path or not path.strip():
        raise ValidationError("Directory is required.")
    expanded = os.path.abspath(expand_path(path.strip()))
    if not Path(expanded).is_dir():
        raise ValidationError(f"Not a directory: {expanded}")
    return expanded


def register_source(
    state: StateRepository,
    path: str,
    depth: int = 2,
    *,
    collection: Optional[str] = None,
    ide_path: Optional[str] = None,
    scanner: Optional[DirectoryScanner] = None,
) -> Tuple[SourceDirectory, int]:
    """Validate and persist a new source directory.

    Args:
        state: Repositories to write to.
        path: Directory to scan.
        depth: Scan depth.
        collection: Default collection name or id for projects found here.
        ide_path: Default editor for projects found here.
        scanner: Scanner used to check that the directory yields projects.

    Returns:
        Tuple[SourceDirectory, int]: The stored source and the number of projects found.

    Raises:
        ValidationError: If any check fails; nothing is written in that case.
    """
    expanded = _require_directory(path)
    if depth < 0:
        raise ValidationError("Depth must be zero or greater.")
    if state.sources.find_by_path(expanded) is not None:
        raise ValidationError("This source directory has already been added.")
    collection_id = resolve_collection_id(state, collection)

    found = (scanner or DirectoryScanner()).scan(expanded, depth)
    if not found:
        raise ValidationError(f"No projects found at depth {depth}.")

    source = state.sources.add(
        expanded,
        depth,
        default_collection=collection_id,
        default_ide=ide_from_path(ide_path) if ide_path else None,
    )
    return source, len(found)


def register_project(
    state: StateRepository,
    path: str,
    *,
    collection: Optional[str] = None,
    ide_path: Optional[str] = None,
) -> ManualProject:
    """Validate and persist a single project directory.

    Raises:
        ValidationError: If the directory is missing, already added, or has no
            project markers.
    """
    expanded = _require_directory(path)
    if state.manual_projects.contains(expanded):
        raise ValidationError("This project has already been added.")
    if not is_project(Path(expanded)):
        raise ValidationError("No project markers found (.git, package.json, etc.).")
    collection_id = resolve_collection_id(state, collection)

    return state.manual_projects.add(
        expanded,
        default_collection=collection_id,
        default_ide=ide_from_path(ide_path) if ide_path else None,
    )


__all__ = ["ide_from_path", "resolve_collection_id", "register_source", "register_project"]
