"""Repositories for sources, collections, manual projects, and project settings."""

from __future__ import annotations

import hashlib
import logging
import random
import shutil
import string
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError as ModelValidationError

from projopen.paths import expand_path

from .errors import ValidationError
from .models import (
    Collection,
    ManualProject,
    ProjectIDE,
    ProjectSettings,
    SourceDirectory,
    StoredModel,
)
from .store import JsonDocument

LOGGER = logging.getLogger(__name__)

SOURCES_FILENAME = "sources.json"
COLLECTIONS_FILENAME = "collections.json"
SETTINGS_FILENAME = "project-settings.json"
MANUAL_PROJECTS_FILENAME = "manual-projects.json"
CUSTOM_ICONS_DIRNAME = "custom-icons"

CUSTOM_ICON_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".icns"})

ModelT = TypeVar("ModelT", bound=StoredModel)


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_id(prefix: str) -> str:
    """Return an identifier such as ``coll_1718000000000_k3j9xq``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{prefix}_{_now_ms()}_{suffix}"


def _load_records(document: JsonDocument, model: Type[ModelT]) -> List[ModelT]:
    records: List[ModelT] = []
    for index, item in enumerate(document.load()):
        try:
            records.append(model.model_validate(item))
        except ModelValidationError as exc:
            LOGGER.debug("Skipping record %d in %s: %s", index, document.path, exc)
    return records


def _save_records(document: JsonDocument, records: Sequence[StoredModel]) -> None:
    document.save([record.to_json_data() for record in records])


class SourceRepository:
    """Persist the ordered list of configured source directories."""

    def __init__(self, support_dir: Path) -> None:
        self._document = JsonDocument(support_dir / SOURCES_FILENAME, list)

    def load(self) -> List[SourceDirectory]:
        """Return stored sources in declared order."""
        return _load_records(self._document, SourceDirectory)

    def save(self, sources: Sequence[SourceDirectory]) -> None:
        """Replace the stored sources."""
        _save_records(self._document, sources)

    def add(
        self,
        path: str,
        depth: int,
        *,
        default_collection: Optional[str] = None,
        default_ide: Optional[ProjectIDE] = None,
    ) -> SourceDirectory:
        """Append a new source.

        Raises:
            ValidationError: If the depth is negative or the path is already registered.
        """
        if depth < 0:
            raise ValidationError("Depth must be zero or greater.")
        if self.find_by_path(path) is not None:
            raise ValidationError("This source directory has already been added.")

        source = SourceDirectory(
            id=generate_id("src"),
            path=path,
            depth=depth,
            default_collection=default_collection,
            default_ide=default_ide,
        )
        sources = self.load()
        sources.append(source)
        self.save(sources)
        return source

    def update(self, source_id: str, **updates: Any) -> Optional[SourceDirectory]:
        """Apply field updates to a source; the id never changes."""
        updates.pop("id", None)
        sources = self.load()
        for index, source in enumerate(sources):
            if source.id == source_id:
                merged = {**source.model_dump(), **updates}
                sources[index] = SourceDirectory.model_validate(merged)
                self.save(sources)
                return sources[index]
        return None

    def delete(self, source_id: str) -> bool:
        """Remove a source; discovered projects simply stop appearing."""
        sources = self.load()
        remaining = [source for source in sources if source.id != source_id]
        if len(remaining) == len(sources):
            return False
        self.save(remaining)
        return True

    def get(self, source_id: str) -> Optional[SourceDirectory]:
        """Return the source with ``source_id``, if any."""
        return next((source for source in self.load() if source.id == source_id), None)

    def find_by_path(self, path: str) -> Optional[SourceDirectory]:
        """Return the source whose expanded path equals the expanded ``path``."""
        expanded = expand_path(path)
        return next(
            (source for source in self.load() if expand_path(source.path) == expanded),
            None,
        )


class CollectionRepository:
    """Persist manual collections. Auto collections are never written."""

    def __init__(self, support_dir: Path) -> None:
        self._document = JsonDocument(support_dir / COLLECTIONS_FILENAME, list)

    def load(self) -> List[Collection]:
        """Return manual collections in stored order."""
        return [c for c in _load_records(self._document, Collection) if c.type == "manual"]

    def save(self, collections: Sequence[Collection]) -> None:
        """Replace the stored collections, dropping any auto collection."""
        _save_records(self._document, [c for c in collections if c.type == "manual"])

    def create(
        self,
        name: str,
        *,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Collection:
        """Create a manual collection with a freshly generated id.

        Raises:
            ValidationError: If the name is blank or already used by another collection.
        """
        name = name.strip()
        if not name:
            raise ValidationError("Collection name is required.")
        if self.find_by_name(name) is not None:
            raise ValidationError(f"A collection named '{name}' already exists.")

        collection = Collection(
            id=generate_id("coll"), name=name, type="manual", icon=icon, color=color
        )
        collections = self.load()
        collections.append(collection)
        self.save(collections)
        return collection

    def update(self, collection_id: str, **updates: Any) -> Optional[Collection]:
        """Apply updates to a manual collection; id and type are immutable."""
        updates.pop("id", None)
        updates.pop("type", None)
        collections = self.load()
        for index, collection in enumerate(collections):
            if collection.id == collection_id:
                merged = {**collection.model_dump(), **updates}
                collections[index] = Collection.model_validate(merged)
                self.save(collections)
                return collections[index]
        return None

    def delete(self, collection_id: str, settings: "SettingsRepository") -> Optional[int]:
        """Delete a manual collection and prune its id from every project.

        Args:
            collection_id: Identifier of the collection to remove.
            settings: Settings repository holding project memberships.

        Returns:
            Optional[int]: Number of project records modified, or ``None`` when the
            collection does not exist.
        """
        collections = self.load()
        remaining = [c for c in collections if c.id != collection_id]
        if len(remaining) == len(collections):
            return None
        self.save(remaining)
        return settings.remove_collection_from_all(collection_id)

    def get(self, collection_id: str) -> Optional[Collection]:
        """Return the manual collection with ``collection_id``, if any."""
        return next((c for c in self.load() if c.id == collection_id), None)

    def find_by_name(self, name: str) -> Optional[Collection]:
        """Return the manual collection with ``name``, compared case-insensitively."""
        lowered = name.lower()
        return next((c for c in self.load() if c.name.lower() == lowered), None)


class SettingsRepository:
    """Persist per-project settings keyed by absolute project path."""

    def __init__(self, support_dir: Path) -> None:
        self._document = JsonDocument(support_dir / SETTINGS_FILENAME, dict)
        self._icons_dir = support_dir / CUSTOM_ICONS_DIRNAME

    @property
    def icons_dir(self) -> Path:
        """Return the directory holding copied custom icons."""
        return self._icons_dir

    def load_all(self) -> Dict[str, ProjectSettings]:
        """Return every stored settings record, skipping entries that fail validation."""
        store: Dict[str, ProjectSettings] = {}
        for path, data in self._document.load().items():
            try:
                store[path] = ProjectSettings.model_validate(data)
            except ModelValidationError as exc:
                LOGGER.debug("Skipping settings for %s in %s: %s", path, self._document.path, exc)
        return store

    def save_all(self, store: Dict[str, ProjectSettings]) -> None:
        """Write all records, dropping any without content."""
        self._document.save(
            {
                path: settings.to_json_data()
                for path, settings in store.items()
                if settings.has_content()
            }
        )

    def get(self, project_path: str) -> ProjectSettings:
        """Return the settings for a project, or an empty record."""
        return self.load_all().get(project_path) or ProjectSettings()

    def save(self, project_path: str, settings: ProjectSettings) -> None:
        """Store settings for a project, deleting the entry when nothing is set."""
        store = self.load_all()
        if settings.has_content():
            store[project_path] = settings
        else:
            store.pop(project_path, None)
        self.save_all(store)

    def delete(self, project_path: str) -> None:
        """Remove every setting stored for a project."""
        store = self.load_all()
        store.pop(project_path, None)
        self.save_all(store)

    def clear_ide(self, project_path: str) -> None:
        """Remove the editor override for a project."""
        store = self.load_all()
        settings = store.get(project_path)
        if settings is None:
            return
        settings.ide = None
        self.save_all(store)

    def migrate(self, old_path: str, new_path: str) -> None:
        """Move a settings record to a new project path."""
        store = self.load_all()
        settings = store.pop(old_path, None)
        if settings is None:
            return
        store[new_path] = settings
        self.save_all(store)

    def remove_collection_from_all(self, collection_id: str) -> int:
        """Remove a collection id from every project and return the number changed."""
        store = self.load_all()
        cleaned = 0
        for settings in store.values():
            if settings.collections and collection_id in settings.collections:
                settings.collections = [cid for cid in settings.collections if cid != collection_id]
                cleaned += 1

        if cleaned:
            self.save_all(store)
        return cleaned

    def add_to_collection(self, project_path: str, collection_id: str) -> bool:
        """Assign a project to a collection; returns False if it was already a member."""
        settings = self.get(project_path)
        collections = list(settings.collections or [])
        if collection_id in collections:
            return False
        collections.append(collection_id)
        settings.collections = collections
        self.save(project_path, settings)
        return True

    def remove_from_collection(self, project_path: str, collection_id: str) -> bool:
        """Drop a project from a collection; returns False if it was not a member."""
        settings = self.get(project_path)
        collections = list(settings.collections or [])
        if collection_id not in collections:
            return False
        settings.collections = [cid for cid in collections if cid != collection_id]
        self.save(project_path, settings)
        return True

    def touch_last_opened(self, project_path: str, now: Optional[int] = None) -> ProjectSettings:
        """Record that a project was just opened."""
        settings = self.get(project_path)
        settings.last_opened = now if now is not None else _now_ms()
        self.save(project_path, settings)
        return settings

    def copy_custom_icon(self, project_path: str, source_file: str) -> str:
        """Copy an image into the custom icon directory.

        Args:
            project_path: Project the icon belongs to; names the copied file.
            source_file: Image chosen by the user.

        Returns:
            str: Path of the copied icon.

        Raises:
            ValidationError: If the image is missing or has an unsupported extension.
        """
        source = Path(expand_path(source_file))
        extension = source.suffix.lower()
        if extension not in CUSTOM_ICON_EXTENSIONS:
            supported = ", ".join(sorted(CUSTOM_ICON_EXTENSIONS))
            raise ValidationError(
                f"Unsupported icon format '{extension or source.name}'. Use one of: {supported}."
            )
        if not source.is_file():
            raise ValidationError(f"Icon file not found: {source}")

        digest = hashlib.md5(project_path.encode("utf-8")).hexdigest()[:12]
        self._icons_dir.mkdir(parents=True, exist_ok=True)
        destination = self._icons_dir / f"{digest}{extension}"
        shutil.copyfile(source, destination)
        return str(destination)

    def delete_custom_icon(self, icon_path: Optional[str]) -> bool:
        """Delete a previously copied icon; paths outside the icon directory are ignored."""
        if not icon_path:
            return False
        path = Path(icon_path)
        if path.parent != self._icons_dir or not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            LOGGER.warning("Could not delete custom icon %s: %s", path, exc)
            return False
        return True


class ManualProjectRepository:
    """Persist projects registered individually, outside any source."""

    def __init__(self, support_dir: Path) -> None:
        self._document = JsonDocument(support_dir / MANUAL_PROJECTS_FILENAME, list)

    def load(self) -> List[ManualProject]:
        """Return manual projects in the order they were added."""
        return _load_records(self._document, ManualProject)

    def save(self, projects: Sequence[ManualProject]) -> None:
        """Replace the stored manual projects."""
        _save_records(self._document, projects)

    def add(
        self,
        path: str,
        *,
        default_collection: Optional[str] = None,
        default_ide: Optional[ProjectIDE] = None,
    ) -> ManualProject:
        """Register a project directory.

        Raises:
            ValidationError: If the project has already been added.
        """
        if self.contains(path):
            raise ValidationError("This project has already been added.")
        project = ManualProject(
            id=generate_id("manual"),
            path=path,
            default_collection=default_collection,
            default_ide=default_ide,
            added_at=_now_ms(),
        )
        projects = self.load()
        projects.append(project)
        self.save(projects)
        return project

    def update(self, project_id: str, **updates: Any) -> Optional[ManualProject]:
        """Apply field updates to a manual project; id and ``added_at`` never change."""
        updates.pop("id", None)
        updates.pop("added_at", None)
        projects = self.load()
        for index, project in enumerate(projects):
            if project.id == project_id:
                merged = {**project.model_dump(), **updates}
                projects[index] = ManualProject.model_validate(merged)
                self.save(projects)
                return projects[index]
        return None

    def delete(self, project_id: str) -> bool:
        """Remove a manual project; returns False if the id is unknown."""
        projects = self.load()
        remaining = [project for project in projects if project.id != project_id]
        if len(remaining) == len(projects):
            return False
        self.save(remaining)
        return True

    def get(self, project_id: str) -> Optional[ManualProject]:
        """Return the manual project with ``project_id``, if any."""
        return next((project for project in self.load() if project.id == project_id), None)

    def find_by_path(self, path: str) -> Optional[ManualProject]:
        """Return the manual project registered at ``path`` after expansion."""
        expanded = expand_path(path)
        return next(
            (project for project in self.load() if expand_path(project.path) == expanded),
            None,
        )

    def contains(self, path: str) -> bool:
        """Return whether ``path`` is already registered."""
        return self.find_by_path(path) is not None


__all__ = [
    "SourceRepository",
    "CollectionRepository",
    "SettingsRepository",
    "ManualProjectRepository",
    "CUSTOM_ICON_EXTENSIONS",
    "generate_id",
]
