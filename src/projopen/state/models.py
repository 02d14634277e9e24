"""Persisted data models for sources, collections, and per-project settings."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StoredModel(BaseModel):
    """Base model serialized with the camelCase keys used in the JSON documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_data(self) -> dict[str, Any]:
        """Return a JSON-ready mapping with unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProjectIDE(StoredModel):
    """Editor application used to open a project.

    Attributes:
        path: Application bundle or executable path.
        name: Display name of the editor.
    """

    path: str
    name: str


class SourceDirectory(StoredModel):
    """User-configured scan root.

    Attributes:
        id: Stable identifier generated at creation.
        path: Root directory, possibly ``~``-relative.
        depth: Maximum recursion depth for the scan.
        default_collection: Collection id assigned to projects found here.
        default_ide: Editor used for projects found here when none is set.
    """

    id: str
    path: str
    depth: int = Field(ge=0)
    default_collection: Optional[str] = None
    default_ide: Optional[ProjectIDE] = None


class ManualProject(StoredModel):
    """Single project registered directly rather than through a source."""

    id: str
    path: str
    default_collection: Optional[str] = None
    default_ide: Optional[ProjectIDE] = None
    added_at: int


class ProjectSettings(StoredModel):
    """Per-project customizations keyed by absolute project path.

    Attributes:
        display_name: Name shown instead of the directory name.
        icon: Key from the built-in icon table.
        custom_icon: Path to a copied custom icon image.
        icon_color: Hex color used for the initials icon.
        ide: Editor override for this project.
        collections: Manual collection ids the project belongs to.
        last_opened: Epoch milliseconds of the last open.
    """

    display_name: Optional[str] = None
    icon: Optional[str] = None
    custom_icon: Optional[str] = None
    icon_color: Optional[str] = None
    ide: Optional[ProjectIDE] = None
    collections: Optional[List[str]] = None
    last_opened: Optional[int] = None

    def has_content(self) -> bool:
        """Return whether any field carries a meaningful value."""
        return bool(
            self.display_name
            or self.icon
            or self.custom_icon
            or self.icon_color
            or self.ide
            or self.collections
            or self.last_opened
        )


class AutoCriteria(StoredModel):
    """Membership rule for an auto collection."""

    kind: Literal["recent", "stale", "git-org", "uncategorized"]
    days: Optional[int] = None
    org_name: Optional[str] = None


class Collection(StoredModel):
    """Named group of projects, either user-managed or rule-based.

    Attributes:
        id: Stable identifier generated at creation.
        name: Display name.
        type: ``manual`` for persisted groups, ``auto`` for rule-based ones.
        icon: Key from the built-in icon table.
        color: Tint color.
        criteria: Membership rule for auto collections.
    """

    id: str
    name: str
    type: Literal["manual", "auto"] = "manual"
    icon: Optional[str] = None
    color: Optional[str] = None
    criteria: Optional[AutoCriteria] = None


__all__ = [
    "StoredModel",
    "ProjectIDE",
    "SourceDirectory",
    "ManualProject",
    "ProjectSettings",
    "AutoCriteria",
    "Collection",
]
