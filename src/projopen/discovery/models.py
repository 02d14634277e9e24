"""Data models produced by project discovery."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class Project(BaseModel):
    """A project directory observed during a scan.

    Attributes:
        name: Directory name.
        path: Absolute path; identifies the project.
        relative_path: Path relative to the scanned root.
    """

    name: str
    path: str
    relative_path: str


class EnhancedProject(Project):
    """A project joined with persisted membership and detected metadata.

    Attributes:
        collections: Manual collection ids the project belongs to.
        last_opened: Epoch milliseconds of the last open.
        source_id: Source directory that discovered the project.
        detected_lang: Canonical language id inferred from marker files.
        git_org: Owner segment of the ``origin`` remote.
    """

    collections: List[str] = Field(default_factory=list)
    last_opened: Optional[int] = None
    source_id: Optional[str] = None
    detected_lang: Optional[str] = None
    git_org: Optional[str] = None


__all__ = ["Project", "EnhancedProject"]
