"""Group filtered projects into display sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence, TypeVar

from projopen.discovery.models import EnhancedProject
from projopen.state.models import Collection

from .recency import is_recent_project

GroupingMode = Literal["collection", "recency", "flat"]
GROUPING_MODES: tuple[GroupingMode, ...] = ("collection", "recency", "flat")

ProjectT = TypeVar("ProjectT", bound=EnhancedProject)


@dataclass
class GroupedSection:
    """A titled run of projects in a listing."""

    title: str
    projects: List[EnhancedProject] = field(default_factory=list)
    is_auto: bool = True
    collection_icon: Optional[str] = None
    collection_color: Optional[str] = None


def group_projects(
    projects: Sequence[ProjectT],
    mode: GroupingMode,
    collections: Sequence[Collection] = (),
    now: Optional[int] = None,
) -> List[GroupedSection]:
    """Split projects into sections according to ``mode``.

    ``collection`` lists Recent first, then each manual collection in stored
    order, then Uncategorized, placing every project in exactly one section.
    ``recency`` splits into Recent and Other; ``flat`` returns a single section.
    Empty sections are omitted.
    """
    if mode == "flat":
        return [GroupedSection(title="All Projects", projects=list(projects))]

    if mode == "recency":
        recent = [p for p in projects if is_recent_project(p.last_opened, now)]
        rest = [p for p in projects if not is_recent_project(p.last_opened, now)]
        sections = [
            GroupedSection(title="Recent", projects=list(recent)),
            GroupedSection(title="Other", projects=list(rest)),
        ]
        return [section for section in sections if section.projects]

    sections = []
    assigned: set[str] = set()

    recent = [p for p in projects if is_recent_project(p.last_opened, now)]
    if recent:
        sections.append(GroupedSection(title="Recent", projects=list(recent)))
        assigned.update(p.path for p in recent)

    for collection in collections:
        if collection.type != "manual":
            continue
        members = [
            p for p in projects if p.path not in assigned and collection.id in p.collections
        ]
        if members:
            sections.append(
                GroupedSection(
                    title=collection.name,
                    projects=list(members),
                    is_auto=False,
                    collection_icon=collection.icon,
                    collection_color=collection.color,
                )
            )
            assigned.update(p.path for p in members)

    leftover = [p for p in projects if p.path not in assigned]
    if leftover:
        sections.append(GroupedSection(title="Uncategorized", projects=list(leftover)))

    return sections


__all__ = ["GroupedSection", "GroupingMode", "GROUPING_MODES", "group_projects"]
