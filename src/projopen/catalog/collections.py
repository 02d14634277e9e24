"""Auto collection definitions and their membership rules."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence

from projopen.discovery.models import EnhancedProject
from projopen.state.models import AutoCriteria, Collection

from .recency import DAY, now_ms


class AutoKind(str, Enum):
    """Identifiers of the compiled-in auto collections."""

    RECENT = "_recent"
    MONTH = "_month"
    STALE = "_stale"
    UNCATEGORIZED = "_uncategorized"


AUTO_COLLECTIONS: tuple[Collection, ...] = (
    Collection(
        id=AutoKind.RECENT.value,
        name="Recent",
        type="auto",
        icon="Clock",
        criteria=AutoCriteria(kind="recent", days=7),
    ),
    Collection(
        id=AutoKind.MONTH.value,
        name="This Month",
        type="auto",
        icon="Calendar",
        criteria=AutoCriteria(kind="recent", days=30),
    ),
    Collection(
        id=AutoKind.STALE.value,
        name="Stale",
        type="auto",
        icon="ExclamationMark",
        criteria=AutoCriteria(kind="stale", days=90),
    ),
    Collection(
        id=AutoKind.UNCATEGORIZED.value,
        name="Uncategorized",
        type="auto",
        icon="QuestionMark",
        criteria=AutoCriteria(kind="uncategorized"),
    ),
)


def get_auto_collection(kind: AutoKind) -> Collection:
    """Return the auto collection definition for ``kind``."""
    return next(collection for collection in AUTO_COLLECTIONS if collection.id == kind.value)


def all_collections(manual: Iterable[Collection]) -> List[Collection]:
    """Return manual collections followed by the auto collections."""
    return [*manual, *AUTO_COLLECTIONS]


def find_collection_by_name(
    name: str, collections: Sequence[Collection]
) -> Optional[Collection]:
    """Case-insensitive name lookup across the given collections."""
    lowered = name.lower()
    return next((c for c in collections if c.name.lower() == lowered), None)


def matches_auto_collection(
    project: EnhancedProject, collection: Collection, now: Optional[int] = None
) -> bool:
    """Return whether ``project`` satisfies an auto collection's criteria.

    Manual collections, collections without criteria, and unknown kinds never match.
    A missing ``last_opened`` fails both the recent and stale rules.
    """
    if collection.type != "auto" or collection.criteria is None:
        return False

    criteria = collection.criteria
    cutoff = (now if now is not None else now_ms()) - (criteria.days or 0) * DAY

    if criteria.kind == "recent":
        return project.last_opened is not None and project.last_opened >= cutoff
    if criteria.kind == "stale":
        return project.last_opened is not None and project.last_opened < cutoff
    if criteria.kind == "git-org":
        return project.git_org is not None and project.git_org == criteria.org_name
    if criteria.kind == "uncategorized":
        return not project.collections
    return False


def collection_names(project: EnhancedProject, collections: Sequence[Collection]) -> List[str]:
    """Return the names of the manual collections a project belongs to."""
    names = {c.id: c.name for c in collections if c.type == "manual"}
    return [names[cid] for cid in project.collections if cid in names]


__all__ = [
    "AutoKind",
    "AUTO_COLLECTIONS",
    "get_auto_collection",
    "all_collections",
    "find_collection_by_name",
    "matches_auto_collection",
    "collection_names",
]
