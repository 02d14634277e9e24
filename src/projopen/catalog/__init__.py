"""Collections, recency rules, grouping, and the assembled project catalog."""

from .collections import (
    AUTO_COLLECTIONS,
    AutoKind,
    all_collections,
    find_collection_by_name,
    get_auto_collection,
    matches_auto_collection,
)
from .grouping import GroupedSection, group_projects
from .recency import format_relative_time, is_recent_project, is_stale_project

__all__ = [
    "AUTO_COLLECTIONS",
    "AutoKind",
    "GroupedSection",
    "all_collections",
    "find_collection_by_name",
    "format_relative_time",
    "get_auto_collection",
    "group_projects",
    "is_recent_project",
    "is_stale_project",
    "matches_auto_collection",
]
