"""Evaluate parsed queries against enhanced projects."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, TypeVar, Union

from projopen.catalog.collections import (
    all_collections,
    find_collection_by_name,
    get_auto_collection,
    matches_auto_collection,
)
from projopen.discovery.models import EnhancedProject
from projopen.paths import expand_path
from projopen.state.models import Collection

from .query import AutoCollectionRef, CollectionRef, ParsedSearch, parse_search_query

ProjectT = TypeVar("ProjectT", bound=EnhancedProject)


def _matches_collection(
    project: EnhancedProject,
    ref: CollectionRef,
    collections: Sequence[Collection],
    now: Optional[int],
) -> bool:
    if isinstance(ref, AutoCollectionRef):
        return matches_auto_collection(project, get_auto_collection(ref.kind), now)

    pool = all_collections(c for c in collections if c.type == "manual")
    collection = find_collection_by_name(ref.name, pool)
    if collection is None:
        return False
    if collection.type == "manual":
        return collection.id in project.collections
    return matches_auto_collection(project, collection, now)


def matches_search(
    project: EnhancedProject,
    query: ParsedSearch,
    collections: Sequence[Collection] = (),
    now: Optional[int] = None,
) -> bool:
    """Return True when ``project`` satisfies every predicate in ``query``.

    Args:
        project: Project to test.
        query: Parsed query.
        collections: Manual collections used to resolve ``#name`` filters.
        now: Reference time in epoch milliseconds for recency rules.
    """
    if query.text and query.text.lower() not in project.name.lower():
        return False

    filters = query.filters
    if filters.collection is not None and not _matches_collection(
        project, filters.collection, collections, now
    ):
        return False

    if filters.lang:
        if project.detected_lang is None or project.detected_lang.lower() != filters.lang:
            return False

    if filters.org:
        if project.git_org is None or filters.org not in project.git_org.lower():
            return False

    if filters.in_path:
        if not project.path.startswith(expand_path(filters.in_path)):
            return False

    return True


def filter_projects(
    projects: Iterable[ProjectT],
    query: Union[str, ParsedSearch],
    collections: Sequence[Collection] = (),
    now: Optional[int] = None,
) -> List[ProjectT]:
    """Return the projects matching ``query``, preserving order."""
    parsed = parse_search_query(query) if isinstance(query, str) else query
    return [p for p in projects if matches_search(p, parsed, collections, now)]


__all__ = ["matches_search", "filter_projects"]
