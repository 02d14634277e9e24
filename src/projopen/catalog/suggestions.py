"""Search-filter completions derived from the current project set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from projopen.discovery.models import EnhancedProject
from projopen.search.query import RESERVED_COLLECTIONS
from projopen.state.models import Collection

from .collections import AutoKind, get_auto_collection


@dataclass(frozen=True)
class SearchSuggestion:
    """A filter token the user can add to a query."""

    title: str
    filter: str
    subtitle: Optional[str] = None


def search_suggestions(
    projects: Sequence[EnhancedProject],
    collections: Sequence[Collection],
    prefix: str = "",
) -> List[SearchSuggestion]:
    """Return collection, language, and organization filters in use.

    Args:
        projects: Projects the suggestions are drawn from.
        collections: Manual collections available for ``#name`` filters.
        prefix: Only suggestions whose filter starts with this text are returned.
    """
    suggestions: List[SearchSuggestion] = []

    for alias, kind in RESERVED_COLLECTIONS.items():
        collection = get_auto_collection(AutoKind(kind))
        suggestions.append(
            SearchSuggestion(
                title=collection.name, filter=f"#{alias}", subtitle="Auto collection"
            )
        )

    for collection in collections:
        if collection.type != "manual" or any(ch.isspace() for ch in collection.name):
            continue
        suggestions.append(
            SearchSuggestion(
                title=collection.name,
                filter=f"#{collection.name.lower()}",
                subtitle="Collection",
            )
        )

    languages = sorted({p.detected_lang for p in projects if p.detected_lang})
    for language in languages:
        count = sum(1 for p in projects if p.detected_lang == language)
        suggestions.append(
            SearchSuggestion(
                title=language, filter=f"lang:{language}", subtitle=f"{count} project(s)"
            )
        )

    orgs = sorted({p.git_org.lower() for p in projects if p.git_org})
    for org in orgs:
        count = sum(1 for p in projects if p.git_org and p.git_org.lower() == org)
        suggestions.append(
            SearchSuggestion(title=org, filter=f"org:{org}", subtitle=f"{count} project(s)")
        )

    lowered = prefix.lower()
    return [s for s in suggestions if s.filter.lower().startswith(lowered)]


__all__ = ["SearchSuggestion", "search_suggestions"]
