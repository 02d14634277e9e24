"""Search query parsing and matching for projopen."""

from .matcher import filter_projects, matches_search
from .query import (
    AutoCollectionRef,
    CollectionRef,
    ManualCollectionRef,
    ParsedSearch,
    SearchFilters,
    parse_search_query,
)

__all__ = [
    "AutoCollectionRef",
    "CollectionRef",
    "ManualCollectionRef",
    "ParsedSearch",
    "SearchFilters",
    "filter_projects",
    "matches_search",
    "parse_search_query",
]
