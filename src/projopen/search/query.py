"""Parse search strings into free text plus structured filters.

Supported tokens::

    #name         collection (``#recent``, ``#month``, ``#stale`` and
                  ``#uncategorized`` select the auto collections)
    lang:value    detected language, aliases such as ``ts`` or ``golang`` accepted
    org:value     git organization, substring match
    in:path       path prefix, ``~`` expanded at match time

Every other token is free text matched against project names. When a filter
kind appears more than once, the last occurrence wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from projopen.catalog.collections import AutoKind

RESERVED_COLLECTIONS: Dict[str, AutoKind] = {
    "recent": AutoKind.RECENT,
    "stale": AutoKind.STALE,
    "month": AutoKind.MONTH,
    "uncategorized": AutoKind.UNCATEGORIZED,
}

LANGUAGE_ALIASES: Dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "node": "javascript",
    "py": "python",
    "rb": "ruby",
    "rs": "rust",
    "golang": "go",
    "kt": "kotlin",
    "c++": "cpp",
    "cxx": "cpp",
    "cc": "cpp",
    "cs": "csharp",
    "c#": "csharp",
    "dotnet": "csharp",
    "flutter": "dart",
    "ex": "elixir",
    "sc": "scala",
    "php8": "php",
    "ios": "swift",
}


@dataclass(frozen=True)
class ManualCollectionRef:
    """Reference to a collection by (lower-cased) name, resolved at match time."""

    name: str

    def to_token(self) -> str:
        return f"#{self.name}"


@dataclass(frozen=True)
class AutoCollectionRef:
    """Reference to one of the compiled-in auto collections."""

    kind: AutoKind

    def to_token(self) -> str:
        alias = next(name for name, kind in RESERVED_COLLECTIONS.items() if kind is self.kind)
        return f"#{alias}"


CollectionRef = Union[ManualCollectionRef, AutoCollectionRef]


@dataclass
class SearchFilters:
    """Structured predicates extracted from a query."""

    collection: Optional[CollectionRef] = None
    lang: Optional[str] = None
    org: Optional[str] = None
    in_path: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.collection or self.lang or self.org or self.in_path)

    def to_tokens(self) -> List[str]:
        tokens: List[str] = []
        if self.collection is not None:
            tokens.append(self.collection.to_token())
        if self.lang:
            tokens.append(f"lang:{self.lang}")
        if self.org:
            tokens.append(f"org:{self.org}")
        if self.in_path:
            tokens.append(f"in:{self.in_path}")
        return tokens


@dataclass
class ParsedSearch:
    """Result of :func:`parse_search_query`."""

    text: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)

    def to_query(self) -> str:
        """Serialize back into a query string that parses to the same filters."""
        tokens = self.filters.to_tokens()
        if self.text:
            tokens.append(self.text)
        return " ".join(tokens)


def normalize_language(value: str) -> str:
    """Lower-case a language name and map known aliases to canonical ids."""
    lowered = value.lower()
    return LANGUAGE_ALIASES.get(lowered, lowered)


def _collection_ref(name: str) -> Optional[CollectionRef]:
    lowered = name.lower()
    if not lowered:
        return None
    if lowered in RESERVED_COLLECTIONS:
        return AutoCollectionRef(RESERVED_COLLECTIONS[lowered])
    return ManualCollectionRef(lowered)


def parse_search_query(query: str) -> ParsedSearch:
    """Split ``query`` into free text and filters.

    Args:
        query: Raw search string.

    Returns:
        ParsedSearch: Free text joined by single spaces plus the parsed filters.
    """
    filters = SearchFilters()
    text_parts: List[str] = []

    for token in query.split():
        if token.startswith("#"):
            filters.collection = _collection_ref(token[1:])
        elif token.startswith("lang:"):
            filters.lang = normalize_language(token[5:]) or None
        elif token.startswith("org:"):
            filters.org = token[4:].lower() or None
        elif token.startswith("in:"):
            filters.in_path = token[3:] or None
        else:
            text_parts.append(token)

    return ParsedSearch(text=" ".join(text_parts), filters=filters)


__all__ = [
    "AutoCollectionRef",
    "CollectionRef",
    "LANGUAGE_ALIASES",
    "ManualCollectionRef",
    "ParsedSearch",
    "RESERVED_COLLECTIONS",
    "SearchFilters",
    "normalize_language",
    "parse_search_query",
]
