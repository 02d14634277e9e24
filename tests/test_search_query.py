"""Tests for search query parsing."""

from __future__ import annotations

import pytest

from projopen.catalog import AutoKind
from projopen.search import (
    AutoCollectionRef,
    ManualCollectionRef,
    ParsedSearch,
    SearchFilters,
    parse_search_query,
)
from projopen.search.query import normalize_language


def test_parse_collection_language_and_text() -> None:
    parsed = parse_search_query("#work lang:typescript api")

    assert parsed.text == "api"
    assert parsed.filters.collection == ManualCollectionRef("work")
    assert parsed.filters.lang == "typescript"
    assert parsed.filters.org is None
    assert parsed.filters.in_path is None


@pytest.mark.parametrize(
    ("token", "kind"),
    [
        ("#recent", AutoKind.RECENT),
        ("#Stale", AutoKind.STALE),
        ("#month", AutoKind.MONTH),
        ("#uncategorized", AutoKind.UNCATEGORIZED),
    ],
)
def test_parse_reserved_collection_aliases(token: str, kind: AutoKind) -> None:
    assert parse_search_query(token).filters.collection == AutoCollectionRef(kind)


def test_parse_lowercases_manual_collection_names() -> None:
    assert parse_search_query("#Client").filters.collection == ManualCollectionRef("client")


@pytest.mark.parametrize(
    ("alias", "canonical"),
    [
        ("ts", "typescript"),
        ("TSX", "typescript"),
        ("golang", "go"),
        ("c++", "cpp"),
        ("c#", "csharp"),
        ("dotnet", "csharp"),
        ("node", "javascript"),
        ("flutter", "dart"),
        ("Python", "python"),
        ("zig", "zig"),
    ],
)
def test_normalize_language_aliases(alias: str, canonical: str) -> None:
    assert normalize_language(alias) == canonical
    assert parse_search_query(f"lang:{alias}").filters.lang == canonical


def test_parse_org_lowercased_and_path_kept_verbatim() -> None:
    parsed = parse_search_query("org:MyOrg in:~/Code/Work")

    assert parsed.filters.org == "myorg"
    assert parsed.filters.in_path == "~/Code/Work"
    assert parsed.text == ""


def test_parse_collapses_whitespace_in_free_text() -> None:
    parsed = parse_search_query("  my   cool\tapp  ")

    assert parsed.text == "my cool app"
    assert parsed.filters.is_empty()


def test_parse_last_occurrence_wins() -> None:
    parsed = parse_search_query("lang:go #work lang:rs #recent")

    assert parsed.filters.lang == "rust"
    assert parsed.filters.collection == AutoCollectionRef(AutoKind.RECENT)


def test_parse_empty_filter_value_clears_filter() -> None:
    parsed = parse_search_query("lang:go lang: #")

    assert parsed.filters.lang is None
    assert parsed.filters.collection is None


@pytest.mark.parametrize(
    "query",
    [
        "#work lang:typescript api",
        "in:~/code org:acme #stale server side",
        "#uncategorized",
        "lang:ts org:Foo",
    ],
)
def test_filters_round_trip_through_tokens(query: str) -> None:
    parsed = parse_search_query(query)

    reparsed = parse_search_query(parsed.to_query())

    assert reparsed.filters == parsed.filters
    assert reparsed.text == parsed.text


def test_to_query_places_filters_before_text() -> None:
    parsed = ParsedSearch(
        text="api", filters=SearchFilters(collection=ManualCollectionRef("work"), lang="go")
    )

    assert parsed.to_query() == "#work lang:go api"
