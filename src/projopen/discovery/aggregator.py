"""Merge scan results from every configured source directory."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from projopen.paths import expand_path
from projopen.state.models import SourceDirectory

from .models import EnhancedProject
from .scanner import DirectoryScanner, project_sort_key

LOGGER = logging.getLogger(__name__)


def find_projects_from_all_sources(
    sources: Iterable[SourceDirectory],
    scanner: Optional[DirectoryScanner] = None,
) -> List[EnhancedProject]:
    """Scan each source in order and deduplicate by expanded path.

    The first source to report a path wins; later duplicates are dropped. Each
    surviving project carries its source's default collection and id.

    Args:
        sources: Configured sources in declared order.
        scanner: Scanner to use; defaults to the standard rules.

    Returns:
        List[EnhancedProject]: Projects sorted by name.
    """
    scanner = scanner or DirectoryScanner()
    seen: set[str] = set()
    projects: List[EnhancedProject] = []

    for source in sources:
        found = scanner.scan(source.path, source.depth)
        LOGGER.debug("Source %s (%s) yielded %d project(s)", source.id, source.path, len(found))
        for project in found:
            key = expand_path(project.path)
            if key in seen:
                continue
            seen.add(key)
            projects.append(
                EnhancedProject(
                    **project.model_dump(),
                    collections=[source.default_collection] if source.default_collection else [],
                    source_id=source.id,
                )
            )

    return sorted(projects, key=project_sort_key)


__all__ = ["find_projects_from_all_sources"]
