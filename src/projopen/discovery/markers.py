"""Marker-file heuristics for recognizing project roots and their language."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

LOGGER = logging.getLogger(__name__)

PROJECT_MARKERS: Tuple[str, ...] = (
    ".git",
    "package.json",
    "Cargo.toml",
    "go.mod",
    "pyproject.toml",
    "Makefile",
    "pom.xml",
    "build.gradle",
    "CMakeLists.txt",
    "Gemfile",
    "composer.json",
    "Package.swift",
    "pubspec.yaml",
    "mix.exs",
    "build.sbt",
    "requirements.txt",
)

EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        "vendor",
        "target",
        ".next",
        ".venv",
        "venv",
        "__pycache__",
        ".cache",
        "coverage",
        ".turbo",
        ".output",
    }
)

# First match wins; Cargo.toml beats package.json for mixed projects such as Tauri.
LANGUAGE_MARKERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("rust", ("Cargo.toml",)),
    ("go", ("go.mod",)),
    ("swift", ("Package.swift",)),
    ("dart", ("pubspec.yaml",)),
    ("elixir", ("mix.exs",)),
    ("scala", ("build.sbt",)),
    ("ruby", ("Gemfile",)),
    ("php", ("composer.json",)),
    ("java", ("pom.xml",)),
    ("kotlin", ("build.gradle",)),
    ("cpp", ("CMakeLists.txt",)),
    ("python", ("pyproject.toml", "requirements.txt", "setup.py")),
)

DOTNET_SUFFIXES = (".csproj", ".sln")


def is_project(directory: Path | str) -> bool:
    """Return True if any project marker exists inside ``directory``."""
    base = Path(directory)
    return any((base / marker).exists() for marker in PROJECT_MARKERS)


def _has_dotnet_marker(directory: Path) -> bool:
    try:
        return any(entry.name.endswith(DOTNET_SUFFIXES) for entry in directory.iterdir())
    except OSError as exc:
        LOGGER.debug("Cannot list %s for .NET markers: %s", directory, exc)
        return False


def detect_language(directory: Path | str) -> Optional[str]:
    """Infer the primary language of a project from its marker files.

    Args:
        directory: Project root to inspect.

    Returns:
        Optional[str]: Canonical language id, or None when nothing matches.
    """
    base = Path(directory)
    for language, markers in LANGUAGE_MARKERS:
        if any((base / marker).exists() for marker in markers):
            return language

    if _has_dotnet_marker(base):
        return "csharp"

    if (base / "package.json").exists():
        return "typescript" if (base / "tsconfig.json").exists() else "javascript"

    return None


__all__ = [
    "PROJECT_MARKERS",
    "EXCLUDED_DIRS",
    "LANGUAGE_MARKERS",
    "is_project",
    "detect_language",
]
