"""Project discovery: marker detection, directory scanning, and source aggregation."""

from .aggregator import find_projects_from_all_sources
from .git import extract_git_org, parse_remote_owner
from .markers import EXCLUDED_DIRS, PROJECT_MARKERS, detect_language, is_project
from .models import EnhancedProject, Project
from .scanner import DirectoryScanner, find_projects

__all__ = [
    "DirectoryScanner",
    "EnhancedProject",
    "EXCLUDED_DIRS",
    "PROJECT_MARKERS",
    "Project",
    "detect_language",
    "extract_git_org",
    "find_projects",
    "find_projects_from_all_sources",
    "is_project",
    "parse_remote_owner",
]
