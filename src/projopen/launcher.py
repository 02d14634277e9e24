"""Open a project directory in an external editor."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import List, Optional

from projopen.paths import expand_path
from projopen.state.models import ProjectIDE

LOGGER = logging.getLogger(__name__)


class LaunchError(Exception):
    """Raised when an editor cannot be started."""


def is_valid_ide(ide_path: Optional[str]) -> bool:
    """Return True if the editor path exists on disk."""
    return bool(ide_path) and os.path.exists(expand_path(ide_path or ""))


def build_command(
    project_path: str, ide: ProjectIDE, platform: Optional[str] = None
) -> List[str]:
    """Return the argv used to open ``project_path`` with ``ide``.

    macOS editors are application bundles started through ``open -a``; elsewhere
    the editor path is executed directly with the project as its argument.
    """
    ide_path = expand_path(ide.path)
    if (platform or sys.platform) == "darwin":
        return ["open", "-a", ide_path, project_path]
    return [ide_path, project_path]


def launch(project_path: str, ide: ProjectIDE) -> None:
    """Start the editor without waiting for it to exit.

    Raises:
        LaunchError: If the editor process cannot be spawned.
    """
    command = build_command(project_path, ide)
    LOGGER.info("Opening %s with %s", project_path, ide.name or ide.path)
    try:
        subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as exc:
        raise LaunchError(f"Could not start {ide.name or ide.path}: {exc}") from exc


__all__ = ["LaunchError", "is_valid_ide", "build_command", "launch"]
