"""Path helpers shared by every component that accepts user-supplied paths."""

from __future__ import annotations

import os
from pathlib import Path


def expand_path(path: str) -> str:
    """Replace a leading ``~`` with the user's home directory.

    Anything else, absolute or relative, is returned unchanged. The path is not
    checked for existence.

    Args:
        path: User-supplied path string.

    Returns:
        str: Expanded path.
    """

    if not path.startswith("~"):
        return path
    home = str(Path.home())
    remainder = path[1:].lstrip("/\\")
    return os.path.join(home, remainder) if remainder else home


__all__ = ["expand_path"]
