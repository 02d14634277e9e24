"""Extract the owning organization from a project's ``origin`` remote."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

LOGGER = logging.getLogger(__name__)

_ORIGIN_URL = re.compile(
    r'^\s*\[remote\s+"origin"\]\s*$(?:(?!^\s*\[).)*?^\s*url\s*=\s*(?P<url>\S+)',
    re.MULTILINE | re.DOTALL,
)
_SSH_REMOTE = re.compile(r"^[\w.-]+@[^:/]+:(?P<owner>[^/]+)/.+$")
_HTTPS_REMOTE = re.compile(r"^https?://(?:[^@/]+@)?[^/]+/(?P<owner>[^/]+)/.+$")


def parse_remote_owner(url: str) -> Optional[str]:
    """Return the owner segment of an SSH or HTTPS remote URL.

    ``git@github.com:my-org/repo.git`` and ``https://gitlab.com/company/project.git``
    both yield their second-level segment. Other shapes yield None.
    """
    for pattern in (_SSH_REMOTE, _HTTPS_REMOTE):
        match = pattern.match(url.strip())
        if match:
            return match.group("owner")
    return None


def extract_git_org(directory: Path | str) -> Optional[str]:
    """Read ``.git/config`` and return the ``origin`` owner, if recognizable.

    Args:
        directory: Project root.

    Returns:
        Optional[str]: Organization or user name, or None when unknown.
    """
    config_path = Path(directory) / ".git" / "config"
    try:
        text = config_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        LOGGER.debug("No readable git config at %s: %s", config_path, exc)
        return None

    match = _ORIGIN_URL.search(text)
    if not match:
        return None
    return parse_remote_owner(match.group("url"))


__all__ = ["extract_git_org", "parse_remote_owner"]
