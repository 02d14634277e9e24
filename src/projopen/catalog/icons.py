"""Icon names, color palette, and initials used to decorate projects."""

from __future__ import annotations

import random
import re
from typing import Optional, Tuple

# Ordered (key, label) pairs; the empty key stands for the default folder icon.
ICON_CHOICES: Tuple[Tuple[str, str], ...] = (
    ("", "Default (Folder)"),
    ("AppWindow", "App Window"),
    ("Bolt", "Bolt"),
    ("Book", "Book"),
    ("Box", "Box"),
    ("Bug", "Bug"),
    ("Calendar", "Calendar"),
    ("Clock", "Clock"),
    ("Cloud", "Cloud"),
    ("Code", "Code"),
    ("CodeBlock", "Code Block"),
    ("Cog", "Cog"),
    ("Desktop", "Desktop"),
    ("Document", "Document"),
    ("ExclamationMark", "Exclamation Mark"),
    ("Folder", "Folder"),
    ("Gear", "Gear"),
    ("Globe", "Globe"),
    ("Hammer", "Hammer"),
    ("Heart", "Heart"),
    ("House", "House"),
    ("Layers", "Layers"),
    ("Leaf", "Leaf"),
    ("LightBulb", "Light Bulb"),
    ("Lock", "Lock"),
    ("Mobile", "Mobile"),
    ("QuestionMark", "Question Mark"),
    ("Rocket", "Rocket"),
    ("Star", "Star"),
    ("Terminal", "Terminal"),
    ("Wrench", "Wrench"),
)

ICON_COLORS: Tuple[Tuple[str, str], ...] = (
    ("Red", "#E53935"),
    ("Pink", "#D81B60"),
    ("Purple", "#8E24AA"),
    ("Deep Purple", "#5E35B1"),
    ("Indigo", "#3949AB"),
    ("Blue", "#1E88E5"),
    ("Teal", "#00897B"),
    ("Green", "#43A047"),
    ("Orange", "#FB8C00"),
    ("Deep Orange", "#F4511E"),
    ("Brown", "#6D4C41"),
    ("Blue Grey", "#546E7A"),
)

_PREFIX = re.compile(r"^(the-|my-|@[\w-]+/)", re.IGNORECASE)
_SEPARATORS = re.compile(r"[-_\s]+")
_HUMPS = re.compile(r"[A-Z][a-z]+|[a-z]+")


def is_known_icon(key: str) -> bool:
    return any(choice == key for choice, _ in ICON_CHOICES)


def resolve_icon_color(value: str) -> Optional[str]:
    """Return a hex color for a palette name or hex value, or None if unknown."""
    lowered = value.strip().lower()
    for name, hex_value in ICON_COLORS:
        if lowered in (name.lower(), hex_value.lower()):
            return hex_value
    return None


def random_icon_color() -> str:
    """Pick a palette color for a newly discovered project."""
    return random.choice(ICON_COLORS)[1]


def get_project_initials(name: str) -> str:
    """Return up to two upper-case initials for a project name.

    Hyphenated or underscored names use the first letter of the first two parts,
    camelCase names the first two humps, anything else its first two characters.
    """
    cleaned = _PREFIX.sub("", name)

    parts = [part for part in _SEPARATORS.split(cleaned) if part]
    if len(parts) >= 2:
        return (parts[0][0] + parts[1][0]).upper()

    humps = _HUMPS.findall(cleaned)
    if len(humps) >= 2:
        return (humps[0][0] + humps[1][0]).upper()

    return cleaned[:2].upper()


__all__ = [
    "ICON_CHOICES",
    "ICON_COLORS",
    "is_known_icon",
    "resolve_icon_color",
    "random_icon_color",
    "get_project_initials",
]
