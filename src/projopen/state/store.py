"""JSON document persistence used by every repository."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

from .errors import MissingStateError, StateError

LOGGER = logging.getLogger(__name__)


class JsonDocument:
    """A single JSON document on disk with best-effort load semantics."""

    def __init__(self, path: Path, default_factory: Callable[[], Any]) -> None:
        """Initialize the document.

        Args:
            path: Location of the JSON file.
            default_factory: Callable producing the empty value (``list`` or ``dict``).
        """
        self._path = path
        self._default_factory = default_factory

    @property
    def path(self) -> Path:
        """Return the document location."""
        return self._path

    def read(self) -> Any:
        """Read and decode the document.

        Returns:
            Any: Decoded JSON payload.

        Raises:
            MissingStateError: If the file does not exist.
            StateError: If the file cannot be read, decoded, or has the wrong shape.
        """
        if not self._path.exists():
            raise MissingStateError(f"No document found at {self._path}")

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StateError(f"Invalid JSON in {self._path}: {exc}") from exc
        except OSError as exc:
            raise StateError(f"Unable to read {self._path}: {exc}") from exc

        expected = type(self._default_factory())
        if not isinstance(data, expected):
            raise StateError(f"{self._path} must contain a JSON {expected.__name__}.")
        return data

    def load(self) -> Any:
        """Return the decoded document, or the empty default when missing or corrupt."""
        try:
            return self.read()
        except MissingStateError:
            return self._default_factory()
        except StateError as exc:
            LOGGER.debug("Treating %s as empty: %s", self._path, exc)
            return self._default_factory()

    def save(self, data: Any) -> None:
        """Write the document, creating parent directories as needed."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")


__all__ = ["JsonDocument"]
