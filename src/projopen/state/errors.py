"""State management errors."""


class StateError(Exception):
    """Base exception for state repository operations."""


class MissingStateError(StateError):
    """Raised when a persisted document does not exist yet."""


class ValidationError(StateError):
    """Raised when user input is rejected before any document is modified."""
