"""Error taxonomy for the wordbox engine."""


class WordboxError(Exception):
    """Base class for all engine errors."""


class ValidationError(WordboxError, ValueError):
    """Malformed caller input, rejected before any state change."""


class StorageError(WordboxError):
    """A store adapter failed to read or write."""
