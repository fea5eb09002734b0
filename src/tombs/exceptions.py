class TombsError(Exception):
    """Base exception for the Tombs project."""


class GenerationError(TombsError):
    """Raised when a dungeon level cannot be generated (e.g. no room fits)."""


class SaveError(TombsError):
    """Base class for persistence failures."""


class NoSavedGameError(SaveError):
    """Raised when there is no snapshot to load."""


class CorruptSaveError(SaveError):
    """Raised when a snapshot exists but cannot be decoded or validated."""
