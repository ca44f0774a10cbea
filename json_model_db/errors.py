from __future__ import annotations


class JsonDbError(Exception):
    """Base class for json_model_db errors."""


class ModelNotSelectedError(JsonDbError):
    """Raised when a record operation runs before a model was selected."""


class MissingIdError(JsonDbError):
    """Raised when a record has no usable id."""


class CorruptRecordError(JsonDbError):
    """Raised when a record file exists but does not hold valid JSON."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        msg = f"corrupt record file: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class PathConflictError(JsonDbError):
    """Raised when a dotted path runs through a value that is not an object."""


class RecordTypeError(JsonDbError):
    """Raised when a document cannot be converted to or from the record type."""


class StorageError(JsonDbError):
    """Raised when the underlying file system operation fails."""
