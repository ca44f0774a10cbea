from .config import StoreConfig
from .database import JsonDatabase
from .errors import (
    JsonDbError,
    ModelNotSelectedError,
    MissingIdError,
    CorruptRecordError,
    PathConflictError,
    RecordTypeError,
    StorageError,
)
from .paths import ABSENT, get_nested, json_equal, matches, merge_patch, set_nested, split_path
from .record import Identifiable, Record, RecordCodec

__all__ = [
    "JsonDatabase",
    "StoreConfig",
    "Record",
    "RecordCodec",
    "Identifiable",
    "JsonDbError",
    "ModelNotSelectedError",
    "MissingIdError",
    "CorruptRecordError",
    "PathConflictError",
    "RecordTypeError",
    "StorageError",
    "ABSENT",
    "get_nested",
    "set_nested",
    "merge_patch",
    "matches",
    "json_equal",
    "split_path",
]

__version__ = "0.1.0"
