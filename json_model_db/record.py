from __future__ import annotations
import copy
import dataclasses
from typing import Any, Dict, Optional, Protocol, Type, runtime_checkable

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import MissingIdError, RecordTypeError


@runtime_checkable
class Identifiable(Protocol):
    """Anything stored in a JsonDatabase must expose its id."""
    def get_id(self) -> str: ...


class Record(dict):
    """
    Default record type: a plain JSON object whose id lives under "id".
    """
    __slots__ = ()

    @property
    def id(self) -> Optional[str]:
        return self.get("id")

    def get_id(self) -> str:
        rid = self.get("id")
        return rid if isinstance(rid, str) else ""


class RecordCodec:
    """
    Converts between a concrete record type and a generic JSON document.

    Supported record types:
      - dict subclasses (Record and friends)
      - pydantic BaseModel subclasses
      - dataclasses
    """
    def __init__(self, record_type: Type[Any] = Record) -> None:
        if not isinstance(record_type, type):
            raise TypeError(f"record_type must be a class, got {record_type!r}")
        if issubclass(record_type, BaseModel):
            self.kind = "pydantic"
        elif dataclasses.is_dataclass(record_type):
            self.kind = "dataclass"
            self._adapter = TypeAdapter(record_type)
            self._fields = {f.name for f in dataclasses.fields(record_type)}
        elif issubclass(record_type, dict):
            self.kind = "dict"
        else:
            raise TypeError(
                f"unsupported record type {record_type.__name__}: "
                "use a dict subclass, a pydantic model or a dataclass"
            )
        self.record_type = record_type

    def to_document(self, record: Any) -> Dict[str, Any]:
        if isinstance(record, BaseModel):
            return record.model_dump(mode="json")
        if dataclasses.is_dataclass(record) and not isinstance(record, type):
            adapter = self._adapter if type(record) is self.record_type else TypeAdapter(type(record))
            return adapter.dump_python(record, mode="json")
        if isinstance(record, dict):
            return copy.deepcopy(dict(record))
        raise RecordTypeError(f"cannot serialize {type(record).__name__} as a record")

    def from_document(self, doc: Any) -> Any:
        if not isinstance(doc, dict):
            raise RecordTypeError(f"record document must be an object, got {type(doc).__name__}")
        if self.kind == "pydantic":
            try:
                return self.record_type.model_validate(doc)
            except ValidationError as e:
                raise RecordTypeError(f"document does not fit {self.record_type.__name__}: {e}") from e
        if self.kind == "dataclass":
            unknown = sorted(set(doc) - self._fields)
            if unknown:
                raise RecordTypeError(
                    f"document does not fit {self.record_type.__name__}: unknown fields {unknown}"
                )
            try:
                return self._adapter.validate_python(doc)
            except ValidationError as e:
                raise RecordTypeError(f"document does not fit {self.record_type.__name__}: {e}") from e
        return self.record_type(doc)

    @staticmethod
    def get_id(record: Any) -> str:
        """
        Id of a record: get_id() when the type provides it, else the "id" key
        or attribute. Raises MissingIdError when empty.
        """
        if isinstance(record, Identifiable):
            rid = record.get_id()
        elif isinstance(record, dict):
            rid = record.get("id")
        else:
            rid = getattr(record, "id", None)
        if not isinstance(rid, str) or not rid:
            raise MissingIdError(f"{type(record).__name__} must have a non-empty string id")
        return rid
