from __future__ import annotations
import copy
import logging
import os
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from .config import StoreConfig
from .errors import CorruptRecordError, MissingIdError, ModelNotSelectedError, RecordTypeError
from .paths import ABSENT, PathLike, get_nested, matches, merge_patch, set_nested, split_path
from .progress import Progress, ProgressCallback
from .record import Record, RecordCodec
from .storage import FileStorage

log = logging.getLogger(__name__)


class JsonDatabase:
    """
    File-system backed document store.

    Layout: <base_dir>/<model>/<id>.json, one pretty-printed JSON file per record.
    Nothing is cached: every call goes back to the files, so two instances on
    the same directory see each other's writes.
    """
    def __init__(
        self,
        model: Optional[str] = None,
        *,
        config: Optional[StoreConfig] = None,
        record_type: Type[Any] = Record,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.config = config or StoreConfig()
        self._fs = FileStorage(self.config)
        self._codec = RecordCodec(record_type)
        self._progress = Progress(on_progress)
        self._model: Optional[str] = None
        self._fs.ensure_dir(self.config.base_dir)
        if model is not None:
            self.model(model)

    # ----- Model selection -----

    def model(self, name: str) -> "JsonDatabase":
        """Switch the active model (collection), creating its directory."""
        if not name or not isinstance(name, str):
            raise ValueError("model name must be a non-empty string")
        if _has_separator(name) or name in (".", ".."):
            raise ValueError(f"invalid model name: {name!r}")
        self._model = name
        self._fs.ensure_dir(self.config.model_dir(name))
        log.info("model selected: %s", name)
        return self

    select_model = model

    @property
    def model_name(self) -> Optional[str]:
        return self._model

    @property
    def model_path(self) -> str:
        return self.config.model_dir(self._require_model())

    @property
    def record_type(self) -> Type[Any]:
        return self._codec.record_type

    def models(self) -> List[str]:
        return self._fs.list_dirs(self.config.base_dir)

    def drop_model(self) -> bool:
        """Delete the active model's directory and every record in it."""
        path = self.model_path
        removed = self._fs.remove_tree(path)
        if removed:
            log.info("model dropped: %s", self._model)
        return removed

    # ----- Single-record CRUD -----

    def create(self, rec_id: str, record: Any) -> None:
        """Write record under rec_id. An existing file with that id is overwritten."""
        path = self._file_path(rec_id)
        doc = self._codec.to_document(record)
        self._fs.ensure_dir(self.model_path)
        self._fs.write_json(path, doc)

    def create_model(self, record: Any) -> str:
        rec_id = self._codec.get_id(record)
        self.create(rec_id, record)
        return rec_id

    def find_by_id(self, rec_id: str) -> Any:
        """
        Returns the record, or None when no file exists for rec_id.
        A file that exists but is not valid JSON raises CorruptRecordError.
        """
        doc = self._fs.read_json(self._file_path(rec_id))
        if doc is ABSENT:
            return None
        return self._codec.from_document(doc)

    def exists(self, rec_id: str) -> bool:
        return self._fs.exists(self._file_path(rec_id))

    def update_by_id(self, rec_id: str, patch: Dict[str, Any]) -> bool:
        """
        Merge patch into the stored record and write it back.
        Returns False (and writes nothing) when the record does not exist.
        """
        if not isinstance(patch, dict):
            raise TypeError(f"patch must be a dict, got {type(patch).__name__}")
        current = self.find_by_id(rec_id)
        if current is None:
            return False
        doc = self._codec.to_document(current)
        merge_patch(doc, patch)
        self._save_document(rec_id, doc)
        return True

    def delete_by_id(self, rec_id: str) -> bool:
        return self._fs.remove(self._file_path(rec_id))

    # ----- Queries -----

    def ids(self) -> List[str]:
        ext_len = len(self.config.extension)
        return [name[:-ext_len] for name in self._fs.list_files(self.model_path)]

    def find_all(self) -> List[Any]:
        return [rec for _rid, rec, _doc in self._scan()]

    def find(self, condition: Any) -> List[Any]:
        return [rec for _rid, rec, doc in self._scan() if matches(doc, condition)]

    def find_one(self, condition: Any) -> Any:
        for _rid, rec, doc in self._scan():
            if matches(doc, condition):
                return rec
        return None

    def count(self, condition: Any) -> int:
        return len(self.find(condition))

    # ----- Bulk mutations (not atomic) -----

    def update_many(self, condition: Any, patch: Dict[str, Any]) -> int:
        ids = self._matching_ids(condition)
        self._progress.emit("update_many.start", 0, f"{len(ids)} matched", total=len(ids))
        n = 0
        for i, rec_id in enumerate(ids, 1):
            if self.update_by_id(rec_id, patch):
                n += 1
            self._progress.step("update_many", i, len(ids), rec_id)
        self._progress.emit("update_many.done", 100, f"{n} updated", count=n)
        log.info("update_many on %s: %d updated", self._model, n)
        return n

    def delete_many(self, condition: Any) -> int:
        ids = self._matching_ids(condition)
        self._progress.emit("delete_many.start", 0, f"{len(ids)} matched", total=len(ids))
        n = 0
        for i, rec_id in enumerate(ids, 1):
            if self.delete_by_id(rec_id):
                n += 1
            self._progress.step("delete_many", i, len(ids), rec_id)
        self._progress.emit("delete_many.done", 100, f"{n} deleted", count=n)
        log.info("delete_many on %s: %d deleted", self._model, n)
        return n

    def push(self, condition: Any, array_path: PathLike, element: Any) -> int:
        """Append element to the array at array_path in every matched record."""
        def append(arr: List[Any]) -> Optional[List[Any]]:
            return arr + [copy.deepcopy(element)]
        return self._rewrite_arrays("push", condition, array_path, append)

    def pull(self, condition: Any, array_path: PathLike, pull_condition: Any) -> int:
        """Remove the elements matching pull_condition from the array at array_path."""
        def remove(arr: List[Any]) -> Optional[List[Any]]:
            kept = [e for e in arr if not matches(e, pull_condition)]
            return kept if len(kept) != len(arr) else None
        return self._rewrite_arrays("pull", condition, array_path, remove)

    def update_array(
        self,
        condition: Any,
        array_path: PathLike,
        array_condition: Any,
        patch: Dict[str, Any],
    ) -> int:
        """Merge patch into every element of the array that matches array_condition."""
        def patch_matching(arr: List[Any]) -> Optional[List[Any]]:
            out = []
            hit = False
            for elem in arr:
                if matches(elem, array_condition):
                    elem = merge_patch(copy.deepcopy(elem), patch)
                    hit = True
                out.append(elem)
            return out if hit else None
        return self._rewrite_arrays("update_array", condition, array_path, patch_matching)

    # ----- Internals -----

    def _require_model(self) -> str:
        if self._model is None:
            raise ModelNotSelectedError("model name is not specified; call model(name) first")
        return self._model

    def _file_path(self, rec_id: str) -> str:
        model_dir = self.model_path
        if not isinstance(rec_id, str) or not rec_id:
            raise MissingIdError("record id must be a non-empty string")
        if _has_separator(rec_id) or rec_id in (".", ".."):
            raise ValueError(f"invalid record id: {rec_id!r}")
        return os.path.join(model_dir, rec_id + self.config.extension)

    def _id_or_none(self, record: Any) -> Optional[str]:
        try:
            return self._codec.get_id(record)
        except MissingIdError:
            return None

    def _scan(self) -> Iterator[Tuple[str, Any, Dict[str, Any]]]:
        """
        Yields (file id, record, document) for every readable record file.
        Corrupt or mismatched files are skipped with a warning.
        """
        model_dir = self.model_path
        ext_len = len(self.config.extension)
        for name in self._fs.list_files(model_dir):
            path = os.path.join(model_dir, name)
            try:
                raw = self._fs.read_json(path)
                if raw is ABSENT:
                    continue
                rec = self._codec.from_document(raw)
            except (CorruptRecordError, RecordTypeError) as e:
                log.warning("skipping %s: %s", path, e)
                continue
            yield name[:-ext_len], rec, self._codec.to_document(rec)

    def _matching_ids(self, condition: Any) -> List[str]:
        return [rid for rid, _rec, doc in self._scan() if matches(doc, condition)]

    def _save_document(self, rec_id: str, doc: Dict[str, Any]) -> None:
        """Rebuild the record type from doc and write it under rec_id."""
        updated = self._codec.from_document(doc)
        new_id = self._id_or_none(updated)
        if new_id != rec_id:
            # The file keeps its name; stored id and file name now differ.
            log.warning("update of %s/%s changed its id to %r", self._model, rec_id, new_id)
        self._fs.write_json(self._file_path(rec_id), self._codec.to_document(updated))

    def _rewrite_arrays(self, op: str, condition: Any, array_path: PathLike, fn) -> int:
        """
        For every matched record, re-read it, resolve array_path and, if it is
        a list, write back fn(list). fn returns None when it made no change;
        the record is still rewritten but not counted.
        Records where the path is not a list are skipped.
        """
        parts = split_path(array_path)
        ids = self._matching_ids(condition)
        self._progress.emit(f"{op}.start", 0, f"{len(ids)} matched", total=len(ids))
        n = 0
        for i, rec_id in enumerate(ids, 1):
            current = self.find_by_id(rec_id)
            if current is not None:
                doc = self._codec.to_document(current)
                arr = get_nested(doc, parts)
                if isinstance(arr, list):
                    new_arr = fn(list(arr))
                    if new_arr is not None:
                        set_nested(doc, parts, new_arr)
                        n += 1
                    self._save_document(rec_id, doc)
            self._progress.step(op, i, len(ids), rec_id)
        self._progress.emit(f"{op}.done", 100, f"{n} modified", count=n)
        log.info("%s on %s %s: %d modified", op, self._model, parts, n)
        return n


def _has_separator(name: str) -> bool:
    if "/" in name or os.sep in name:
        return True
    return bool(os.altsep) and os.altsep in name
