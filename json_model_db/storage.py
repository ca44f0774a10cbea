from __future__ import annotations
import json
import logging
import os
import shutil
import stat
import tempfile
from typing import Any, List

from .config import StoreConfig
from .errors import CorruptRecordError, StorageError
from .paths import ABSENT

log = logging.getLogger(__name__)


class FileStorage:
    """
    File I/O for one store: one directory per model, one JSON file per record.
    Knows nothing about records or matching.
    """
    def __init__(self, config: StoreConfig) -> None:
        self.config = config

    def ensure_dir(self, path: str) -> None:
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise StorageError(f"unable to create directory {path}: {e}") from e

    def list_files(self, dir_path: str) -> List[str]:
        """
        Names of files with the configured extension directly inside dir_path,
        sorted by name.
        """
        ext = self.config.extension
        try:
            names = os.listdir(dir_path)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"unable to read directory {dir_path}: {e}") from e
        out = []
        for name in names:
            if not name.endswith(ext) or len(name) == len(ext):
                continue
            if os.path.isfile(os.path.join(dir_path, name)):
                out.append(name)
        out.sort()
        return out

    def list_dirs(self, dir_path: str) -> List[str]:
        try:
            names = os.listdir(dir_path)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"unable to read directory {dir_path}: {e}") from e
        return sorted(n for n in names if os.path.isdir(os.path.join(dir_path, n)))

    def read_json(self, path: str) -> Any:
        """
        Returns the parsed document, ABSENT if the file does not exist.
        Raises CorruptRecordError if the file cannot be decoded.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            return ABSENT
        except UnicodeDecodeError as e:
            raise CorruptRecordError(path, "not valid UTF-8") from e
        except OSError as e:
            raise StorageError(f"unable to read {path}: {e}") from e
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptRecordError(path, e.msg) from e
        log.debug("read %s", path)
        return obj

    def write_json(self, path: str, obj: Any) -> None:
        """
        Serialize obj as pretty JSON. With atomic_writes the data goes to a temp
        file in the same directory and is moved over the target with os.replace.
        """
        try:
            data = json.dumps(obj, indent=self.config.indent, ensure_ascii=self.config.ensure_ascii)
        except (TypeError, ValueError) as e:
            raise StorageError(f"unable to serialize record for {path}: {e}") from e
        data += "\n"
        try:
            if not self.config.atomic_writes:
                with open(path, "w", encoding="utf-8") as f:
                    f.write(data)
            else:
                self._write_atomic(path, data)
        except OSError as e:
            raise StorageError(f"unable to write {path}: {e}") from e
        log.debug("wrote %s", path)

    def _write_atomic(self, path: str, data: str) -> None:
        dir_path = os.path.dirname(path) or "."
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".part", dir=dir_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                # mkstemp creates 0600; give the record the mode open() would
                os.chmod(tmp_path, _target_mode(path))
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def remove(self, path: str) -> bool:
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"unable to delete {path}: {e}") from e
        log.debug("removed %s", path)
        return True

    def remove_tree(self, dir_path: str) -> bool:
        if not os.path.isdir(dir_path):
            return False
        try:
            shutil.rmtree(dir_path)
        except OSError as e:
            raise StorageError(f"unable to delete directory {dir_path}: {e}") from e
        return True


def _target_mode(path: str) -> int:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
