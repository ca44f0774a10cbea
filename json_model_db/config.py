from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_DIR = "json-db"
ENV_BASE_DIR = "JSON_MODEL_DB_DIR"


@dataclass(frozen=True)
class StoreConfig:
    """
    Settings for a JsonDatabase instance. Passed to the constructor; there is
    no process-wide state.
    """
    base_dir: str = DEFAULT_BASE_DIR
    extension: str = ".json"
    indent: int = 2
    ensure_ascii: bool = False
    atomic_writes: bool = True

    def __post_init__(self) -> None:
        if not self.base_dir:
            raise ValueError("base_dir must not be empty")
        if not self.extension.startswith(".") or len(self.extension) < 2:
            raise ValueError(f"extension must look like '.json', got {self.extension!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "StoreConfig":
        env = os.environ if environ is None else environ
        base_dir = env.get(ENV_BASE_DIR) or DEFAULT_BASE_DIR
        overrides.setdefault("base_dir", base_dir)
        return cls(**overrides)

    def model_dir(self, model: str) -> str:
        return os.path.join(self.base_dir, model)
