from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Optional

log = logging.getLogger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], None]


class Progress:
    """
    Thin wrapper over an optional on_progress(evt) callback.
    evt = {"phase": "<op>.<stage>", "pct": 0..100, "msg": "..."}
    """
    def __init__(self, callback: Optional[ProgressCallback] = None) -> None:
        self._cb = callback

    def emit(self, phase: str, pct: float = 0, msg: str = "", **extra: Any) -> None:
        if self._cb is None:
            return
        evt: Dict[str, Any] = {"phase": phase, "pct": max(0, min(100, int(pct))), "msg": msg}
        evt.update(extra)
        try:
            self._cb(evt)
        except Exception:
            log.exception("progress callback failed for phase %s", phase)

    def step(self, op: str, done: int, total: int, msg: str = "") -> None:
        pct = 100 if total <= 0 else done * 100 / total
        self.emit(f"{op}.item", pct, msg, done=done, total=total)
