from __future__ import annotations
import copy
from typing import Any, Dict, List, Sequence, Union

from .errors import PathConflictError

PathLike = Union[str, Sequence[str]]


class _Absent:
    """
    Marker returned by get_nested() when a path does not resolve.
    Distinct from None, which is a real JSON null.
    """
    _instance = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


def split_path(key: PathLike) -> List[str]:
    if isinstance(key, str):
        return key.split(".")
    return list(key)


def get_nested(doc: Any, path: PathLike) -> Any:
    """
    Walk `doc` one segment at a time. Returns ABSENT as soon as the current
    value is not an object or lacks the segment. Never raises.
    """
    cur: Any = doc
    for key in split_path(path):
        if not isinstance(cur, dict) or key not in cur:
            return ABSENT
        cur = cur[key]
    return cur


def set_nested(doc: Dict[str, Any], path: PathLike, value: Any) -> None:
    """
    Assign `value` at `path` inside `doc`, creating missing intermediate objects.

    An intermediate segment that already holds a non-object (null, list or
    scalar) raises PathConflictError; nothing is overwritten in that case.
    """
    parts = split_path(path)
    if not parts:
        raise ValueError("empty path")
    if not isinstance(doc, dict):
        raise PathConflictError(f"cannot set {'.'.join(parts)!r} on a {type(doc).__name__}")
    cur = doc
    for i, key in enumerate(parts[:-1]):
        nxt = cur.get(key, ABSENT)
        if nxt is ABSENT:
            nxt = {}
            cur[key] = nxt
        elif not isinstance(nxt, dict):
            where = ".".join(parts[: i + 1])
            raise PathConflictError(
                f"cannot set {'.'.join(parts)!r}: {where!r} holds a {type(nxt).__name__}"
            )
        cur = nxt
    cur[parts[-1]] = value


def merge_patch(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply every top-level key of `source` to `target` via set_nested().
    Keys may be dotted paths; values replace the destination wholesale.
    """
    if not isinstance(source, dict):
        raise TypeError(f"patch must be a dict, got {type(source).__name__}")
    for key, value in source.items():
        set_nested(target, split_path(key), copy.deepcopy(value))
    return target


def json_equal(a: Any, b: Any) -> bool:
    # JSON booleans never compare equal to numbers
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(json_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return False
        return all(json_equal(x, y) for x, y in zip(a, b))
    return a == b


def matches(candidate: Any, condition: Any) -> bool:
    """
    Query-by-example match.

    - condition is not an object: exact equality with candidate
    - condition is an object, candidate is not: no match
    - both objects: every condition key (dotted paths allowed) must resolve in
      candidate; nested objects on both sides are matched recursively, anything
      else must be equal. An empty condition matches every object.
    """
    if not isinstance(condition, dict):
        return json_equal(candidate, condition)
    if not isinstance(candidate, dict):
        return False
    for key, expected in condition.items():
        actual = get_nested(candidate, split_path(key))
        if actual is ABSENT:
            return False
        if isinstance(actual, dict) and isinstance(expected, dict):
            if not matches(actual, expected):
                return False
        elif not json_equal(actual, expected):
            return False
    return True
