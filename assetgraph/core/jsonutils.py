# assetgraph/core/jsonutils.py
from __future__ import annotations

import json
from collections.abc import Mapping, Iterable
from dataclasses import is_dataclass, asdict
from enum import Enum
from pathlib import PurePath
from typing import Any

__all__ = ["safeJsonDumps", "serializeError", "tryJSONify"]



def safeJsonDumps(obj: Any, *, indent: int | None = None) -> str:
    """
    Serializes `obj` to JSON. Compact separators unless `indent` is given.
    UTF-8 characters are kept as-is, NaN/infinity are rejected.
    If direct encoding fails, falls back to tryJSONify (circular/depth-safe) and retries.
    """
    separators = (",", ":") if indent is None else (",", ": ")
    try:
        return json.dumps(obj, ensure_ascii=False, allow_nan=False, separators=separators, indent=indent)
    except Exception:
        safePayload = tryJSONify(obj)
        return json.dumps(safePayload, ensure_ascii=False, allow_nan=False, separators=separators, indent=indent)



def serializeError(err: Any) -> dict[str, Any]:
    """
    Converts Exception or arbitrary object into a JSON-serializable dict.
    
    Examples:
        ValueError("bad") -> {"ok": False, "error": "ValueError", "message": "bad"}
        "error text"      -> {"ok": False, "message": "error text"}
    """
    if isinstance(err, BaseException):
        return {
            "ok": False,
            "error": err.__class__.__name__,
            "message": str(err),
        }
    return {"ok": False, "message": str(err)}



def tryJSONify(obj: Any, *, _seen: set[int] | None = None, _depth: int = 0, _maxDepth: int = 10) -> Any:
    """
    Attempts to make any object JSON-serializable.
    
    Rules:
      • Basic scalars (None, bool, int, float, str) are preserved.
      • Exceptions → serializeError().
      • PurePath → string path.
      • sets/frozensets are sorted when possible, tuples/iterables → list.
      • Mappings → dict with str keys.
      • fallback → repr(obj)
    """
    if _seen is None:
        _seen = set()

    oid = id(obj)
    if oid in _seen:
        return f"<circular_ref {type(obj).__name__}>"
    if _depth > _maxDepth:
        return f"<max_depth_exceeded {type(obj).__name__}>"

    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    
    _seen.add(oid)
    
    if isinstance(obj, BaseException):
        return serializeError(obj)

    if isinstance(obj, Enum):
        return tryJSONify(obj.value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
    
    if is_dataclass(obj) and not isinstance(obj, type):
        return tryJSONify(asdict(obj), _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)

    if isinstance(obj, PurePath):
        return obj.as_posix()
    
    if isinstance(obj, (set, frozenset)):
        items = [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]
        try:
            return sorted(items)
        except TypeError:
            return items
    
    if isinstance(obj, Mapping):
        return {
            str(key): tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for key, value in obj.items()
        }

    if isinstance(obj, Iterable):
        return [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]
    
    # Last-ditch representation (avoid raising during logging)
    return repr(obj)
