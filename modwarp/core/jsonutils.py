# modwarp/core/jsonutils.py
from __future__ import annotations

import json
import traceback
from collections import deque
from collections.abc import Mapping, Iterable
from dataclasses import is_dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

__all__ = ["safeJsonDumps", "serializeError", "tryJSONify"]

# Traceback text kept per serialized error
TRACEBACK_CHAR_LIMIT = 4000



# ------------------------------------------------
#                JSON serialization
# ------------------------------------------------

def safeJsonDumps(obj: object) -> str:
    """
    Serializes an object or pydantic model to a compact JSON string.
    Uses deterministic separators (",", ":") and disallows NaN/infinity.
    If direct JSON encoding fails, falls back to tryJSONify (circular/depth-safe) and retries.
    """
    payload: Any
    if isinstance(obj, BaseModel):
        payload = obj.model_dump(mode="json")
    else:
        payload = obj
    
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except Exception:
        safePayload = tryJSONify(payload, _maxDepth=None)
        return json.dumps(safePayload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))



# ------------------------------------------------
#              Error / Exception helpers
# ------------------------------------------------

def serializeError(err: Any, *, limit: int = TRACEBACK_CHAR_LIMIT) -> dict[str, Any]:
    """
    Converts Exception or arbitrary object into a JSON-serializable dict.
    
    Examples:
        ValueError("bad") -> {"type": "ValueError", "message": "bad", "stack": "..."}
        "error text"      -> {"message": "error text"}
        None              -> {}
    """
    if err is None:
        return {}
    
    if isinstance(err, str):
        return {"message": err}
    
    if isinstance(err, BaseException):
        data: dict[str, Any] = {
            "type": err.__class__.__name__,
            "message": str(err),
            "args": [repr(arg) for arg in getattr(err, "args", [])],
        }
        
        traceBack = getattr(err, "__traceback__", None)
        if traceBack:
            # Keep the innermost frames when the traceback is too long
            que: deque[str] = deque()
            total = 0
            truncated = False
            for part in traceback.format_tb(traceBack):
                que.append(part)
                total += len(part)
                while total > limit and que:
                    left = que.popleft()
                    total -= len(left)
                    truncated = True
            
            text = "".join(que)
            if truncated:
                text = "[TRUNCATED]" + text
            data["stack"] = text
        
        cause = err.__cause__
        if cause is not None and cause is not err:
            data["cause"] = {"type": cause.__class__.__name__, "message": str(cause)}
        
        return data
    
    return {"type": type(err).__name__, "repr": repr(err)}



# ------------------------------------------------
#              Generic JSON safety
# ------------------------------------------------

def tryJSONify(obj: Any, *, _seen: set[int] | None = None, _depth: int = 0, _maxDepth: int | None = 10) -> Any:
    """
    Attempts to make any object JSON-serializable.
    
    Rules:
      • Basic scalars (None, bool, int, float, str) are preserved.
      • Exceptions → serializeError().
      • pydantic models / dataclasses → dict.
      • Path → string path.
      • sets/tuples/iterables → list.
      • Mappings → dict with str keys.
      • fallback → repr(obj)
    """
    if _seen is None:
        _seen = set()

    oid = id(obj)
    if oid in _seen:
        return f"<circular_ref {type(obj).__name__}>"
    if isinstance(_maxDepth, int) and _depth > _maxDepth:
        return f"<max_depth_exceeded {type(obj).__name__}>"
    _seen.add(oid)

    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    
    if isinstance(obj, BaseException):
        return serializeError(obj)

    if isinstance(obj, Enum):
        return tryJSONify(obj.value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
    
    if isinstance(obj, BaseModel):
        return tryJSONify(obj.model_dump(mode="json"), _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)
    
    if is_dataclass(obj) and not isinstance(obj, type):
        return tryJSONify(asdict(obj), _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)

    if isinstance(obj, type):
        return obj.__qualname__

    if isinstance(obj, Path):
        return str(obj)
    
    if isinstance(obj, (set, frozenset, tuple)):
        return [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]
    
    if isinstance(obj, Mapping):
        return {
            str(key): tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for key, value in obj.items()
        }

    if isinstance(obj, Iterable):
        return [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]
    
    # Last-ditch representation (avoid raising during logging)
    return repr(obj)
