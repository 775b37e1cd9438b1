# modwarp/core/logging/context.py
from __future__ import annotations
import contextvars

# Per-mod log context (modId, phase) set by the orchestrator while it drives a mod.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("modwarp.logctx", default=None)

def setLogContext(**kvs):
    """Set or update per-log context values (modId, phase, etc.)."""
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)

def clearLogContext():
    """Clear context after a mod has been fully handled."""
    _logContextVar.set(None)

def getLogContext():
    """Return current context dict or None."""
    return _logContextVar.get()
