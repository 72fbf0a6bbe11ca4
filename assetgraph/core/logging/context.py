# assetgraph/core/logging/context.py
from __future__ import annotations
import contextvars

# Per-request log context. Enriched by the HTTP middleware.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("assetgraph.logctx", default=None)

def setLogContext(**kvs):
    """Set or update per-log context values (requestId, path, etc.)."""
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)

def clearLogContext():
    """Clear context after a request is fully handled."""
    _logContextVar.set(None)

def getLogContext():
    """Return current context dict or None."""
    return _logContextVar.get()
