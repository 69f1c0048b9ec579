#utils/telemetry.py

import json, os, time, threading
from collections import deque
from typing import Any, Dict, Iterable, List, Optional

# ---- in-memory ring buffer (process-local) ----
_MAX_EVENTS = 5000
_EVENTS = deque(maxlen=_MAX_EVENTS)
_LOCK = threading.Lock()
_ECHO = os.getenv("TELEMETRY_ECHO", "false").lower() in ("1", "true", "yes")

def _now_ms() -> int:
    return int(time.time() * 1000)

def _emit(kind: str, name: str, data: Dict[str, Any], level: str = "info"):
    payload = {"ts_ms": _now_ms(), "trace_id": data.get("trace_id"), "kind": kind, "name": name, "level": level, **data}
    with _LOCK:
        _EVENTS.append(payload)
    if _ECHO:
        print(json.dumps(payload, default=str, ensure_ascii=False))

def log_event(kind: str, name: str, data: Dict[str, Any] | None = None, level: str = "info"):
    _emit(kind, name, data or {}, level)

class perf_timer:
    """Emit start/end events around a block, with latency and error on the end event."""
    def __init__(self, kind: str, name: str, data: Dict[str, Any] | None = None, level: str = "info"):
        self.kind, self.name, self.data, self.level = kind, name, data or {}, level
    def __enter__(self):
        self.t0 = time.perf_counter()
        log_event(self.kind, f"{self.name}:start", {**self.data})
        return self
    def __exit__(self, exc_type, exc, tb):
        dt = int((time.perf_counter() - self.t0) * 1000)
        extra = {"latency_ms": dt}
        if exc is not None:
            extra["error"] = repr(exc)
            _lvl = "error"
        else:
            _lvl = self.level
        log_event(self.kind, f"{self.name}:end", {**self.data, **extra}, level=_lvl)

def recent_events(
    limit: int = 100,
    kinds: Optional[Iterable[str]] = None,
    names: Optional[Iterable[str]] = None,
) -> List[Dict[str, Any]]:
    """Return recent events (most recent first). Filters are optional."""
    with _LOCK:
        items = list(_EVENTS)
    if kinds:
        kset = set(kinds); items = [e for e in items if e.get("kind") in kset]
    if names:
        nset = set(names); items = [e for e in items if e.get("name") in nset]
    return list(reversed(items[-limit:]))

def clear_events():
    with _LOCK:
        _EVENTS.clear()
