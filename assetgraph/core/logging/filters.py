# assetgraph/core/logging/filters.py
from __future__ import annotations
import logging
import time
import threading
from collections import deque, defaultdict
from collections.abc import Callable

__all__ = ["RecurringSuppressFilter"]

# Upper bound for normalized message keys
MAX_KEY_LEN = 512



class RecurringSuppressFilter(logging.Filter):
    """
    Suppresses a record once the same (logger, level, message) was seen more than
    `maxPerWindow` times within `windowSeconds`. When the window frees up again,
    a single summary with the number of dropped records is emitted.

    Unknown packages and unresolved aliases are reported on every response that
    touches them, which is what this filter is meant to fold.

    One instance may sit on several handlers; each record is counted once and
    every handler gets the same verdict.
    """
    def __init__(
        self,
        *,
        windowSeconds: int = 60,
        maxPerWindow: int = 5,
        summaryLevel: int = logging.INFO,
        normalize: Callable[[logging.LogRecord], str] | None = None,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = summaryLevel
        self.normalize = normalize or self._defaultNormalize

        # Per-key sliding window of timestamps
        self._buckets: dict[tuple[str, int, str], deque[float]] = defaultdict(deque)
        # Suppressed count not yet reported
        self._suppressedCounts: dict[tuple[str, int, str], int] = defaultdict(int)
        self._lock = threading.Lock()
    
    def _defaultNormalize(self, record: logging.LogRecord) -> str:
        try:
            msg = record.getMessage()
        except Exception:
            msg = str(record.msg)
        norm = " ".join(str(msg).split())
        if len(norm) > MAX_KEY_LEN:
            norm = norm[:MAX_KEY_LEN] + "..."
        return norm
    
    def _keyOf(self, record: logging.LogRecord) -> tuple[str, int, str]:
        return (record.name, record.levelno, self.normalize(record))
    
    def _pruneOld(self, dq: deque[float], now: float) -> None:
        limit = now - self.windowSeconds
        while dq and dq[0] < limit:
            dq.popleft()
        
    def _emitSummary(self, key: tuple[str, int, str]) -> None:
        suppressedCount = self._suppressedCounts.get(key, 0)
        if suppressedCount <= 0:
            return
        loggerName, _levelno, normMessage = key
        # Emit on the same logger to keep discoverability
        lg = logging.getLogger(loggerName)
        try:
            # Mark summary so it won't be suppressed by this filter again
            lg.log(
                self.summaryLevel,
                "Suppressed %d repeated logs: %s",
                suppressedCount,
                normMessage,
                extra={"_noRecurringSuppress": True}
            )
        except Exception:
            # Never crash logging due to summary emission
            pass
        finally:
            self._suppressedCounts[key] = 0
    
    def _maybeCleanup(self):
        if len(self._buckets) > 5000:
            # Drop stale keys with empty windows and zero suppressed count
            for key in list(self._buckets.keys())[:2000]:
                if not self._buckets[key] and not self._suppressedCounts.get(key, 0):
                    self._buckets.pop(key, None)
                    self._suppressedCounts.pop(key, None)

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "_noRecurringSuppress", False):
            return True
        
        verdict = getattr(record, "_recurringVerdict", None)
        if verdict is not None and verdict[0] == id(self):
            return verdict[1]
        
        now = time.monotonic()
        key = self._keyOf(record)

        summaryDue = False
        with self._lock:
            self._maybeCleanup()
            dq = self._buckets[key]
            self._pruneOld(dq, now)

            if len(dq) < self.maxPerWindow:
                dq.append(now)
                summaryDue = self._suppressedCounts.get(key, 0) > 0
                allowed = True
            else:
                # Over the limit -> suppress and count
                self._suppressedCounts[key] += 1
                dq.append(now)
                allowed = False
        
        record._recurringVerdict = (id(self), allowed)
        
        if summaryDue:
            # Outside the lock: the summary record passes through this filter again
            self._emitSummary(key)
        return allowed
