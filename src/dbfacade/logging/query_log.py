"""SQL debug log for dbfacade.

When the ``debug.sql`` setting is on, every statement issued through the
facade is timed and recorded here. Repeated statements are folded into one
entry keyed by the hash of the query text.

Classes:
    QueryLogEntry: Aggregated timings for one statement text
    QueryDebugLog: Collector used by the facade

Example:
    >>> log = QueryDebugLog(enabled=True)
    >>> with log.measure("SELECT 1", role="user"):
    ...     run_query()
    >>> log.summary()["count"]
    1
"""

import hashlib
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generator, List, Optional

from .structured import StructuredLogger


@dataclass
class QueryLogEntry:
    """Aggregated timings for one statement text.

    Attributes:
        query: Statement text
        role: Connection role the statement last ran on
        count: Number of executions
        time: Cumulative duration in seconds
        errors: Number of executions reported as failed
    """
    query: str
    role: str
    count: int = 0
    time: float = 0.0
    errors: int = 0

    @property
    def average(self) -> float:
        return self.time / self.count if self.count else 0.0


class _Timer:
    """Mutable handle yielded by ``QueryDebugLog.measure``."""

    def __init__(self) -> None:
        self.start = time.perf_counter()
        self.duration: Optional[float] = None
        self.failed = False

    def fail(self) -> None:
        self.failed = True


class QueryDebugLog:
    """Collects per-statement timings while SQL debugging is enabled.

    Disabled instances still yield a timer from ``measure`` but record
    nothing.
    """

    def __init__(self, *, enabled: bool = False, logger: Optional[StructuredLogger] = None) -> None:
        self.enabled = enabled
        self._logger = logger
        self._entries: Dict[str, QueryLogEntry] = {}
        self._order: List[str] = []

    @staticmethod
    def query_hash(query: str) -> str:
        return hashlib.md5(query.encode("utf-8"), usedforsecurity=False).hexdigest()

    @contextmanager
    def measure(self, query: str, *, role: str = "user") -> Generator[_Timer, None, None]:
        """Time one statement execution.

        Exceptions propagate; the execution is recorded as failed.
        """
        timer = _Timer()
        try:
            yield timer
        except Exception:
            timer.failed = True
            raise
        finally:
            timer.duration = time.perf_counter() - timer.start
            if self.enabled:
                self.record(query, timer.duration, role=role, failed=timer.failed)

    def record(self, query: str, duration: float, *, role: str = "user", failed: bool = False) -> None:
        key = self.query_hash(query)
        entry = self._entries.get(key)
        if entry is None:
            entry = QueryLogEntry(query=query, role=role)
            self._entries[key] = entry
            self._order.append(key)
        entry.role = role
        entry.count += 1
        entry.time += duration
        if failed:
            entry.errors += 1

        if self._logger is not None:
            self._logger.debug(
                "SQL executed",
                query=query,
                role=role,
                duration_ms=round(duration * 1000, 3),
                failed=failed,
            )

    def entries(self) -> List[QueryLogEntry]:
        return [self._entries[key] for key in self._order]

    def summary(self) -> Dict[str, Any]:
        """Return totals across all recorded statements."""
        entries = self.entries()
        return {
            "count": sum(entry.count for entry in entries),
            "distinct": len(entries),
            "time": sum(entry.time for entry in entries),
            "errors": sum(entry.errors for entry in entries),
        }

    def clear(self) -> None:
        self._entries.clear()
        self._order.clear()
