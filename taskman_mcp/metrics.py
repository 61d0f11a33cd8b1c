"""Metrics sinks for taskman-mcp.

Components that emit counters receive a sink explicitly. ``NullMetrics`` is
the default for callers that do not configure one.
"""

import threading
from collections import defaultdict
from typing import Any, Protocol


def _key(name: str, labels: dict[str, Any]) -> str:
    if not labels:
        return name
    rendered = ",".join(f"{k}={labels[k]}" for k in sorted(labels))
    return f"{name}{{{rendered}}}"


class MetricsSink(Protocol):
    """Interface for recording operational metrics."""

    def increment(self, name: str, **labels: Any) -> None: ...

    def observe_latency(self, name: str, seconds: float, **labels: Any) -> None: ...

    def set_gauge(self, name: str, value: float, **labels: Any) -> None: ...


class NullMetrics:
    """Sink that discards everything."""

    def increment(self, name: str, **labels: Any) -> None:
        pass

    def observe_latency(self, name: str, seconds: float, **labels: Any) -> None:
        pass

    def set_gauge(self, name: str, value: float, **labels: Any) -> None:
        pass


class InMemoryMetrics:
    """Thread-safe sink that accumulates metrics in process memory.

    Keys are rendered as ``name{label=value,...}`` with labels sorted.
    Latencies are kept as a running count and total per key.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = defaultdict(int)
        self._gauges: dict[str, float] = {}
        self._latencies: dict[str, list[float]] = defaultdict(lambda: [0, 0.0])

    def increment(self, name: str, **labels: Any) -> None:
        with self._lock:
            self._counters[_key(name, labels)] += 1

    def observe_latency(self, name: str, seconds: float, **labels: Any) -> None:
        with self._lock:
            summary = self._latencies[_key(name, labels)]
            summary[0] += 1
            summary[1] += seconds

    def set_gauge(self, name: str, value: float, **labels: Any) -> None:
        with self._lock:
            self._gauges[_key(name, labels)] = value

    def counter(self, name: str, **labels: Any) -> int:
        """Current value of one counter."""
        with self._lock:
            return self._counters.get(_key(name, labels), 0)

    def snapshot(self) -> dict[str, Any]:
        """Copy of all accumulated metrics.

        Returns:
            Dict with 'counters', 'gauges' and 'latencies' sections. Each
            latency entry is ``{"count": n, "total": seconds}``.
        """
        with self._lock:
            return {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
                "latencies": {
                    k: {"count": int(count), "total": total}
                    for k, (count, total) in self._latencies.items()
                },
            }
