"""Unit tests for metrics sinks."""

import pytest

from taskman_mcp.metrics import InMemoryMetrics, NullMetrics


class TestInMemoryMetrics:
    """Tests for InMemoryMetrics."""

    def test_counters_by_label(self) -> None:
        """Counters should be kept per label set."""
        metrics = InMemoryMetrics()
        metrics.increment("tool_calls", tool="search_tasks")
        metrics.increment("tool_calls", tool="search_tasks")
        metrics.increment("tool_calls", tool="health_check")

        assert metrics.counter("tool_calls", tool="search_tasks") == 2
        assert metrics.counter("tool_calls", tool="health_check") == 1
        assert metrics.counter("tool_calls", tool="get_my_work") == 0

    def test_snapshot(self) -> None:
        """snapshot should render sorted label keys and copy values."""
        metrics = InMemoryMetrics()
        metrics.increment("api_errors", status=404, endpoint="/api/v1/tasks")
        metrics.observe_latency("api_latency", 0.25)
        metrics.observe_latency("api_latency", 0.5)
        metrics.set_gauge("open_sessions", 3)

        snap = metrics.snapshot()
        assert snap["counters"] == {"api_errors{endpoint=/api/v1/tasks,status=404}": 1}
        assert snap["latencies"] == {"api_latency": {"count": 2, "total": 0.75}}
        assert snap["gauges"] == {"open_sessions": 3}

        snap["latencies"]["api_latency"]["count"] = 9
        assert metrics.snapshot()["latencies"]["api_latency"]["count"] == 2

    def test_latency_storage_is_bounded(self) -> None:
        """Repeated observations should not keep one sample per call."""
        metrics = InMemoryMetrics()
        for _ in range(500):
            metrics.observe_latency("tool_latency", 0.01, tool="search_tasks")

        latencies = metrics.snapshot()["latencies"]
        assert list(latencies) == ["tool_latency{tool=search_tasks}"]
        assert latencies["tool_latency{tool=search_tasks}"]["count"] == 500
        assert latencies["tool_latency{tool=search_tasks}"]["total"] == pytest.approx(5.0)


class TestNullMetrics:
    """Tests for NullMetrics."""

    def test_accepts_everything(self) -> None:
        """The null sink should accept calls without side effects."""
        metrics = NullMetrics()
        metrics.increment("x", a=1)
        metrics.observe_latency("y", 1.0)
        metrics.set_gauge("z", 2.0)
