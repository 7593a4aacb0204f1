"""Unit tests for performance monitoring and caching."""

import logging
import time

import pytest

from legal_review.performance import PerformanceMonitor, SimpleCache, timed_operation


class TestPerformanceMonitor:
    """Tests for per-stage timing."""

    def test_start_and_end(self):
        monitor = PerformanceMonitor()
        metric = monitor.start_operation("segment", pages=3)
        monitor.end_operation(metric)

        stats = monitor.get_operation_stats("segment")
        assert stats["count"] == 1
        assert stats["success_rate"] == 1.0
        assert metric.metadata == {"pages": 3}
        assert metric.duration >= 0

    def test_track_records_failures(self):
        monitor = PerformanceMonitor()
        with pytest.raises(RuntimeError):
            with monitor.track("aggregate"):
                raise RuntimeError("boom")

        records = monitor.metrics["aggregate"]
        assert records[0].success is False
        assert records[0].error == "boom"

    def test_slow_operations_warn(self, caplog):
        monitor = PerformanceMonitor(max_processing_time=0)
        with caplog.at_level(logging.WARNING, logger="legal_review.performance"):
            with monitor.track("analyze_clauses"):
                time.sleep(0.01)
        assert "exceeded max time" in caplog.text

    def test_unknown_operation(self):
        assert PerformanceMonitor().get_operation_stats("nothing") == {}

    def test_all_stats_and_reset(self):
        monitor = PerformanceMonitor()
        with monitor.track("a"):
            pass
        with monitor.track("b"):
            pass
        assert set(monitor.get_all_stats()) == {"a", "b"}
        monitor.reset()
        assert monitor.get_all_stats() == {}


class TestTimedOperation:
    def test_returns_result(self):
        @timed_operation("double")
        def double(x):
            return x * 2

        assert double(4) == 8
        assert double.__name__ == "double"

    def test_reraises(self, caplog):
        @timed_operation("explode")
        def explode():
            raise ValueError("bad")

        with caplog.at_level(logging.ERROR, logger="legal_review.performance"):
            with pytest.raises(ValueError):
                explode()
        assert "explode failed" in caplog.text


class TestSimpleCache:
    """Tests for the metrics cache."""

    def test_set_and_get(self):
        cache = SimpleCache()
        cache.set(("run-1", 0), "metrics")
        assert cache.get(("run-1", 0)) == "metrics"
        assert cache.get(("run-1", 1)) is None

    def test_ttl_expiry(self):
        cache = SimpleCache(ttl=0)
        cache.set("key", "value")
        time.sleep(0.01)
        assert cache.get("key") is None
        assert cache.size() == 0

    def test_evicts_oldest(self):
        cache = SimpleCache(max_size=2)
        cache.set("a", 1)
        time.sleep(0.001)
        cache.set("b", 2)
        time.sleep(0.001)
        cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("c") == 3
        assert cache.size() == 2

    def test_invalidate_where(self):
        cache = SimpleCache()
        cache.set(("run-1", 0), 1)
        cache.set(("run-1", 1), 2)
        cache.set(("run-2", 0), 3)

        removed = cache.invalidate_where(lambda key: key[0] == "run-1")
        assert removed == 2
        assert cache.get(("run-2", 0)) == 3

    def test_invalidate_and_clear(self):
        cache = SimpleCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        assert cache.get("a") is None
        cache.clear()
        assert cache.size() == 0
