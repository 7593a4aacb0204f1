"""Performance monitoring and caching utilities for the Legal Review pipeline.

Tracks per-stage timings of analysis runs and caches derived views such as
document metrics so they are not recomputed on every query.
"""

import functools
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class PerformanceMetrics:
    """Timing record for one pipeline operation."""

    operation_name: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    duration: Optional[float] = None
    success: bool = True
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def finish(self, success: bool = True, error: Optional[str] = None) -> None:
        """Mark the operation as finished."""
        self.end_time = time.perf_counter()
        self.duration = self.end_time - self.start_time
        self.success = success
        self.error = error


class PerformanceMonitor:
    """
    Monitor and track performance metrics for pipeline stages.

    Operations running longer than ``max_processing_time`` seconds are
    logged as warnings.
    """

    def __init__(self, max_processing_time: float = 60):
        """
        Initialize the performance monitor.

        Args:
            max_processing_time: Maximum expected duration in seconds.
        """
        self.max_processing_time = max_processing_time
        self.metrics: Dict[str, List[PerformanceMetrics]] = {}
        self._lock = threading.Lock()

    def start_operation(self, operation_name: str, **metadata) -> PerformanceMetrics:
        """
        Start tracking an operation.

        Args:
            operation_name: Name of the operation.
            **metadata: Additional metadata to track.

        Returns:
            PerformanceMetrics object to pass to ``end_operation``.
        """
        return PerformanceMetrics(operation_name=operation_name, metadata=metadata)

    def end_operation(
        self,
        metric: PerformanceMetrics,
        success: bool = True,
        error: Optional[str] = None,
    ) -> None:
        """
        End tracking an operation and record it.

        Args:
            metric: The metric returned by ``start_operation``.
            success: Whether the operation succeeded.
            error: Optional error message.
        """
        metric.finish(success=success, error=error)
        with self._lock:
            self.metrics.setdefault(metric.operation_name, []).append(metric)

        if metric.duration is not None and metric.duration > self.max_processing_time:
            logger.warning(
                f"Operation '{metric.operation_name}' exceeded max time: "
                f"{metric.duration:.2f}s > {self.max_processing_time}s"
            )

    def track(self, operation_name: str, **metadata) -> "_TrackedOperation":
        """Context manager form of start_operation/end_operation."""
        return _TrackedOperation(self, operation_name, metadata)

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """
        Get statistics for a specific operation.

        Returns:
            Dictionary with count, average, min, max, total and
            success_rate, or an empty dict if the operation never ran.
        """
        with self._lock:
            records = list(self.metrics.get(operation_name, []))

        durations = [m.duration for m in records if m.duration is not None]
        if not durations:
            return {}

        return {
            "count": len(durations),
            "average": sum(durations) / len(durations),
            "min": min(durations),
            "max": max(durations),
            "total": sum(durations),
            "success_rate": sum(1 for m in records if m.success) / len(records),
        }

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        """Get statistics for all tracked operations."""
        with self._lock:
            names = list(self.metrics.keys())
        return {name: self.get_operation_stats(name) for name in names}

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self.metrics.clear()


class _TrackedOperation:
    def __init__(self, monitor: PerformanceMonitor, name: str, metadata: Dict[str, Any]):
        self._monitor = monitor
        self._name = name
        self._metadata = metadata
        self.metric: Optional[PerformanceMetrics] = None

    def __enter__(self) -> PerformanceMetrics:
        self.metric = self._monitor.start_operation(self._name, **self._metadata)
        return self.metric

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._monitor.end_operation(
            self.metric,
            success=exc is None,
            error=str(exc) if exc is not None else None,
        )
        return False


def timed_operation(operation_name: str):
    """
    Decorator that logs the duration of a call.

    Args:
        operation_name: Name used in the log message.

    Example:
        @timed_operation("compose_document")
        def compose(document, clauses, snapshot):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                duration = time.perf_counter() - start_time
                logger.debug(f"{operation_name} completed in {duration:.3f}s")
                return result
            except Exception as e:
                duration = time.perf_counter() - start_time
                logger.error(f"{operation_name} failed after {duration:.3f}s: {e}")
                raise
        return wrapper
    return decorator


class SimpleCache:
    """
    Thread-safe in-memory cache with size bound and TTL.

    Used for derived views (document metrics, summaries) keyed on the
    run id and the suggestion-store version they were computed from.
    """

    def __init__(self, max_size: int = 100, ttl: int = 3600):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of items to cache.
            ttl: Time-to-live for cache entries in seconds.
        """
        self.max_size = max_size
        self.ttl = ttl
        self._cache: Dict[Hashable, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Get a value from the cache.

        Returns:
            Cached value or None if not found or expired.
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            value, timestamp = entry
            if time.monotonic() - timestamp > self.ttl:
                del self._cache[key]
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        """Set a value, evicting the oldest entry when full."""
        with self._lock:
            if key not in self._cache and len(self._cache) >= self.max_size:
                oldest_key = min(self._cache.keys(), key=lambda k: self._cache[k][1])
                del self._cache[oldest_key]
            self._cache[key] = (value, time.monotonic())

    def invalidate(self, key: Hashable) -> None:
        """Invalidate a cache entry."""
        with self._lock:
            self._cache.pop(key, None)

    def invalidate_where(self, predicate: Callable[[Hashable], bool]) -> int:
        """
        Invalidate every entry whose key satisfies ``predicate``.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            doomed = [k for k in self._cache if predicate(k)]
            for key in doomed:
                del self._cache[key]
        return len(doomed)

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        """Get the current cache size."""
        with self._lock:
            return len(self._cache)
