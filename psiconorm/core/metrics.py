from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

from psiconorm.core.config import settings

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass(slots=True)
class TimingStats:
    count: float = 0.0
    total_ms: float = 0.0
    max_ms: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            "count": self.count,
            "total_ms": self.total_ms,
            "max_ms": self.max_ms,
            "avg_ms": self.total_ms / self.count if self.count else 0.0,
        }


class MetricsRegistry:
    """Process-wide timings and counters, keyed by label.

    Scoring keeps no other shared mutable state, so one lock is enough.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timings: Dict[str, TimingStats] = {}
        self._counters: Dict[str, float] = {}

    def record(self, label: str, elapsed_ms: float) -> None:
        with self._lock:
            stats = self._timings.setdefault(label, TimingStats())
            stats.count += 1.0
            stats.total_ms += elapsed_ms
            stats.max_ms = max(stats.max_ms, elapsed_ms)

    def inc(self, label: str, amount: float = 1.0) -> None:
        with self._lock:
            self._counters[label] = self._counters.get(label, 0.0) + amount

    def timings(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            return {label: stats.as_dict() for label, stats in self._timings.items()}

    def counters(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._counters)

    def reset(self) -> None:
        with self._lock:
            self._timings.clear()
            self._counters.clear()


metrics_registry = MetricsRegistry()

_enabled: bool = settings.debug_instrumentation_enabled


def set_instrumentation_enabled(enabled: bool) -> None:
    global _enabled
    _enabled = bool(enabled)


def instrumentation_enabled() -> bool:
    return _enabled


def _elapsed_ms(started: float) -> float:
    return (perf_counter() - started) * 1000.0


@contextmanager
def timer(label: str) -> Iterator[None]:
    """Record the duration of the enclosed block under ``label``."""
    if not _enabled:
        yield
        return
    started = perf_counter()
    try:
        yield
    finally:
        metrics_registry.record(label, _elapsed_ms(started))


def measure_time(label: str) -> Callable[[_F], _F]:
    def _wrap(func: _F) -> _F:
        @wraps(func)
        def _inner(*args: Any, **kwargs: Any):
            with timer(label):
                return func(*args, **kwargs)

        return cast(_F, _inner)

    return _wrap


def count_calls(label: str) -> Callable[[_F], _F]:
    def _wrap(func: _F) -> _F:
        @wraps(func)
        def _inner(*args: Any, **kwargs: Any):
            inc_counter(label)
            return func(*args, **kwargs)

        return cast(_F, _inner)

    return _wrap


def inc_counter(label: str, amount: float = 1.0) -> None:
    if _enabled:
        metrics_registry.inc(label, amount)


def get_metrics() -> Dict[str, Dict[str, float]]:
    return metrics_registry.timings()


def get_counters() -> Dict[str, float]:
    return metrics_registry.counters()


__all__ = [
    "MetricsRegistry",
    "count_calls",
    "get_counters",
    "get_metrics",
    "inc_counter",
    "instrumentation_enabled",
    "measure_time",
    "metrics_registry",
    "set_instrumentation_enabled",
    "timer",
]
