# src/contactgraph/core/utils/benchmarking.py

import time
import logging
from functools import wraps
from typing import Callable, Dict, List
from dataclasses import dataclass, field
from statistics import median

logger = logging.getLogger(__name__)


@dataclass
class Timer:
    """Context manager for timing code blocks."""

    name: str
    start_time: float = field(default=0.0)
    end_time: float = field(default=0.0)

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        self.end_time = 0.0
        return self

    def __exit__(self, *args) -> None:
        self.end_time = time.perf_counter()

    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.end_time == 0.0:
            return time.perf_counter() - self.start_time
        return self.end_time - self.start_time


def benchmark(func: Callable) -> Callable:
    """Decorator logging the run time of a function at DEBUG level."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        with Timer(func.__name__) as t:
            result = func(*args, **kwargs)
        logger.debug(f"{func.__qualname__} took {t.elapsed():.3f}s")
        return result

    return wrapper


@dataclass
class TimingStats:
    """Statistics for a repeatedly timed operation."""

    name: str
    times: List[float] = field(default_factory=list)

    def add_timing(self, elapsed: float) -> None:
        self.times.append(elapsed)

    @property
    def total_time(self) -> float:
        return sum(self.times)

    @property
    def count(self) -> int:
        return len(self.times)

    @property
    def avg_time(self) -> float:
        return self.total_time / self.count if self.count > 0 else 0.0

    @property
    def median_time(self) -> float:
        return median(self.times) if self.times else 0.0

    def __str__(self) -> str:
        if not self.times:
            return f"{self.name}: No timing data"
        return (
            f"{self.name}: Total: {self.total_time:.2f}s, Count: {self.count}, "
            f"Avg: {self.avg_time:.3f}s, Median: {self.median_time:.3f}s"
        )


class PerformanceStats:
    """Collect timings of named operations, e.g. across a batch of structures."""

    def __init__(self) -> None:
        self.stats: Dict[str, TimingStats] = {}

    def add_timing(self, name: str, elapsed: float) -> None:
        if name not in self.stats:
            self.stats[name] = TimingStats(name=name)
        self.stats[name].add_timing(elapsed)

    def record(self, timer: Timer) -> None:
        self.add_timing(timer.name, timer.elapsed())

    def report(self) -> str:
        if not self.stats:
            return "No performance data collected"
        return "\n".join(str(self.stats[name]) for name in sorted(self.stats))
