"""Utilities: spatial grid, timing and logging setup."""

from .benchmarking import PerformanceStats, Timer, benchmark
from .grid import SCALE, Grid
from .logging_config import setup_logging

__all__ = ["PerformanceStats", "Timer", "benchmark", "SCALE", "Grid", "setup_logging"]
