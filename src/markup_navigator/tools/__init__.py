"""Developer tools for markup navigation.

This module provides performance profiling of the tokenize, build and
navigate layers.
"""

from .profiling import (
    LayerPerformance,
    PerformanceProfiler,
    PerformanceReport,
    ProfilingSession,
    benchmark_configurations,
)

__all__ = [
    "LayerPerformance",
    "PerformanceProfiler",
    "PerformanceReport",
    "ProfilingSession",
    "benchmark_configurations",
]
