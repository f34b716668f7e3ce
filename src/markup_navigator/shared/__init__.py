"""Shared utilities for markup navigation.

This module provides the configuration objects, diagnostic and metric result
types, and the logging helper used across all layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from .config import (
    CacheConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    NavigationConfig,
    NavigatorConfig,
    TokenizerConfig,
    TreeConfig,
)
from .logging import (
    ContextLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "CacheConfig",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "NavigationConfig",
    "NavigatorConfig",
    "TokenizerConfig",
    "TreeConfig",
    "ContextLogger",
    "get_logger",
]
