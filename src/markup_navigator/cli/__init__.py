"""Command-line interface for Markup Navigator.

This module provides the markup-nav tool for dumping node trees, replaying
cursor moves against a file and profiling.
"""

from .main import main

__all__ = ["main"]
