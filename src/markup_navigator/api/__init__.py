"""Public navigation API.

Key Components:
    MarkupNavigator: Editor-facing facade with the five navigation commands
    TextHost: Interface a host editor implements
    TextBuffer: In-memory host used by the command line and the tests
    build_tree: One-shot tree building
"""

from .host import TextBuffer, TextHost, line_bounds
from .navigator import COMMAND_PREFIX, MarkupNavigator, build_tree

__all__ = [
    "COMMAND_PREFIX",
    "MarkupNavigator",
    "TextBuffer",
    "TextHost",
    "build_tree",
    "line_bounds",
]
