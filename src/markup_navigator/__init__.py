"""Markup Navigator.

Structural cursor navigation for HTML/XML-like documents. A forgiving,
never-fail tree builder turns the raw text into a rooted tree with exact
character offsets, and the navigator moves the cursor to the parent, first
child, siblings or attributes of the node under it.

Progressive API Disclosure:
- Level 1: Simple function - build_tree()
- Level 2: Editor facade - MarkupNavigator over a TextHost
- Level 3: Building blocks - MarkupTreeBuilder, NavigationEngine, TreeCache
"""

__version__ = "0.1.0"
__author__ = "Markup Navigator Team"

# Progressive API disclosure - Level 1 and 2
from .api import MarkupNavigator, TextBuffer, TextHost, build_tree

# Building blocks for advanced usage
from .navigation import NavigationEngine, TreeCache

# Configuration classes
from .shared.config import NavigatorConfig

# Core result objects
from .tree import BuildResult, MarkupTree, MarkupTreeBuilder, Node, NodeKind

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple tree building
    "build_tree",

    # Level 2: Editor facade
    "MarkupNavigator",
    "TextHost",
    "TextBuffer",

    # Level 3: Building blocks
    "MarkupTreeBuilder",
    "NavigationEngine",
    "TreeCache",

    # Result objects and data structures
    "BuildResult",
    "MarkupTree",
    "Node",
    "NodeKind",

    # Configuration
    "NavigatorConfig",
]
