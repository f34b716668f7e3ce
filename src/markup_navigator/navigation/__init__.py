"""Structural navigation over markup trees.

Key Components:
    NavigationEngine: Parent / first-child / sibling / inside moves
    DescentMemory: Per-parent LIFO of positions the cursor ascended from
    TreeCache: Per-document tree and memory, invalidated on version change
    NavigationError: Base of the no-destination error taxonomy
"""

from .cache import CachedDocument, TreeCache
from .engine import Direction, LineEndPredicate, NavigationEngine
from .errors import NavigationError, NoActiveDocument, NoEligibleTarget, NoNodeAtOffset
from .memory import DescentMemory, MemoryEntry

__all__ = [
    "CachedDocument",
    "DescentMemory",
    "Direction",
    "LineEndPredicate",
    "MemoryEntry",
    "NavigationEngine",
    "NavigationError",
    "NoActiveDocument",
    "NoEligibleTarget",
    "NoNodeAtOffset",
    "TreeCache",
]
