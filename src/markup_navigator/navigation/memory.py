"""Descent memory.

When the cursor moves up to a parent, the position it came from is pushed onto
a LIFO list keyed by the parent's start offset. A later move back down into
that parent restores the most recent matching position instead of jumping to
the first child.
"""

from dataclasses import dataclass
from typing import Collection, Dict, Iterator, List, Optional, Tuple

from markup_navigator.tree import NodeKind


@dataclass(frozen=True)
class MemoryEntry:
    """A remembered cursor position and the kind of node it was on."""

    offset: int
    kind: NodeKind


class DescentMemory:
    """Per-document mapping of parent start offsets to remembered positions."""

    def __init__(self) -> None:
        self._entries: Dict[int, List[MemoryEntry]] = {}

    def push(self, key: int, offset: int, kind: NodeKind) -> None:
        """Remember ``offset`` (on a node of ``kind``) under parent ``key``."""
        self._entries.setdefault(key, []).append(MemoryEntry(offset, kind))

    def pop_latest(
        self, key: int, kinds: Collection[NodeKind]
    ) -> Optional[MemoryEntry]:
        """Remove and return the most recent entry under ``key`` of one of ``kinds``.

        Entries of other kinds stay in place, even when they are more recent.
        """
        entries = self._entries.get(key)
        if not entries:
            return None
        for index in range(len(entries) - 1, -1, -1):
            if entries[index].kind in kinds:
                return entries.pop(index)
        return None

    def peek(self, key: int) -> Tuple[MemoryEntry, ...]:
        """Return the entries under ``key``, oldest first."""
        return tuple(self._entries.get(key, ()))

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return bool(self._entries.get(key))  # type: ignore[arg-type]

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __iter__(self) -> Iterator[int]:
        return (key for key, entries in self._entries.items() if entries)
