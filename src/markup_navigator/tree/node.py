"""Node data model and the built markup tree.

Nodes form a strict single-owner hierarchy: a parent owns its children and no
node stores a reference back to its parent. :class:`MarkupTree` numbers every
reachable node in pre-order (the node's ``node_id``) and keeps a parent-index
table next to the arena, so parent lookup is a derived O(1) query.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, Tuple


class NodeKind(Enum):
    """Kinds of nodes in the markup tree."""

    TAG = auto()
    SELF_CLOSING_TAG = auto()
    ATTRIBUTE = auto()
    ATTRIBUTE_VALUE = auto()
    TEXT = auto()

    @property
    def is_content(self) -> bool:
        """Tags, self-closing tags and text runs."""
        return self in (NodeKind.TAG, NodeKind.SELF_CLOSING_TAG, NodeKind.TEXT)

    @property
    def is_attribute(self) -> bool:
        """Attributes and attribute values."""
        return self in (NodeKind.ATTRIBUTE, NodeKind.ATTRIBUTE_VALUE)


CONTENT_KINDS = frozenset(kind for kind in NodeKind if kind.is_content)
ATTRIBUTE_KINDS = frozenset(kind for kind in NodeKind if kind.is_attribute)


@dataclass(eq=False)
class Node:
    """A single node of the markup tree.

    ``start`` and ``end`` are inclusive offsets. For a ``TAG`` node ``end`` is
    moved to the end of the matching closing tag once one is seen, while
    ``open_end`` keeps the end of the opening token.
    """

    kind: NodeKind
    label: str
    start: int
    end: int
    children: List["Node"] = field(default_factory=list)
    open_end: int = -1
    node_id: int = -1

    def __post_init__(self) -> None:
        if self.open_end < 0:
            self.open_end = self.end

    @property
    def span(self) -> Tuple[int, int]:
        return (self.start, self.end)

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end

    def token_text(self, text: str) -> str:
        """Return the source text of this node's own token."""
        return text[self.start:self.open_end + 1]

    def attributes(self) -> List["Node"]:
        return [child for child in self.children if child.kind is NodeKind.ATTRIBUTE]

    def value_node(self) -> Optional["Node"]:
        """Return the ``ATTRIBUTE_VALUE`` child of an attribute, if any."""
        for child in self.children:
            if child.kind is NodeKind.ATTRIBUTE_VALUE:
                return child
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert node (recursively) to dictionary representation."""
        result: Dict[str, Any] = {
            "kind": self.kind.name,
            "label": self.label,
            "start": self.start,
            "end": self.end,
        }
        if self.open_end != self.end:
            result["open_end"] = self.open_end
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def __repr__(self) -> str:
        return f"Node({self.kind.name}, {self.label!r}, {self.start}..{self.end})"


class MarkupTree:
    """A fully built markup tree with a parent-index table.

    Indexing assigns each node its ``node_id``; nodes must not be added,
    removed or re-spanned afterwards or the parent table goes stale.
    """

    def __init__(self, root: Node, text: str = "", version: int = 0) -> None:
        self.root = root
        self.text = text
        self.version = version
        self.nodes: List[Node] = []
        self._parent_ids: List[Optional[int]] = []
        self._index(root)

    def _index(self, root: Node) -> None:
        # Iterative pre-order walk, children pushed in reverse.
        stack = [(root, None)]
        while stack:
            node, parent_id = stack.pop()
            node.node_id = len(self.nodes)
            self.nodes.append(node)
            self._parent_ids.append(parent_id)
            for child in reversed(node.children):
                stack.append((child, node.node_id))

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        if not isinstance(node, Node):
            return False
        return 0 <= node.node_id < len(self.nodes) and self.nodes[node.node_id] is node

    def walk(self) -> Iterator[Node]:
        """Iterate over all nodes in document (pre-)order."""
        return iter(self.nodes)

    def parent_of(self, node: Node) -> Optional[Node]:
        """Return the parent of ``node``, or None for the root or a foreign node."""
        if node not in self:
            return None
        parent_id = self._parent_ids[node.node_id]
        if parent_id is None:
            return None
        return self.nodes[parent_id]

    def find_all(self, kind: NodeKind, label: Optional[str] = None) -> List[Node]:
        """Find every node of ``kind``, optionally restricted to ``label``."""
        return [
            node for node in self.nodes
            if node.kind is kind and (label is None or node.label == label)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "node_count": len(self.nodes),
            "root": self.root.to_dict(),
        }
