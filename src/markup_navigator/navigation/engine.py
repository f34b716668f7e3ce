"""Navigation engine.

Computes cursor destinations for the structural moves (parent, first child,
sibling, inside) over a built :class:`~markup_navigator.tree.MarkupTree`.
Every method returns the destination offset or raises a
:class:`~markup_navigator.navigation.errors.NavigationError` subclass; the
engine itself never touches the host editor.
"""

from enum import Enum, auto
from typing import Callable, List, Optional

from markup_navigator.shared import NavigationConfig
from markup_navigator.tree import (
    ATTRIBUTE_KINDS,
    CONTENT_KINDS,
    MarkupTree,
    Node,
    NodeKind,
    locate,
)

from .errors import NoEligibleTarget, NoNodeAtOffset
from .memory import DescentMemory

LineEndPredicate = Callable[[int], bool]


def _never_line_end(offset: int) -> bool:
    return False


class Direction(Enum):
    """Sibling traversal direction."""

    NEXT = auto()
    PREVIOUS = auto()

    @property
    def step(self) -> int:
        return 1 if self is Direction.NEXT else -1


class NavigationEngine:
    """Structural cursor moves with skip rules and descent memory."""

    def __init__(self, config: Optional[NavigationConfig] = None) -> None:
        self.config = config or NavigationConfig()

    def _resolve(self, tree: MarkupTree, offset: int) -> Node:
        node = locate(tree, offset)
        if node is None:
            raise NoNodeAtOffset(f"No node at offset {offset}", offset=offset)
        return node

    def _line_end(self, is_line_end: Optional[LineEndPredicate]) -> LineEndPredicate:
        if is_line_end is None or not self.config.skip_line_end_nodes:
            return _never_line_end
        return is_line_end

    def to_parent(self, tree: MarkupTree, memory: DescentMemory, offset: int) -> int:
        """Move to the start of the enclosing node.

        The current position is remembered under the parent so a later
        :meth:`to_first_child` or :meth:`to_inside` can come back to it.
        """
        node = self._resolve(tree, offset)
        parent = tree.parent_of(node)
        if parent is None:
            raise NoEligibleTarget(f"{node!r} has no parent", offset=offset)

        if self.config.enable_descent_memory:
            memory.push(parent.start, offset, node.kind)
        return parent.start

    def to_first_child(
        self,
        tree: MarkupTree,
        memory: DescentMemory,
        offset: int,
        is_line_end: Optional[LineEndPredicate] = None
    ) -> int:
        """Move down one level.

        On an attribute this enters its value. Otherwise a remembered content
        position wins, then the first content child that does not start at a
        line end, then the first content child.
        """
        node = self._resolve(tree, offset)
        if not node.children:
            raise NoEligibleTarget(f"{node!r} has no children", offset=offset)

        if node.kind is NodeKind.ATTRIBUTE:
            value = node.value_node()
            if value is None:
                raise NoEligibleTarget(f"Attribute {node.label!r} has no value", offset=offset)
            return value.start

        if self.config.enable_descent_memory:
            entry = memory.pop_latest(node.start, CONTENT_KINDS)
            if entry is not None:
                return entry.offset

        candidates = [child for child in node.children if not child.kind.is_attribute]
        if not candidates:
            raise NoEligibleTarget(f"{node!r} has only attribute children", offset=offset)

        line_end = self._line_end(is_line_end)
        for child in candidates:
            if not line_end(child.start):
                return child.start
        return candidates[0].start

    def to_sibling(
        self,
        tree: MarkupTree,
        offset: int,
        direction: Direction,
        is_line_end: Optional[LineEndPredicate] = None
    ) -> int:
        """Cycle to the next or previous sibling, wrapping around."""
        node = self._resolve(tree, offset)
        step = direction.step

        if node.kind is NodeKind.ATTRIBUTE_VALUE:
            attribute = tree.parent_of(node)
            owner = tree.parent_of(attribute) if attribute is not None else None
            if attribute is None or owner is None:
                raise NoEligibleTarget("Detached attribute value", offset=offset)
            attributes = owner.attributes()
            index = attributes.index(attribute)
            for _ in range(len(attributes)):
                index = (index + step) % len(attributes)
                value = attributes[index].value_node()
                if value is not None:
                    return value.start
            raise NoEligibleTarget("No sibling attribute has a value", offset=offset)

        if node.kind is NodeKind.ATTRIBUTE:
            owner = tree.parent_of(node)
            if owner is None:
                raise NoEligibleTarget("Detached attribute", offset=offset)
            attributes = owner.attributes()
            index = (attributes.index(node) + step) % len(attributes)
            return attributes[index].start

        parent = tree.parent_of(node)
        if parent is None:
            raise NoEligibleTarget(f"{node!r} has no parent", offset=offset)
        siblings: List[Node] = parent.children
        if len(siblings) < 2:
            raise NoEligibleTarget(f"{node!r} has no siblings", offset=offset)

        line_end = self._line_end(is_line_end)
        index = siblings.index(node)
        for _ in range(len(siblings)):
            index = (index + step) % len(siblings)
            candidate = siblings[index]
            if line_end(candidate.start):
                continue
            if candidate.kind.is_attribute != node.kind.is_attribute:
                continue
            return candidate.start
        raise NoEligibleTarget(f"No eligible sibling for {node!r}", offset=offset)

    def to_inside(self, tree: MarkupTree, memory: DescentMemory, offset: int) -> int:
        """Move into a node's attributes.

        A remembered attribute position wins, otherwise the first child
        (usually the first attribute) is entered without line-end filtering.
        """
        node = self._resolve(tree, offset)

        if self.config.enable_descent_memory:
            entry = memory.pop_latest(node.start, ATTRIBUTE_KINDS)
            if entry is not None:
                return entry.offset

        if not node.children:
            raise NoEligibleTarget(f"{node!r} has no children", offset=offset)
        return node.children[0].start
