"""Point-in-tree and structural queries over a built markup tree."""

from typing import List, Optional, Union

from .node import MarkupTree, Node


def locate(tree: Union[MarkupTree, Node], offset: int) -> Optional[Node]:
    """Return the innermost node whose span contains ``offset``.

    At every level the first child containing the offset is descended into.
    The starting node itself is never returned, so an offset that falls in no
    child's span (for example beyond the end of the text) yields None.
    """
    node = tree.root if isinstance(tree, MarkupTree) else tree
    found: Optional[Node] = None
    while True:
        for child in node.children:
            if child.start <= offset <= child.end:
                found = node = child
                break
        else:
            return found


def parent_of(tree: MarkupTree, node: Node) -> Optional[Node]:
    """Return the structural parent of ``node`` within ``tree``.

    Resolved through the tree's parent-index table; None for the root and for
    nodes that are not part of ``tree``.
    """
    return tree.parent_of(node)


def siblings_of(tree: MarkupTree, node: Node) -> List[Node]:
    """Return the children of ``node``'s parent, ``node`` included."""
    parent = tree.parent_of(node)
    if parent is None:
        return []
    return parent.children
