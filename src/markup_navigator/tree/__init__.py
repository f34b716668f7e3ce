"""Tree building and querying for markup navigation.

Key Components:
    MarkupTreeBuilder: Builds a rooted node tree from markup text
    MarkupTree: Built tree with a per-build arena and parent-index table
    Node: A tag, self-closing tag, attribute, attribute value or text run
    BuildResult: Tree plus diagnostics and performance metrics
"""

from .attributes import parse_attributes
from .builder import BuildResult, MarkupTreeBuilder
from .node import ATTRIBUTE_KINDS, CONTENT_KINDS, MarkupTree, Node, NodeKind
from .query import locate, parent_of, siblings_of

__all__ = [
    "ATTRIBUTE_KINDS",
    "CONTENT_KINDS",
    "BuildResult",
    "MarkupTree",
    "MarkupTreeBuilder",
    "Node",
    "NodeKind",
    "locate",
    "parent_of",
    "parse_attributes",
    "siblings_of",
]
