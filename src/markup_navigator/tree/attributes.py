"""Attribute sub-parser.

Turns the raw attribute text of an opening tag into ``ATTRIBUTE`` nodes with
exact absolute offsets. Every node downstream cursor placement lands on is
derived from the arithmetic here, so all offsets are inclusive and absolute.
"""

import re
from typing import List

from .node import Node, NodeKind

ATTRIBUTE_PATTERN = re.compile(r'([a-zA-Z0-9-]+)(="([^"]*)")?')


def parse_attributes(attribute_text: str, absolute_offset: int) -> List[Node]:
    """Parse attribute nodes out of a tag's attribute text.

    Args:
        attribute_text: Raw attribute substring of the opening tag, including
            its leading whitespace
        absolute_offset: Document offset at which ``attribute_text`` begins

    Returns:
        One ``ATTRIBUTE`` node per ``name`` or ``name="value"`` occurrence, in
        left-to-right order. A non-empty quoted value becomes the attribute's
        single ``ATTRIBUTE_VALUE`` child.

    Examples:
        >>> [a.label for a in parse_attributes(' id="x" hidden', 4)]
        ['id', 'hidden']
        >>> parse_attributes(' id="x"', 4)[0].children[0].span
        (9, 9)
    """
    nodes: List[Node] = []
    if not attribute_text:
        return nodes

    for match in ATTRIBUTE_PATTERN.finditer(attribute_text):
        full_attr = match.group(0)
        attr_start = absolute_offset + match.start()
        attr_node = Node(
            kind=NodeKind.ATTRIBUTE,
            label=match.group(1),
            start=attr_start,
            end=attr_start + len(full_attr) - 1,
        )

        value = match.group(3)
        if value:
            value_start = attr_start + full_attr.index('"') + 1
            attr_node.children.append(Node(
                kind=NodeKind.ATTRIBUTE_VALUE,
                label=value,
                start=value_start,
                end=value_start + len(value) - 1,
            ))

        nodes.append(attr_node)

    return nodes
