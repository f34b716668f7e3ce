"""Tests for the navigation engine."""

import pytest

from markup_navigator.api import line_bounds
from markup_navigator.navigation import (
    DescentMemory,
    Direction,
    NavigationEngine,
    NoEligibleTarget,
    NoNodeAtOffset,
)
from markup_navigator.shared import NavigationConfig
from markup_navigator.tree import MarkupTree, MarkupTreeBuilder, NodeKind

WALKTHROUGH = '<div><p>Hi</p><span id="x"></span></div>'
LIST = "<ul>\n  <li>a</li>\n</ul>"
SIBLINGS = "<r><a></a><b></b><c></c></r>"


def build(text: str) -> MarkupTree:
    return MarkupTreeBuilder().build(text).tree


def line_end_predicate(text: str):
    def is_line_end(offset: int) -> bool:
        return offset == line_bounds(text, offset)[1]
    return is_line_end


@pytest.fixture
def engine() -> NavigationEngine:
    return NavigationEngine()


@pytest.fixture
def memory() -> DescentMemory:
    return DescentMemory()


class TestWalkthrough:
    """Test the full parent/child/sibling/inside walkthrough."""

    def test_walkthrough(self, engine, memory):
        tree = build(WALKTHROUGH)
        is_line_end = line_end_predicate(WALKTHROUGH)

        offset = engine.to_parent(tree, memory, 8)
        assert offset == 5  # <p>

        offset = engine.to_parent(tree, memory, offset)
        assert offset == 0  # <div>

        offset = engine.to_first_child(tree, memory, offset, is_line_end)
        assert offset == 5  # restored <p>

        offset = engine.to_sibling(tree, offset, Direction.NEXT, is_line_end)
        assert offset == 14  # <span id="x">

        offset = engine.to_inside(tree, memory, offset)
        assert offset == 20  # id

        offset = engine.to_sibling(tree, offset, Direction.NEXT, is_line_end)
        assert offset == 20  # single attribute cycles to itself


class TestToParent:
    """Test moving to the enclosing node."""

    def test_records_position_under_parent(self, engine, memory):
        tree = build(WALKTHROUGH)

        assert engine.to_parent(tree, memory, 9) == 5
        assert memory.peek(5)[0].offset == 9
        assert memory.peek(5)[0].kind is NodeKind.TEXT

    def test_from_attribute_value(self, engine, memory):
        tree = build(WALKTHROUGH)
        assert engine.to_parent(tree, memory, 24) == 20

    def test_top_level_node_goes_to_root(self, engine, memory):
        tree = build("ab<p></p>")
        assert engine.to_parent(tree, memory, 2) == 0

    def test_no_node_at_offset(self, engine, memory):
        tree = build(WALKTHROUGH)
        with pytest.raises(NoNodeAtOffset) as exc_info:
            engine.to_parent(tree, memory, len(WALKTHROUGH))
        assert exc_info.value.offset == len(WALKTHROUGH)

    def test_memory_disabled(self, memory):
        engine = NavigationEngine(NavigationConfig(enable_descent_memory=False))
        tree = build(WALKTHROUGH)

        engine.to_parent(tree, memory, 8)
        assert len(memory) == 0


class TestToFirstChild:
    """Test moving down one level."""

    def test_first_content_child(self, engine, memory):
        tree = build(WALKTHROUGH)
        assert engine.to_first_child(tree, memory, 0) == 5

    def test_skips_attributes(self, engine, memory):
        tree = build('<p class="c">body</p>')
        assert engine.to_first_child(tree, memory, 0) == 13

    def test_attribute_enters_value(self, engine, memory):
        tree = build(WALKTHROUGH)
        assert engine.to_first_child(tree, memory, 20) == 24

    def test_leaf_has_no_child(self, engine, memory):
        tree = build(WALKTHROUGH)
        with pytest.raises(NoEligibleTarget):
            engine.to_first_child(tree, memory, 8)

    def test_only_attribute_children(self, engine, memory):
        tree = build('<img src="a.png">')
        with pytest.raises(NoEligibleTarget):
            engine.to_first_child(tree, memory, 0)

    def test_skips_child_at_line_end(self, engine, memory):
        tree = build(LIST)
        assert engine.to_first_child(tree, memory, 0, line_end_predicate(LIST)) == 7

    def test_line_end_skipping_disabled(self, memory):
        engine = NavigationEngine(NavigationConfig(skip_line_end_nodes=False))
        tree = build(LIST)
        assert engine.to_first_child(tree, memory, 0, line_end_predicate(LIST)) == 4

    def test_falls_back_to_first_child_when_all_at_line_end(self, engine, memory):
        text = "<p>\n</p>"
        tree = build(text)
        assert engine.to_first_child(tree, memory, 0, line_end_predicate(text)) == 3

    def test_descent_restores_last_position(self, engine, memory):
        tree = build("<r><a></a><b></b><c></c></r>")
        # Cursor on <c>, go up to <r>, then come back down
        assert engine.to_parent(tree, memory, 17) == 0
        assert engine.to_first_child(tree, memory, 0) == 17
        # Memory entry consumed: the next descent picks the first child
        assert engine.to_first_child(tree, memory, 0) == 3

    def test_attribute_memory_ignored_by_first_child(self, engine, memory):
        tree = build(WALKTHROUGH)

        assert engine.to_parent(tree, memory, 20) == 14
        with pytest.raises(NoEligibleTarget):
            engine.to_first_child(tree, memory, 14)
        assert engine.to_inside(tree, memory, 14) == 20


class TestToSibling:
    """Test cyclic sibling moves."""

    def test_cycle_closes(self, engine):
        tree = build(SIBLINGS)

        offsets = []
        offset = 3
        for _ in range(3):
            offset = engine.to_sibling(tree, offset, Direction.NEXT)
            offsets.append(offset)
        assert offsets == [10, 17, 3]

    def test_previous_wraps(self, engine):
        tree = build(SIBLINGS)
        assert engine.to_sibling(tree, 3, Direction.PREVIOUS) == 17
        assert engine.to_sibling(tree, 17, Direction.PREVIOUS) == 10

    def test_next_then_previous_is_identity(self, engine):
        tree = build(SIBLINGS)
        for start in (3, 10, 17):
            offset = engine.to_sibling(tree, start, Direction.NEXT)
            assert engine.to_sibling(tree, offset, Direction.PREVIOUS) == start

    def test_only_child_has_no_sibling(self, engine):
        tree = build("<a><b></b></a>")
        with pytest.raises(NoEligibleTarget):
            engine.to_sibling(tree, 3, Direction.NEXT)

    def test_content_skips_attributes(self, engine):
        tree = build('<p id="a">x<b></b></p>')
        # Text "x" at 10, <b> at 11; the attribute at 3 is never a target
        assert engine.to_sibling(tree, 10, Direction.NEXT) == 11
        assert engine.to_sibling(tree, 11, Direction.NEXT) == 10

    def test_skips_siblings_at_line_end(self, engine):
        tree = build(LIST)
        # The only eligible sibling of <li> is itself
        assert engine.to_sibling(tree, 7, Direction.NEXT, line_end_predicate(LIST)) == 7

    def test_attribute_cycle(self, engine):
        text = '<x a="1" b c="3"/>'
        tree = build(text)
        assert engine.to_sibling(tree, 3, Direction.NEXT) == 9
        assert engine.to_sibling(tree, 9, Direction.NEXT) == 11
        assert engine.to_sibling(tree, 11, Direction.NEXT) == 3
        assert engine.to_sibling(tree, 3, Direction.PREVIOUS) == 11

    def test_value_cycle_skips_attributes_without_value(self, engine):
        text = '<x a="1" b c="3"/>'
        tree = build(text)
        assert engine.to_sibling(tree, 6, Direction.NEXT) == 14
        assert engine.to_sibling(tree, 14, Direction.NEXT) == 6
        assert engine.to_sibling(tree, 6, Direction.PREVIOUS) == 14

    def test_top_level_siblings(self, engine):
        tree = build("<a></a><b></b>")
        assert engine.to_sibling(tree, 0, Direction.NEXT) == 7


class TestToInside:
    """Test entering attributes."""

    def test_first_child(self, engine, memory):
        tree = build(WALKTHROUGH)
        assert engine.to_inside(tree, memory, 14) == 20

    def test_enters_first_child_even_if_content(self, engine, memory):
        tree = build(WALKTHROUGH)
        assert engine.to_inside(tree, memory, 5) == 8

    def test_memory_restores_attribute(self, engine, memory):
        text = '<x a="1" b c="3"/>'
        tree = build(text)

        assert engine.to_parent(tree, memory, 11) == 0
        assert engine.to_inside(tree, memory, 0) == 11
        assert engine.to_inside(tree, memory, 0) == 3

    def test_content_memory_ignored(self, engine, memory):
        tree = build(WALKTHROUGH)
        engine.to_parent(tree, memory, 8)
        assert engine.to_inside(tree, memory, 5) == 8
        assert len(memory) == 1

    def test_leaf(self, engine, memory):
        tree = build(WALKTHROUGH)
        with pytest.raises(NoEligibleTarget):
            engine.to_inside(tree, memory, 24)


class TestIdempotence:
    """Test that identical inputs give identical results."""

    def test_same_tree_same_answers(self, engine):
        tree = build(WALKTHROUGH)
        for offset in range(len(WALKTHROUGH)):
            for direction in Direction:
                try:
                    first = engine.to_sibling(tree, offset, direction)
                except NoEligibleTarget:
                    first = None
                try:
                    second = engine.to_sibling(tree, offset, direction)
                except NoEligibleTarget:
                    second = None
                assert first == second


class TestRoundTrip:
    """Test that leaving a node and coming back never overshoots it."""

    def test_parent_then_child_never_lands_past_start(self, engine):
        text = "<r>\n  <a></a>\n  <b>x</b>\n</r>"
        tree = build(text)

        for node in tree.walk():
            if node is tree.root or not node.kind.is_content or node.start == 0:
                continue
            parent_start = engine.to_parent(tree, DescentMemory(), node.start)
            landed = engine.to_first_child(tree, DescentMemory(), parent_start)
            assert landed <= node.start
