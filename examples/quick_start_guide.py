#!/usr/bin/env python3
"""
Quick Start Guide for Markup Navigator.

Builds a tree for a small HTML fragment, then drives the navigator through
the parent, child, sibling and inside moves the way an editor would.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from markup_navigator import MarkupNavigator, NavigatorConfig, TextBuffer, build_tree
from markup_navigator.tree import locate

DOCUMENT = """<ul class="menu">
  <li><a href="/home">Home</a></li>
  <li><a href="/about" title="About us">About</a></li>
  <li><img src="logo.png" alt=""></li>
</ul>
"""


def describe(buffer: TextBuffer, navigator: MarkupNavigator) -> str:
    offset = buffer.get_cursor_offset()
    line, column = buffer.offset_to_position(offset)
    entry = navigator.cache.peek(buffer.document_id)
    node = locate(entry.tree, offset) if entry is not None else None
    target = f"{node.kind.name} {node.label!r}" if node is not None else "-"
    return f"offset {offset:>3} (line {line}, col {column:>2})  {target}"


def tree_example():
    """Show the tree built for the document."""

    print("🌳 Step 1: Building the tree")
    print("-" * 30)

    result = build_tree(DOCUMENT)
    print(f"✅ Nodes: {result.node_count}")
    print(f"⚠️  Diagnostics: {len(result.diagnostics)}")

    for node in result.tree.walk():
        depth = 0
        parent = result.tree.parent_of(node)
        while parent is not None:
            depth += 1
            parent = result.tree.parent_of(parent)
        print(f"{'  ' * depth}{node!r}")


def navigation_example():
    """Walk the document with the five navigation commands."""

    print("\n🧭 Step 2: Navigating")
    print("-" * 30)

    buffer = TextBuffer(DOCUMENT, document_id="example://menu.html")
    buffer.set_cursor_offset(DOCUMENT.index("About<"))
    navigator = MarkupNavigator(lambda: buffer)
    print(f"start    {describe(buffer, navigator)}")

    commands = navigator.command_table()
    for command in (
        "markup-nav.jumpParent",
        "markup-nav.jumpParent",
        "markup-nav.jumpSiblingNext",
        "markup-nav.jumpSiblingPrev",
        "markup-nav.jumpChild",
        "markup-nav.jumpInside",
        "markup-nav.jumpSiblingNext",
        "markup-nav.jumpChild",
    ):
        moved = commands[command]() is not None
        marker = "→" if moved else "·"
        print(f"{marker} {command.split('.')[-1]:<16} {describe(buffer, navigator)}")

    print(f"\n📊 Statistics: {navigator.statistics['moves']} moves, "
          f"{sum(navigator.statistics['no_ops'].values())} no-ops")


def malformed_example():
    """Show how unclosed tags are handled by the two presets."""

    print("\n🩹 Step 3: Half-typed markup")
    print("-" * 30)

    text = "<div><p>Still typing"
    for config in (NavigatorConfig.reference(), NavigatorConfig.editor_friendly()):
        result = build_tree(text, config=config)
        labels = [node.label for node in result.tree.walk()]
        print(f"{config.name:<16} nodes: {labels}")


if __name__ == "__main__":
    tree_example()
    navigation_example()
    malformed_example()
