"""Navigation API for markup documents.

This module provides the :class:`MarkupNavigator` facade that wires a host
editor to the tree cache and the navigation engine, plus the module-level
:func:`build_tree` helper for callers that only need the tree.
"""

from typing import Any, Callable, Dict, Optional

from markup_navigator.navigation import (
    CachedDocument,
    Direction,
    NavigationEngine,
    NavigationError,
    NoActiveDocument,
    TreeCache,
)
from markup_navigator.shared import NavigatorConfig, get_logger
from markup_navigator.tree import BuildResult, MarkupTreeBuilder

from .host import TextHost

HostProvider = Callable[[], Optional[TextHost]]
Move = Callable[[CachedDocument, int, TextHost], int]

COMMAND_PREFIX = "markup-nav"


def build_tree(
    text: str,
    version: int = 0,
    config: Optional[NavigatorConfig] = None,
    document_id: Optional[str] = None
) -> BuildResult:
    """Build the markup tree for ``text``.

    Args:
        text: Markup text
        version: Version number recorded on the tree
        config: Optional configuration (defaults to the reference preset)
        document_id: Optional document identity for logs and diagnostics

    Returns:
        BuildResult with the tree, diagnostics and metrics

    Examples:
        >>> result = build_tree('<img src="a.png">')
        >>> [child.label for child in result.tree.root.children]
        ['img']
    """
    return MarkupTreeBuilder(config, document_id).build(text, version)


class MarkupNavigator:
    """Structural cursor navigation for the host's active document.

    Every entry point either moves the cursor and returns the new offset, or
    leaves the cursor untouched and returns None.

    Examples:
        >>> from markup_navigator.api.host import TextBuffer
        >>> buffer = TextBuffer("<div><p>Hi</p></div>", cursor_offset=8)
        >>> navigator = MarkupNavigator(lambda: buffer)
        >>> navigator.to_parent()
        5
        >>> navigator.to_parent()
        0
        >>> navigator.to_first_child()
        5
    """

    def __init__(
        self,
        host_provider: HostProvider,
        config: Optional[NavigatorConfig] = None,
        cache: Optional[TreeCache] = None
    ) -> None:
        """Initialize navigator.

        Args:
            host_provider: Returns the active host, or None when no document
                is active
            config: Navigator configuration (defaults to the reference preset)
            cache: Tree cache to use; a private one is created by default
        """
        self.config = config or NavigatorConfig()
        self._host_provider = host_provider
        self.cache = cache or TreeCache(self.config)
        self.engine = NavigationEngine(self.config.navigation)
        self.logger = get_logger(__name__, None, "markup_navigator")

        self._operations = 0
        self._moves = 0
        self._no_ops: Dict[str, int] = {}

    def _run(self, command: str, move: Move) -> Optional[int]:
        host = self._host_provider()
        document_id = host.document_id if host is not None else None
        logger = self.logger.bind(document_id)
        self._operations += 1
        self.cache.metrics.navigation_operations += 1

        try:
            if host is None:
                raise NoActiveDocument("No active document")
            entry = self.cache.get(host.document_id, host.get_text(), host.get_version())
            offset = host.get_cursor_offset()
            target = move(entry, offset, host)

        except NavigationError as e:
            reason = type(e).__name__
            self._no_ops[reason] = self._no_ops.get(reason, 0) + 1
            logger.debug(
                "Navigation skipped",
                extra={"command": command, "reason": reason, "offset": e.offset},
            )
            return None

        except Exception:
            # Never-fail: the host must not see navigation failures
            self._no_ops["InternalError"] = self._no_ops.get("InternalError", 0) + 1
            logger.exception("Navigation failed", extra={"command": command})
            return None

        host.set_cursor_offset(target)
        if self.config.navigation.reveal_after_move:
            host.reveal_offset(target)
        self._moves += 1

        logger.debug(
            "Cursor moved",
            extra={"command": command, "from_offset": offset, "to_offset": target},
        )
        return target

    def to_parent(self) -> Optional[int]:
        """Jump to the start of the enclosing node."""
        return self._run(
            "jumpParent",
            lambda entry, offset, host: self.engine.to_parent(
                entry.tree, entry.memory, offset
            ),
        )

    def to_first_child(self) -> Optional[int]:
        """Jump into the node, restoring the last position when remembered."""
        return self._run(
            "jumpChild",
            lambda entry, offset, host: self.engine.to_first_child(
                entry.tree, entry.memory, offset, host.is_line_end
            ),
        )

    def to_next_sibling(self) -> Optional[int]:
        """Jump to the next sibling, wrapping around."""
        return self._run(
            "jumpSiblingNext",
            lambda entry, offset, host: self.engine.to_sibling(
                entry.tree, offset, Direction.NEXT, host.is_line_end
            ),
        )

    def to_previous_sibling(self) -> Optional[int]:
        """Jump to the previous sibling, wrapping around."""
        return self._run(
            "jumpSiblingPrev",
            lambda entry, offset, host: self.engine.to_sibling(
                entry.tree, offset, Direction.PREVIOUS, host.is_line_end
            ),
        )

    def to_inside(self) -> Optional[int]:
        """Jump into the node's attributes."""
        return self._run(
            "jumpInside",
            lambda entry, offset, host: self.engine.to_inside(
                entry.tree, entry.memory, offset
            ),
        )

    def command_table(self) -> Dict[str, Callable[[], Optional[int]]]:
        """Map host command ids to the navigation entry points."""
        return {
            f"{COMMAND_PREFIX}.jumpParent": self.to_parent,
            f"{COMMAND_PREFIX}.jumpChild": self.to_first_child,
            f"{COMMAND_PREFIX}.jumpSiblingNext": self.to_next_sibling,
            f"{COMMAND_PREFIX}.jumpSiblingPrev": self.to_previous_sibling,
            f"{COMMAND_PREFIX}.jumpInside": self.to_inside,
        }

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get navigator usage statistics."""
        return {
            "operations": self._operations,
            "moves": self._moves,
            "no_ops": dict(self._no_ops),
            "cached_documents": len(self.cache),
            "cache": self.cache.metrics.to_dict(),
        }

    def reset_statistics(self) -> None:
        self._operations = 0
        self._moves = 0
        self._no_ops.clear()
