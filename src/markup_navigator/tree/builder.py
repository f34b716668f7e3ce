"""Tree building for markup navigation.

This module implements the tree builder that turns the tag token stream into a
single rooted :class:`~markup_navigator.tree.node.MarkupTree` with exact
offsets, tolerating any malformed input.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from markup_navigator.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    NavigatorConfig,
    PerformanceMetrics,
    get_logger,
)
from markup_navigator.tokenization import (
    MarkupTokenizer,
    TagToken,
    TokenizationResult,
)

from .attributes import parse_attributes
from .node import MarkupTree, Node, NodeKind

ROOT_LABEL = "root"


def _root_for(text: str) -> Node:
    return Node(kind=NodeKind.TAG, label=ROOT_LABEL, start=0, end=len(text) - 1)


@dataclass
class BuildResult:
    """Result of a tree building operation.

    Building never raises: malformations are recorded as diagnostics and an
    internal failure yields a root-only tree with ``success`` set to False.
    """

    tree: MarkupTree = field(default_factory=lambda: MarkupTree(_root_for("")))
    success: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    tokenization_result: Optional[TokenizationResult] = None
    document_id: Optional[str] = None

    @property
    def node_count(self) -> int:
        return len(self.tree)

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            document_id=self.document_id,
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def get_diagnostics_by_kind(self, kind: str) -> List[DiagnosticEntry]:
        """Get diagnostics whose ``details["kind"]`` equals ``kind``."""
        return [diag for diag in self.diagnostics if diag.kind == kind]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the build."""
        by_severity: Dict[str, int] = {}
        for diag in self.diagnostics:
            by_severity[diag.severity.name] = by_severity.get(diag.severity.name, 0) + 1

        return {
            "success": self.success,
            "version": self.tree.version,
            "node_count": self.node_count,
            "diagnostics_by_severity": by_severity,
            "performance": self.performance.to_dict(),
        }


@dataclass
class _Frame:
    node: Node
    tag_name: str


class MarkupTreeBuilder:
    """Builds markup trees from tag token streams.

    The builder keeps an explicit stack of open frames, starting with the
    synthetic root. Tag nodes are attached to their parent only once their
    closing tag is seen; frames still open at the end are left out of the tree
    unless ``TreeConfig.flush_unclosed_at_eof`` is set.
    """

    def __init__(
        self,
        config: Optional[NavigatorConfig] = None,
        document_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Navigator configuration (defaults to the reference preset)
            document_id: Identity of the document, used for logs and diagnostics
        """
        self.config = config or NavigatorConfig()
        self.document_id = document_id
        self.tokenizer = MarkupTokenizer(self.config.tokenizer)
        self.logger = get_logger(__name__, document_id, "markup_tree_builder")

        self._stack: List[_Frame] = []
        self._last_index = 0
        self._depth_warned = False

    def build(self, text: str, version: int = 0) -> BuildResult:
        """Build the markup tree for ``text``.

        Args:
            text: Document text
            version: Document version the tree is built from

        Returns:
            BuildResult containing the tree, diagnostics and metrics
        """
        start_time = time.perf_counter()
        result = BuildResult(document_id=self.document_id)

        self.logger.debug(
            "Starting tree building",
            extra={"content_length": len(text), "version": version},
        )

        try:
            tokenization_result = self.tokenizer.tokenize(text)
            result.tokenization_result = tokenization_result
            root = self._build_root(text, tokenization_result.tokens, result)
            result.tree = MarkupTree(root, text=text, version=version)

            result.performance.tokens_generated = tokenization_result.token_count

        except Exception as e:
            # Never-fail: fall back to a root-only tree
            self.logger.exception(
                "Tree building failed",
                extra={"content_length": len(text), "version": version},
            )
            result.success = False
            result.tree = MarkupTree(_root_for(text), text=text, version=version)
            result.add_diagnostic(
                DiagnosticSeverity.CRITICAL,
                f"Tree building failed: {e}",
                "markup_tree_builder",
                details={"kind": "build_failure", "exception_type": type(e).__name__},
            )

        processing_time = (time.perf_counter() - start_time) * 1000
        result.performance.processing_time_ms = processing_time
        result.performance.characters_processed = len(text)
        result.performance.nodes_created = len(result.tree)

        self.logger.debug(
            "Tree building completed",
            extra={
                "node_count": len(result.tree),
                "diagnostic_count": len(result.diagnostics),
                "processing_time_ms": processing_time,
            },
        )

        return result

    def _reset_state(self, root: Node) -> None:
        self._stack = [_Frame(root, ROOT_LABEL)]
        self._last_index = 0
        self._depth_warned = False

    def _build_root(
        self, text: str, tokens: List[TagToken], result: BuildResult
    ) -> Node:
        root = _root_for(text)
        self._reset_state(root)

        for token in tokens:
            self._emit_gap_text(text, token.start)

            if token.is_closing:
                self._close(token, result)
            elif token.creates_leaf:
                self._top.children.append(Node(
                    kind=NodeKind.SELF_CLOSING_TAG,
                    label=token.name,
                    start=token.start,
                    end=token.end,
                    children=parse_attributes(token.attribute_text, token.attribute_start),
                ))
            else:
                self._open(token, result)

            self._last_index = token.end + 1

        self._emit_gap_text(text, len(text))

        if len(self._stack) > 1 and self.config.tree.flush_unclosed_at_eof:
            self._flush_unclosed(result)

        return root

    @property
    def _top(self) -> Node:
        return self._stack[-1].node

    def _emit_gap_text(self, text: str, upto: int) -> None:
        """Emit a text node for ``text[last_index:upto]`` if it is non-empty."""
        if upto > self._last_index:
            self._top.children.append(Node(
                kind=NodeKind.TEXT,
                label=text[self._last_index:upto],
                start=self._last_index,
                end=upto - 1,
            ))

    def _open(self, token: TagToken, result: BuildResult) -> None:
        node = Node(
            kind=NodeKind.TAG,
            label=token.name,
            start=token.start,
            end=token.end,
            children=parse_attributes(token.attribute_text, token.attribute_start),
        )
        self._stack.append(_Frame(node, token.name))

        if len(self._stack) - 1 > self.config.tree.max_tree_depth and not self._depth_warned:
            self._depth_warned = True
            self._record(
                result,
                DiagnosticSeverity.WARNING,
                f"Nesting depth exceeds {self.config.tree.max_tree_depth}",
                token,
                {"kind": "max_depth_exceeded", "depth": len(self._stack) - 1},
            )

    def _close(self, token: TagToken, result: BuildResult) -> None:
        # The root frame (index 0) is never matched.
        for index in range(len(self._stack) - 1, 0, -1):
            if self._stack[index].tag_name == token.name:
                break
        else:
            self._record(
                result,
                DiagnosticSeverity.WARNING,
                f"Unmatched closing tag </{token.name}> ignored",
                token,
                {"kind": "unmatched_close_tag", "tag": token.name},
            )
            return

        closed = self._stack[index].node
        closed.end = token.end
        self._stack[index - 1].node.children.append(closed)

        discarded = [frame.tag_name for frame in self._stack[index + 1:]]
        del self._stack[index:]

        if discarded:
            self._record(
                result,
                DiagnosticSeverity.INFO,
                f"Discarded {len(discarded)} unclosed element(s) inside <{token.name}>",
                token,
                {"kind": "discarded_unclosed", "tags": discarded},
            )

    def _flush_unclosed(self, result: BuildResult) -> None:
        flushed = []
        while len(self._stack) > 1:
            frame = self._stack.pop()
            # Unclosed spans reach to the end of their last descendant.
            if frame.node.children:
                frame.node.end = max(frame.node.end, frame.node.children[-1].end)
            self._top.children.append(frame.node)
            flushed.append(frame.tag_name)

        self._record(
            result,
            DiagnosticSeverity.INFO,
            f"Flushed {len(flushed)} unclosed element(s) at end of input",
            None,
            {"kind": "flushed_unclosed", "tags": flushed},
        )

    def _record(
        self,
        result: BuildResult,
        severity: DiagnosticSeverity,
        message: str,
        token: Optional[TagToken],
        details: Dict[str, Any]
    ) -> None:
        if not self.config.tree.record_diagnostics:
            return
        position = {"offset": token.start} if token is not None else None
        result.add_diagnostic(severity, message, "markup_tree_builder", position, details)
