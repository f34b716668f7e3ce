"""Per-document tree cache.

Each open document has at most one cached tree, keyed by document identity
and tagged with the version it was built from, plus the descent memory that
belongs to that tree. When the version changes the tree is rebuilt and the
memory starts empty again; the two are always replaced together.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from markup_navigator.shared import NavigatorConfig, PerformanceMetrics, get_logger
from markup_navigator.tree import BuildResult, MarkupTree, MarkupTreeBuilder

from .memory import DescentMemory

BuilderFactory = Callable[[NavigatorConfig, Optional[str]], MarkupTreeBuilder]


@dataclass
class CachedDocument:
    """Cache entry: one built tree and its descent memory."""

    document_id: str
    version: int
    build_result: BuildResult
    memory: DescentMemory = field(default_factory=DescentMemory)

    @property
    def tree(self) -> MarkupTree:
        return self.build_result.tree


class TreeCache:
    """Memoizes built trees per document, invalidated on version change."""

    def __init__(
        self,
        config: Optional[NavigatorConfig] = None,
        builder_factory: Optional[BuilderFactory] = None
    ) -> None:
        self.config = config or NavigatorConfig()
        self._builder_factory = builder_factory or MarkupTreeBuilder
        self._documents: "OrderedDict[str, CachedDocument]" = OrderedDict()
        self.metrics = PerformanceMetrics()
        self.logger = get_logger(__name__, None, "tree_cache")

    def get(self, document_id: str, text: str, version: int) -> CachedDocument:
        """Return the cache entry for ``document_id`` at ``version``.

        Args:
            document_id: Identity of the document
            text: Current document text
            version: Current document version

        Returns:
            The cached entry if its version matches, otherwise a freshly built
            entry with empty descent memory
        """
        cached = self._documents.get(document_id)
        if cached is not None and cached.version == version:
            self.metrics.cache_hits += 1
            self._documents.move_to_end(document_id)
            self.logger.bind(document_id).debug(
                "Tree cache hit", extra={"version": version}
            )
            return cached

        self.metrics.cache_misses += 1
        builder = self._builder_factory(self.config, document_id)
        build_result = builder.build(text, version)
        self.metrics.processing_time_ms += build_result.performance.processing_time_ms
        self.metrics.characters_processed += build_result.performance.characters_processed
        self.metrics.tokens_generated += build_result.performance.tokens_generated
        self.metrics.nodes_created += build_result.performance.nodes_created

        entry = CachedDocument(document_id, version, build_result)
        self._documents[document_id] = entry
        self._documents.move_to_end(document_id)

        self.logger.bind(document_id).info(
            "Tree rebuilt",
            extra={
                "version": version,
                "previous_version": cached.version if cached is not None else None,
                "node_count": build_result.node_count,
            },
        )

        self._evict()
        return entry

    def _evict(self) -> None:
        limit = self.config.cache.max_documents
        if limit is None:
            return
        while len(self._documents) > limit:
            document_id, _ = self._documents.popitem(last=False)
            self.logger.bind(document_id).debug("Evicted least recently used document")

    def peek(self, document_id: str) -> Optional[CachedDocument]:
        """Return the entry for ``document_id`` without touching LRU order."""
        return self._documents.get(document_id)

    def invalidate(self, document_id: str) -> bool:
        """Drop the tree and memory of one document."""
        return self._documents.pop(document_id, None) is not None

    def clear(self) -> None:
        self._documents.clear()

    def versions(self) -> Dict[str, int]:
        return {doc_id: entry.version for doc_id, entry in self._documents.items()}

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def __len__(self) -> int:
        return len(self._documents)
