"""Performance profiling tools for markup navigation.

Provides timing and memory analysis of the tokenize, build and navigate layers
with JSON reports and simple optimization recommendations.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from markup_navigator.navigation import (
    DescentMemory,
    Direction,
    NavigationEngine,
    NavigationError,
)
from markup_navigator.shared import NavigatorConfig, get_logger
from markup_navigator.tokenization import MarkupTokenizer
from markup_navigator.tree import MarkupTree, MarkupTreeBuilder

LAYER_TOKENIZE = "tokenize"
LAYER_BUILD = "build"
LAYER_NAVIGATE = "navigate"


@dataclass
class LayerPerformance:
    """Performance metrics for a specific processing layer."""

    layer_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    cpu_percent: float
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def ops_per_second(self) -> float:
        duration_s = self.end_time - self.start_time
        return self.operations_count / duration_s if duration_s > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer_name": self.layer_name,
            "duration_ms": self.duration_ms,
            "memory_delta": self.memory_delta,
            "cpu_percent": self.cpu_percent,
            "operations_count": self.operations_count,
            "ops_per_second": self.ops_per_second,
        }


@dataclass
class ProfilingSession:
    """Container for a complete profiling session."""

    session_id: str
    start_time: float
    end_time: float
    input_size: int  # characters
    layers: List[LayerPerformance] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def characters_per_second(self) -> float:
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return self.input_size / duration_s

    def get_layer(self, layer_name: str) -> Optional[LayerPerformance]:
        for layer in self.layers:
            if layer.layer_name == layer_name:
                return layer
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "input_size": self.input_size,
            "total_duration_ms": self.total_duration_ms,
            "characters_per_second": self.characters_per_second,
            "metadata": self.metadata,
            "layers": [layer.to_dict() for layer in self.layers],
        }


@dataclass
class PerformanceReport:
    """Performance analysis report over all recorded sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        """Average processing duration across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    def average_layer_duration_ms(self, layer_name: str) -> float:
        """Average duration of one layer across the sessions that recorded it."""
        durations = [
            layer.duration_ms
            for session in self.sessions
            for layer in session.layers
            if layer.layer_name == layer_name
        ]
        if not durations:
            return 0.0
        return sum(durations) / len(durations)

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to a JSON-serializable dictionary."""
        layer_names: List[str] = []
        for session in self.sessions:
            for layer in session.layers:
                if layer.layer_name not in layer_names:
                    layer_names.append(layer.layer_name)

        return {
            "generation_time": self.generation_time,
            "summary": {
                "session_count": self.session_count,
                "average_duration_ms": self.average_duration_ms,
                "average_layer_duration_ms": {
                    name: self.average_layer_duration_ms(name) for name in layer_names
                },
            },
            "sessions": [session.to_dict() for session in self.sessions],
        }


class PerformanceProfiler:
    """Performance profiler for markup tree building and navigation.

    Examples:
        Whole-document profiling:
        >>> profiler = PerformanceProfiler()
        >>> report = profiler.profile_document("<div><p>Hi</p></div>", iterations=2)
        >>> report.session_count
        2

        Layer-specific profiling:
        >>> profiler = PerformanceProfiler()
        >>> session = profiler.start_session("detailed", input_size=9)
        >>> with profiler.profile_layer(session, "build"):
        ...     result = MarkupTreeBuilder().build("<p>Hi</p>")
        >>> profiler.end_session(session)
        >>> [layer.layer_name for layer in session.layers]
        ['build']
    """

    def __init__(self, enable_memory_tracking: bool = True):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample process RSS around layers
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.current_session: Optional[ProfilingSession] = None
        self.logger = get_logger(__name__, None, "performance_profiler")

    def start_session(self, session_id: str, input_size: int = 0) -> ProfilingSession:
        """Start a new profiling session.

        Args:
            session_id: Unique identifier for the session
            input_size: Size of the input in characters

        Returns:
            ProfilingSession object for tracking
        """
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            input_size=input_size,
        )

        self.current_session = session
        self.logger.info(
            "Started profiling session",
            extra={
                "session_id": session_id,
                "input_size": input_size,
                "memory_tracking": self.enable_memory_tracking,
            },
        )

        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.time()
        self.sessions.append(session)

        if self.current_session is session:
            self.current_session = None

        self.logger.info(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "layer_count": len(session.layers),
            },
        )

    def profile_layer(self, session: ProfilingSession, layer_name: str) -> "LayerProfiler":
        """Return a context manager that profiles one layer into ``session``."""
        return LayerProfiler(self, session, layer_name)

    def add_layer_performance(
        self,
        session: ProfilingSession,
        layer_perf: LayerPerformance
    ) -> None:
        session.layers.append(layer_perf)

        self.logger.debug(
            "Added layer performance data",
            extra={
                "session_id": session.session_id,
                "layer_name": layer_perf.layer_name,
                "duration_ms": layer_perf.duration_ms,
                "memory_delta": layer_perf.memory_delta,
            },
        )

    def profile_document(
        self,
        text: str,
        iterations: int = 5,
        config: Optional[NavigatorConfig] = None,
        session_prefix: str = "document"
    ) -> PerformanceReport:
        """Profile tokenizing, building and navigating ``text``.

        Each iteration records one session with a layer per stage. The
        navigate layer sweeps parent, first-child and both sibling moves from
        the start of every node in the tree.

        Args:
            text: Markup text to profile
            iterations: Number of sessions to record
            config: Navigator configuration (defaults to the reference preset)
            session_prefix: Prefix for the generated session ids

        Returns:
            PerformanceReport over all sessions recorded so far
        """
        if iterations <= 0:
            raise ValueError("iterations must be > 0")

        config = config or NavigatorConfig()
        tokenizer = MarkupTokenizer(config.tokenizer)
        engine = NavigationEngine(config.navigation)

        for iteration in range(iterations):
            session = self.start_session(f"{session_prefix}_{iteration}", len(text))
            session.metadata = {"configuration": config.name, "iteration": iteration}

            with self.profile_layer(session, LAYER_TOKENIZE) as layer:
                layer.operations_count = tokenizer.tokenize(text).token_count

            with self.profile_layer(session, LAYER_BUILD) as layer:
                result = MarkupTreeBuilder(config).build(text)
                layer.operations_count = result.node_count
            session.metadata["diagnostic_count"] = len(result.diagnostics)

            with self.profile_layer(session, LAYER_NAVIGATE) as layer:
                moved, attempted = self._navigation_sweep(engine, result.tree)
                layer.operations_count = attempted
            session.metadata["successful_moves"] = moved

            self.end_session(session)

        return self.generate_report()

    def _navigation_sweep(self, engine: NavigationEngine, tree: MarkupTree):
        memory = DescentMemory()
        moved = attempted = 0
        for node in tree.nodes[1:]:
            moves = (
                lambda: engine.to_parent(tree, memory, node.start),
                lambda: engine.to_first_child(tree, memory, node.start),
                lambda: engine.to_sibling(tree, node.start, Direction.NEXT),
                lambda: engine.to_sibling(tree, node.start, Direction.PREVIOUS),
            )
            for move in moves:
                attempted += 1
                try:
                    move()
                except NavigationError:
                    continue
                moved += 1
        return moved, attempted

    def generate_report(self) -> PerformanceReport:
        return PerformanceReport(
            sessions=self.sessions.copy(),
            generation_time=time.time(),
        )

    def save_report(self, report: PerformanceReport, output_path: Path) -> None:
        """Save performance report to ``output_path`` as JSON."""
        output_path.write_text(json.dumps(report.to_dict(), indent=2))

        self.logger.info(
            "Saved performance report",
            extra={
                "output_path": str(output_path),
                "session_count": report.session_count,
            },
        )

    def get_optimization_recommendations(self, report: PerformanceReport) -> List[str]:
        """Generate optimization recommendations based on performance data."""
        if not report.sessions:
            return ["No profiling data available for analysis"]

        recommendations = []
        avg_duration = report.average_duration_ms

        if avg_duration > 100:
            recommendations.append(
                "Tree rebuilds are slow for this document; keep the tree cache "
                "enabled so unchanged versions are not rebuilt"
            )

        for layer_name in (LAYER_TOKENIZE, LAYER_BUILD, LAYER_NAVIGATE):
            if report.average_layer_duration_ms(layer_name) > avg_duration * 0.6:
                recommendations.append(
                    f"Layer '{layer_name}' dominates processing time"
                )

        for session in report.sessions:
            build_layer = session.get_layer(LAYER_BUILD)
            if build_layer is not None and build_layer.memory_delta > session.input_size * 50:
                recommendations.append(
                    "High memory usage while building; consider bounding the "
                    "cache with cache.max_documents"
                )
                break

        if not recommendations:
            recommendations.append("Performance appears optimal based on current analysis")

        return recommendations

    def clear_sessions(self) -> None:
        """Clear all stored profiling sessions."""
        session_count = len(self.sessions)
        self.sessions.clear()
        self.current_session = None

        self.logger.info(
            "Cleared profiling sessions",
            extra={"cleared_count": session_count},
        )


class LayerProfiler:
    """Context manager for profiling individual processing layers."""

    def __init__(self, profiler: PerformanceProfiler, session: ProfilingSession, layer_name: str):
        self.profiler = profiler
        self.session = session
        self.layer_name = layer_name
        self.layer_perf: Optional[LayerPerformance] = None

    def _process(self) -> Optional[psutil.Process]:
        return psutil.Process() if self.profiler.enable_memory_tracking else None

    def __enter__(self) -> LayerPerformance:
        process = self._process()

        self.layer_perf = LayerPerformance(
            layer_name=self.layer_name,
            start_time=time.time(),
            end_time=0.0,
            memory_start=process.memory_info().rss if process else 0,
            memory_end=0,
            cpu_percent=process.cpu_percent() if process else 0.0,
        )

        return self.layer_perf

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.layer_perf is None:
            return

        process = self._process()

        self.layer_perf.end_time = time.time()
        self.layer_perf.memory_end = process.memory_info().rss if process else 0

        self.profiler.add_layer_performance(self.session, self.layer_perf)


def benchmark_configurations(
    text: str,
    iterations: int = 10
) -> Dict[str, PerformanceReport]:
    """Profile ``text`` under each configuration preset.

    Returns:
        Dictionary mapping preset names to performance reports
    """
    configurations = {
        "reference": NavigatorConfig.reference(),
        "editor_friendly": NavigatorConfig.editor_friendly(),
    }

    results = {}
    for config_name, config in configurations.items():
        profiler = PerformanceProfiler()
        results[config_name] = profiler.profile_document(
            text, iterations, config=config, session_prefix=config_name
        )

    return results
