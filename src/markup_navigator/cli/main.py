"""Main CLI entry point for the markup-nav command-line tool.

Provides tree dumps, scripted cursor navigation over a file, and profiling of
the tokenize, build and navigate layers.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from markup_navigator import __version__
from markup_navigator.api import MarkupNavigator, TextBuffer, build_tree
from markup_navigator.shared.config import ConfigError, NavigatorConfig
from markup_navigator.shared.logging import get_logger
from markup_navigator.tools.profiling import PerformanceProfiler
from markup_navigator.tree import Node, locate

MOVE_NAMES = ["parent", "child", "next", "prev", "inside"]

logger = get_logger(__name__, None, "cli")


def parse_moves(value: str) -> List[str]:
    """Parse a comma-separated list of move names."""
    moves = [move.strip() for move in value.split(",") if move.strip()]
    if not moves:
        raise argparse.ArgumentTypeError("at least one move is required")
    unknown = [move for move in moves if move not in MOVE_NAMES]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown move(s) {', '.join(unknown)}; choose from {', '.join(MOVE_NAMES)}"
        )
    return moves


def load_config(config_path: Optional[Path]) -> NavigatorConfig:
    """Load a navigator configuration from a JSON file.

    Raises:
        ConfigError: If the file content is not a valid configuration
        OSError: If the file cannot be read
    """
    if config_path is None:
        return NavigatorConfig()
    return NavigatorConfig.from_json(config_path.read_text())


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="markup-nav",
        description="Structural cursor navigation for HTML/XML-like documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Tree command
    tree_parser = subparsers.add_parser("tree", help="Dump the node tree of a file")
    tree_parser.add_argument("path", type=Path, help="Markup file")
    tree_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    # Navigate command
    navigate_parser = subparsers.add_parser(
        "navigate", help="Run cursor moves against a file"
    )
    navigate_parser.add_argument("path", type=Path, help="Markup file")
    navigate_parser.add_argument(
        "--offset", "-o",
        type=int,
        default=0,
        help="Initial cursor offset (default: 0)"
    )
    navigate_parser.add_argument(
        "--moves", "-m",
        type=parse_moves,
        required=True,
        help=f"Comma-separated moves: {','.join(MOVE_NAMES)}"
    )
    navigate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    # Profile command
    profile_parser = subparsers.add_parser("profile", help="Profile a file")
    profile_parser.add_argument("path", type=Path, help="Markup file")
    profile_parser.add_argument(
        "--iterations", "-n",
        type=int,
        default=5,
        help="Number of profiling iterations (default: 5)"
    )
    profile_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file for the JSON report (default: stdout)"
    )

    return parser


def format_tree(node: Node, depth: int = 0) -> List[str]:
    """Render ``node`` and its descendants as indented text lines."""
    lines = [f"{'  ' * depth}{node.kind.name} {node.label!r} {node.start}..{node.end}"]
    for child in node.children:
        lines.extend(format_tree(child, depth + 1))
    return lines


def format_steps(steps: List[Dict[str, Any]], format_type: str) -> str:
    """Format navigation steps for output."""
    if format_type == "json":
        return json.dumps(steps, indent=2)

    lines = []
    for step in steps:
        status = "moved" if step["moved"] else "stayed"
        target = (
            f"{step['kind']} {step['label']!r}" if step["kind"] is not None else "-"
        )
        lines.append(
            f"{step['move']:<7} {status:<6} offset {step['offset']:>5} "
            f"(line {step['line']}, col {step['column']})  {target}"
        )
    return "\n".join(lines)


def cmd_tree(args: argparse.Namespace, config: NavigatorConfig) -> int:
    """Handle tree command."""
    text = args.path.read_text(encoding="utf-8")
    result = build_tree(text, config=config, document_id=str(args.path))

    if args.format == "json":
        output = result.tree.to_dict()
        output["summary"] = result.summary()
        output["diagnostics"] = [
            {
                "severity": diag.severity.name,
                "message": diag.message,
                "kind": diag.kind,
                "position": diag.position,
            }
            for diag in result.diagnostics
        ]
        print(json.dumps(output, indent=2))
    else:
        print("\n".join(format_tree(result.tree.root)))
        for diag in result.diagnostics:
            print(f"{diag.severity.name}: {diag.message}", file=sys.stderr)

    return 0 if result.success else 1


def cmd_navigate(args: argparse.Namespace, config: NavigatorConfig) -> int:
    """Handle navigate command."""
    buffer = TextBuffer.from_file(args.path, cursor_offset=args.offset)
    navigator = MarkupNavigator(lambda: buffer, config)

    moves: Dict[str, Callable[[], Optional[int]]] = {
        "parent": navigator.to_parent,
        "child": navigator.to_first_child,
        "next": navigator.to_next_sibling,
        "prev": navigator.to_previous_sibling,
        "inside": navigator.to_inside,
    }

    steps = []
    for move in args.moves:
        target = moves[move]()
        offset = buffer.get_cursor_offset()
        line, column = buffer.offset_to_position(offset)
        entry = navigator.cache.peek(buffer.document_id)
        node = locate(entry.tree, offset) if entry is not None else None
        steps.append({
            "move": move,
            "moved": target is not None,
            "offset": offset,
            "line": line,
            "column": column,
            "kind": node.kind.name if node is not None else None,
            "label": node.label if node is not None else None,
        })

    print(format_steps(steps, args.format))
    return 0


def cmd_profile(args: argparse.Namespace, config: NavigatorConfig) -> int:
    """Handle profile command."""
    if args.iterations <= 0:
        print("Error: --iterations must be > 0", file=sys.stderr)
        return 1

    text = args.path.read_text(encoding="utf-8")
    profiler = PerformanceProfiler()
    report = profiler.profile_document(text, args.iterations, config=config)

    if args.output:
        profiler.save_report(report, args.output)
        print(f"Report written to {args.output}", file=sys.stderr)
    else:
        print(json.dumps(report.to_dict(), indent=2))

    for recommendation in profiler.get_optimization_recommendations(report):
        print(f"Recommendation: {recommendation}", file=sys.stderr)

    return 0


def configure_logging(args: argparse.Namespace, config: NavigatorConfig) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, config.global_.logging_level)
    logging.basicConfig(level=level)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except (ConfigError, OSError, UnicodeDecodeError) as e:
        print(f"Error: could not load config file: {e}", file=sys.stderr)
        return 1

    configure_logging(args, config)

    handlers = {
        "tree": cmd_tree,
        "navigate": cmd_navigate,
        "profile": cmd_profile,
    }

    # Route to appropriate command handler
    try:
        return handlers[args.command](args, config)

    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
