"""Tests for the CLI main module."""

import argparse
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from markup_navigator.cli.main import (
    create_argument_parser,
    format_steps,
    format_tree,
    load_config,
    main,
    parse_moves,
)
from markup_navigator.shared.config import ConfigValidationError, NavigatorConfig
from markup_navigator.tree import MarkupTreeBuilder

DOCUMENT = '<div><p>Hi</p><span id="x"></span></div>'


@pytest.fixture
def document(tmp_path: Path) -> Path:
    path = tmp_path / "page.html"
    path.write_text(DOCUMENT, encoding="utf-8")
    return path


class TestArgumentParsing:
    """Test argument parser construction."""

    def test_tree_command(self):
        args = create_argument_parser().parse_args(["tree", "a.html", "--format", "json"])
        assert args.command == "tree"
        assert args.path == Path("a.html")
        assert args.format == "json"

    def test_navigate_command(self):
        args = create_argument_parser().parse_args(
            ["navigate", "a.html", "--offset", "8", "--moves", "parent,child"]
        )
        assert args.offset == 8
        assert args.moves == ["parent", "child"]
        assert args.format == "text"

    def test_global_options(self):
        args = create_argument_parser().parse_args(
            ["--verbose", "--config", "c.json", "profile", "a.html", "-n", "2"]
        )
        assert args.verbose is True
        assert args.config == Path("c.json")
        assert args.iterations == 2

    def test_parse_moves(self):
        assert parse_moves("parent, next ,prev") == ["parent", "next", "prev"]

    @pytest.mark.parametrize("value", ["", " , ", "parent,up"])
    def test_parse_moves_rejects(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_moves(value)

    def test_invalid_move_exits(self):
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["navigate", "a.html", "--moves", "jump"])


class TestLoadConfig:
    """Test configuration file loading."""

    def test_default(self):
        assert load_config(None) == NavigatorConfig()

    def test_from_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(NavigatorConfig.editor_friendly().to_json())
        assert load_config(path) == NavigatorConfig.editor_friendly()

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text('{"tree": {"bogus": 1}}')
        with pytest.raises(ConfigValidationError):
            load_config(path)


class TestFormatting:
    """Test output formatting helpers."""

    def test_format_tree(self):
        tree = MarkupTreeBuilder().build("<p>Hi</p>").tree
        assert format_tree(tree.root) == [
            "TAG 'root' 0..8",
            "  TAG 'p' 0..8",
            "    TEXT 'Hi' 3..4",
        ]

    def test_format_steps_text(self):
        steps = [{
            "move": "parent", "moved": True, "offset": 5, "line": 1,
            "column": 6, "kind": "TAG", "label": "p",
        }]
        output = format_steps(steps, "text")
        assert "parent" in output
        assert "moved" in output
        assert "TAG 'p'" in output

    def test_format_steps_json(self):
        steps = [{"move": "child", "moved": False, "offset": 0, "line": 1,
                  "column": 1, "kind": None, "label": None}]
        assert json.loads(format_steps(steps, "json")) == steps


class TestMain:
    """Test the main entry point and command handlers."""

    def test_no_command_prints_help(self):
        with patch("builtins.print"):
            assert main([]) == 1

    @patch("builtins.print")
    def test_tree_json(self, mock_print, document):
        assert main(["tree", str(document), "--format", "json"]) == 0

        output = json.loads(mock_print.call_args_list[0][0][0])
        assert output["node_count"] == 7
        assert output["summary"]["success"] is True
        assert output["diagnostics"] == []

    @patch("builtins.print")
    def test_tree_text(self, mock_print, document):
        assert main(["tree", str(document)]) == 0
        output = mock_print.call_args_list[0][0][0]
        assert output.splitlines()[1] == "  TAG 'div' 0..39"

    @patch("builtins.print")
    def test_navigate_json(self, mock_print, document):
        exit_code = main([
            "navigate", str(document), "--offset", "8",
            "--moves", "parent,parent,child,next,inside,next", "--format", "json",
        ])

        assert exit_code == 0
        steps = json.loads(mock_print.call_args_list[0][0][0])
        assert [step["offset"] for step in steps] == [5, 0, 5, 14, 20, 20]
        assert all(step["moved"] for step in steps)
        assert steps[4]["kind"] == "ATTRIBUTE"
        assert steps[4]["label"] == "id"
        assert (steps[3]["line"], steps[3]["column"]) == (1, 15)

    @patch("builtins.print")
    def test_navigate_reports_no_op(self, mock_print, document):
        assert main([
            "navigate", str(document), "--offset", "8",
            "--moves", "child", "--format", "json",
        ]) == 0

        [step] = json.loads(mock_print.call_args_list[0][0][0])
        assert step["moved"] is False
        assert step["offset"] == 8
        assert step["kind"] == "TEXT"

    @patch("builtins.print")
    def test_profile_to_file(self, mock_print, document, tmp_path):
        output_path = tmp_path / "report.json"
        assert main(["profile", str(document), "-n", "2", "-o", str(output_path)]) == 0

        report = json.loads(output_path.read_text())
        assert report["summary"]["session_count"] == 2

    @patch("builtins.print")
    def test_profile_rejects_zero_iterations(self, mock_print, document):
        assert main(["profile", str(document), "-n", "0"]) == 1

    @patch("builtins.print")
    def test_missing_file(self, mock_print, tmp_path):
        assert main(["tree", str(tmp_path / "missing.html")]) == 1

    @patch("builtins.print")
    def test_undecodable_file(self, mock_print, tmp_path):
        path = tmp_path / "latin.html"
        path.write_bytes(b"<p>\xff\xfe</p>")

        assert main(["tree", str(path)]) == 1
        assert main(["navigate", str(path), "-m", "parent"]) == 1
        assert main(["profile", str(path), "-n", "1"]) == 1
        assert main(["--config", str(path), "tree", str(path)]) == 1

    @patch("builtins.print")
    def test_bad_config_file(self, mock_print, document, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{oops")
        assert main(["--config", str(config_path), "tree", str(document)]) == 1

    @patch("builtins.print")
    def test_config_file_is_applied(self, mock_print, tmp_path):
        path = tmp_path / "partial.html"
        path.write_text("<div><p>", encoding="utf-8")
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"tree": {"flush_unclosed_at_eof": True}}))

        assert main(["--config", str(config_path), "tree", str(path), "-f", "json"]) == 0
        output = json.loads(mock_print.call_args_list[0][0][0])
        assert output["root"]["children"][0]["label"] == "div"

    @patch("markup_navigator.cli.main.cmd_tree", side_effect=KeyboardInterrupt)
    @patch("builtins.print")
    def test_keyboard_interrupt(self, mock_print, mock_cmd, document):
        assert main(["tree", str(document)]) == 130
