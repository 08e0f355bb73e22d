"""Tests for the CLI module: arg parsing, exit codes, end-to-end."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from multitick.cli import CliOptions, build_parser, main, transform_file


def _element(raw: str) -> dict:
    return {"type": "TemplateElement", "value": {"raw": raw, "cooked": raw}, "tail": True}


def _literal(raw: str) -> dict:
    return {"type": "TemplateLiteral", "quasis": [_element(raw)], "expressions": []}


def _tagged(tag: dict, quasi: dict) -> dict:
    return {"type": "TaggedTemplateExpression", "tag": tag, "quasi": quasi}


def _file(expression: dict) -> dict:
    return {
        "type": "File",
        "program": {
            "type": "Program",
            "body": [{"type": "ExpressionStatement", "expression": expression}],
        },
    }


def _triple(raw: str) -> dict:
    """AST of a body quoted with three backticks."""
    return _tagged(_tagged(_literal(""), _literal(raw)), _literal(""))


def _write(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data))
    return path


def _expression(path: Path) -> dict:
    return json.loads(path.read_text())["program"]["body"][0]["expression"]


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        p = build_parser()
        ns = p.parse_args(["app.json"])
        assert ns.input == "app.json"
        assert ns.output is None
        assert ns.indent is None

    def test_output_flag(self) -> None:
        p = build_parser()
        ns = p.parse_args(["app.json", "-o", "out.json"])
        assert ns.output == "out.json"

    def test_source_and_indent(self) -> None:
        p = build_parser()
        ns = p.parse_args(["app.json", "--source", "app.js", "--indent", "4"])
        assert ns.source == "app.js"
        assert ns.indent == 4

    def test_check_and_debug(self) -> None:
        p = build_parser()
        ns = p.parse_args(["app.json", "--check", "--debug"])
        assert ns.check is True
        assert ns.debug is True


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path) -> None:
        ast = _write(tmp_path / "ok.json", _file(_triple("\n  x\n")))
        out = tmp_path / "out.json"
        assert main([str(ast), "-o", str(out)]) == 0
        assert _expression(out) == _literal("x")

    def test_malformed_literal_returns_1(self, tmp_path: Path, capsys) -> None:
        ast = _write(tmp_path / "bad.json", _file(_triple("x\n")))
        assert main([str(ast)]) == 1
        assert "must start with a newline" in capsys.readouterr().err

    def test_invalid_json_returns_2(self, tmp_path: Path) -> None:
        ast = tmp_path / "broken.json"
        ast.write_text("{not json")
        assert main([str(ast)]) == 2

    def test_missing_input_returns_2(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "nope.json")]) == 2

    def test_non_object_root_returns_2(self, tmp_path: Path) -> None:
        ast = tmp_path / "list.json"
        ast.write_text("[]")
        assert main([str(ast)]) == 2

    def test_bad_tree_returns_2(self, tmp_path: Path, capsys) -> None:
        bad = {"type": "TemplateLiteral", "quasis": [], "expressions": []}
        ast = _write(tmp_path / "bad.json", _file(bad))
        assert main([str(ast)]) == 2
        assert "$.program.body[0].expression" in capsys.readouterr().err

    def test_bad_config_returns_2(self, tmp_path: Path) -> None:
        ast = _write(tmp_path / "app.json", _file(_literal("x")))
        (tmp_path / "multitick.toml").write_text("[output]\nindent = 1.5\n")
        assert main([str(ast)]) == 2


# ---------------------------------------------------------------------------
# Error context
# ---------------------------------------------------------------------------


class TestErrorContext:
    def test_source_snippet(self, tmp_path: Path, capsys) -> None:
        quasi = _literal("\n    a\n  b\n  ")
        quasi["loc"] = {"start": {"line": 1, "column": 14}, "end": {"line": 4, "column": 2}}
        chain = _tagged(_tagged(_literal(""), quasi), _literal(""))
        ast = _write(tmp_path / "app.json", _file(chain))
        source = tmp_path / "app.js"
        source.write_text("console.log(```\n    a\n  b\n  ```)\n")
        assert main([str(ast), "--source", str(source)]) == 1
        err = capsys.readouterr().err
        assert "should have consistent margins" in err
        assert f"--> {source}:1:15" in err
        assert "console.log(```" in err


# ---------------------------------------------------------------------------
# Check mode and output
# ---------------------------------------------------------------------------


class TestCheck:
    def test_pending_rewrite_returns_1(self, tmp_path: Path, capsys) -> None:
        ast = _write(tmp_path / "app.json", _file(_triple("\n  x\n")))
        assert main([str(ast), "--check"]) == 1
        assert "1 multi-backtick literal(s) to rewrite" in capsys.readouterr().err

    def test_nothing_to_rewrite(self, tmp_path: Path, capsys) -> None:
        ast = _write(tmp_path / "app.json", _file(_literal("x")))
        assert main([str(ast), "--check"]) == 0
        assert capsys.readouterr().out == ""


class TestOutput:
    def test_stdout(self, tmp_path: Path, capsys) -> None:
        ast = _write(tmp_path / "app.json", _file(_triple("\n  x\n")))
        assert main([str(ast)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["program"]["body"][0]["expression"] == _literal("x")

    def test_compact(self, tmp_path: Path, capsys) -> None:
        ast = _write(tmp_path / "app.json", _file(_literal("x")))
        assert main([str(ast), "--indent", "-1"]) == 0
        assert capsys.readouterr().out.count("\n") == 1

    def test_debug_dump(self, tmp_path: Path, capsys) -> None:
        ast = _write(tmp_path / "app.json", _file(_triple("\n  x\n")))
        assert main([str(ast), "--debug", "-o", str(tmp_path / "out.json")]) == 0
        err = capsys.readouterr().err
        assert err.splitlines() == ["TemplateLiteral", "  Text('x')"]

    def test_debug_dump_skips_untouched_nodes(self, tmp_path: Path, capsys) -> None:
        ast = _write(tmp_path / "app.json", _file(_literal("x")))
        assert main([str(ast), "--debug", "-o", str(tmp_path / "out.json")]) == 0
        assert capsys.readouterr().err == ""


# ---------------------------------------------------------------------------
# transform_file smoke test
# ---------------------------------------------------------------------------


class TestTransformFile:
    def test_basic(self, tmp_path: Path) -> None:
        ast = _write(tmp_path / "app.json", _file(_triple("\n  x\n")))
        opts = CliOptions(
            input_file=ast,
            output_file=None,
            source_file=None,
            indent=2,
            check=False,
            debug=False,
        )
        output, rewritten = transform_file(opts)
        assert rewritten == 1
        assert json.loads(output)["program"]["body"][0]["expression"] == _literal("x")

    def test_unreadable_source(self, tmp_path: Path) -> None:
        ast = _write(tmp_path / "app.json", _file(_literal("x")))
        opts = CliOptions(ast, None, tmp_path / "missing.js", 2, False, False)
        with pytest.raises(OSError):
            transform_file(opts)
