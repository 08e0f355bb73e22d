"""Command-line interface for multitick."""

from __future__ import annotations

import argparse
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from multitick.errors import MalformedLiteralError, TreeFormatError


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    source_file: Path | None
    indent: int | None
    check: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="multitick",
        description="Rewrite multi-backtick template literals in an ESTree JSON AST",
    )
    p.add_argument("input", help="Input AST .json file (Babel or ESTree)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--source",
        metavar="FILE",
        help="Program source the AST was parsed from, used in error messages",
    )
    p.add_argument(
        "--indent",
        type=int,
        default=None,
        metavar="N",
        help="JSON indentation of the output, negative for compact (default: 2)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover multitick.toml)",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit 1 if any literal would be rewritten",
    )
    p.add_argument("--debug", action="store_true", help="Dump rewritten literals to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "multitick.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Output indent: config < CLI
    indent: int | None = 2
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict) and "indent" in cfg_output:
        cfg_indent = cfg_output["indent"]
        if isinstance(cfg_indent, bool) or not isinstance(cfg_indent, int):
            raise argparse.ArgumentTypeError(
                f"invalid output.indent in config (expected integer): {cfg_indent!r}"
            )
        indent = cfg_indent
    if args.indent is not None:
        indent = args.indent
    if indent is not None and indent < 0:
        indent = None

    # Source file: config < CLI
    source_file: Path | None = None
    cfg_source = config.get("source")
    if isinstance(cfg_source, dict):
        cfg_source_path = cfg_source.get("path")
        if isinstance(cfg_source_path, str):
            source_file = Path(cfg_source_path)
    if args.source:
        source_file = Path(args.source)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        source_file=source_file,
        indent=indent,
        check=args.check,
        debug=args.debug,
    )


def transform_file(options: CliOptions) -> tuple[str, int]:
    """Read, convert, rewrite, and serialize an AST file.

    Returns the output JSON text and the number of literals rewritten.
    """
    from multitick.debug import dump_tree
    from multitick.estree import from_estree, to_estree
    from multitick.transform import Transformer

    data = json.loads(options.input_file.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise TreeFormatError("expected a JSON object at the root")
    tree = from_estree(data)

    source = None
    if options.source_file is not None:
        source = options.source_file.read_text(encoding="utf-8")

    transformer = Transformer(source)
    tree = transformer.visit(tree)

    if options.debug:
        for node in transformer.replacements:
            dump_tree(node)

    output = json.dumps(to_estree(tree), indent=options.indent, ensure_ascii=False)
    return output + "\n", transformer.rewritten


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (OSError, tomllib.TOMLDecodeError) as exc:
        print(f"error: cannot read config: {exc}", file=sys.stderr)
        return 2

    try:
        output, rewritten = transform_file(options)
    except MalformedLiteralError as exc:
        filename = options.source_file or options.input_file
        print(exc.format(str(filename)), file=sys.stderr)
        return 1
    except (OSError, ValueError, TreeFormatError) as exc:
        # json.JSONDecodeError is a ValueError
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.check:
        if rewritten:
            print(
                f"{options.input_file}: {rewritten} multi-backtick literal(s) to rewrite",
                file=sys.stderr,
            )
            return 1
        return 0

    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    return 0
