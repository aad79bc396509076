"""Command-line interface for tinylox."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tinylox.errors import Diagnostics, ParseError
from tinylox.parser import DEFAULT_MAX_DEPTH


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    max_depth: int
    dump_tokens: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="tinylox",
        description="Evaluate a tinylox expression file and print the result",
    )
    p.add_argument("input", help="Input .lox file")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover tinylox.toml)",
    )
    p.add_argument(
        "--max-depth",
        type=int,
        default=None,
        metavar="N",
        help=f"Maximum nesting of groupings and unary operators (default: {DEFAULT_MAX_DEPTH})",
    )
    p.add_argument("--tokens", action="store_true", help="Dump tokens to stderr")
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "tinylox.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    max_depth = DEFAULT_MAX_DEPTH
    cfg_parser = config.get("parser")
    if isinstance(cfg_parser, dict):
        cfg_depth = cfg_parser.get("max_depth")
        if isinstance(cfg_depth, int) and not isinstance(cfg_depth, bool):
            max_depth = cfg_depth
    if args.max_depth is not None:
        max_depth = args.max_depth
    if max_depth < 1:
        raise argparse.ArgumentTypeError(f"max_depth must be at least 1, got {max_depth}")

    dump_tokens = False
    debug = False
    cfg_debug = config.get("debug")
    if isinstance(cfg_debug, dict):
        dump_tokens = bool(cfg_debug.get("tokens", False))
        debug = bool(cfg_debug.get("ast", False))

    return CliOptions(
        input_file=input_file,
        max_depth=max_depth,
        dump_tokens=dump_tokens or args.tokens,
        debug=debug or args.debug,
    )


def run_file(options: CliOptions, diagnostics: Diagnostics) -> str | None:
    """Read, scan, parse, and evaluate a tinylox file.

    Returns the rendered result, or None after a runtime error. Raises
    ParseError on the first syntax error, OSError if the file cannot be read
    and UnicodeDecodeError if it is not UTF-8.
    """
    from tinylox.debug import dump_ast, dump_tokens
    from tinylox.eval import interpret
    from tinylox.parser import Parser
    from tinylox.scanner import scan

    source = options.input_file.read_text(encoding="utf-8")
    tokens = scan(source, diagnostics)

    if options.dump_tokens:
        dump_tokens(tokens)

    expr = Parser(tokens, diagnostics, options.max_depth).parse()

    if options.debug:
        dump_ast(expr)

    return interpret(expr, diagnostics)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    diagnostics = Diagnostics()
    try:
        result = run_file(options, diagnostics)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ParseError:
        # Already reported through the diagnostics sink
        return 1

    if result is None:
        return 2

    print(result)
    return 0
