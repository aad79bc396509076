"""tinylox expression language scanner, parser, and evaluator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tinylox.errors import Diagnostics

__version__ = "0.1.0"


def run(source: str, diagnostics: Diagnostics | None = None) -> str | None:
    """Scan, parse, and evaluate source; return the printed result or None on error."""
    from tinylox.errors import Diagnostics, ParseError
    from tinylox.eval import interpret
    from tinylox.parser import Parser
    from tinylox.scanner import scan

    if diagnostics is None:
        diagnostics = Diagnostics()
    tokens = scan(source, diagnostics)
    try:
        expr = Parser(tokens, diagnostics).parse()
    except ParseError:
        return None
    return interpret(expr, diagnostics)
