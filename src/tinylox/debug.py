"""--tokens and --debug dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from tinylox.ast import Binary, Expr, Grouping, Literal, Unary
from tinylox.eval import stringify
from tinylox.tokens import Token


def dump_tokens(tokens: list[Token], *, file: TextIO | None = None) -> None:
    """Print one line per token to *file*."""
    f = file if file is not None else sys.stderr
    for tok in tokens:
        line = f"{tok.line:>4} {tok.type.name:<14} {tok.lexeme!r}"
        if tok.literal is not None:
            line += f" {stringify(tok.literal)}"
        f.write(line + "\n")


def dump_ast(expr: Expr, *, file: TextIO | None = None) -> None:
    """Print the AST in parenthesised prefix form to *file*."""
    f = file if file is not None else sys.stderr
    f.write(format_ast(expr) + "\n")


def format_ast(expr: Expr) -> str:
    """Render expr as ``(op left right)``, ``(grouping x)``, or a bare literal.

    Uses an explicit stack of pending text pieces so deep left-nested chains
    do not recurse.
    """
    out: list[str] = []
    # Either a node still to render or a literal piece of text to emit
    work: list[Expr | str] = [expr]

    while work:
        item = work.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Literal):
            out.append(stringify(item.value))
        elif isinstance(item, Grouping):
            work.extend([")", item.inner, "(grouping "])
        elif isinstance(item, Unary):
            work.extend([")", item.operand, f"({item.operator.lexeme} "])
        elif isinstance(item, Binary):
            work.extend([")", item.right, " ", item.left, f"({item.operator.lexeme} "])

    return "".join(out)
