"""AST node types for tinylox expressions."""

from __future__ import annotations

from dataclasses import dataclass

from tinylox.tokens import LiteralValue, Token


@dataclass(frozen=True, slots=True)
class Binary:
    """Infix operation: left operator right."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Unary:
    """Prefix operation: '!' or '-' applied to operand."""

    operator: Token
    operand: Expr


@dataclass(frozen=True, slots=True)
class Grouping:
    """Parenthesised sub-expression."""

    inner: Expr


@dataclass(frozen=True, slots=True)
class Literal:
    """Number, string, boolean, or nil literal."""

    value: LiteralValue


Expr = Binary | Unary | Grouping | Literal
