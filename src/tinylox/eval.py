"""Tree-walk evaluator — reduces an expression AST to a single runtime value."""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from decimal import Decimal

from tinylox.ast import Binary, Expr, Grouping, Literal, Unary
from tinylox.errors import Diagnostics, EvalError
from tinylox.tokens import Token, TokenType, to_f32

# Bool, Number (single-precision float), String, Nil
Value = bool | float | str | None


def evaluate(expr: Expr) -> Value:
    """Evaluate expr and return its value, raising EvalError on a type error.

    Walks the tree with an explicit stack so long operator chains such as
    ``1+1+...+1`` do not consume Python stack frames. Operands are evaluated
    left before right, so the leftmost failure is the one reported.
    """
    values: list[Value] = []
    # (node, operands already evaluated)
    work: list[tuple[Expr, bool]] = [(expr, False)]

    while work:
        node, ready = work.pop()

        if isinstance(node, Literal):
            values.append(node.value)
        elif isinstance(node, Grouping):
            work.append((node.inner, False))
        elif isinstance(node, Unary):
            if ready:
                values.append(_unary(node.operator, values.pop()))
            else:
                work.append((node, True))
                work.append((node.operand, False))
        elif isinstance(node, Binary):
            if ready:
                right = values.pop()
                left = values.pop()
                values.append(_binary(left, node.operator, right))
            else:
                work.append((node, True))
                work.append((node.right, False))
                work.append((node.left, False))
        else:
            raise EvalError(f"Unknown expression node: {type(node).__name__}")

    return values.pop()


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


def _unary(op: Token, operand: Value) -> Value:
    if op.type == TokenType.MINUS:
        if not _is_number(operand):
            raise EvalError("Operand must be a number.")
        return -operand

    if op.type == TokenType.NOT:
        if not isinstance(operand, bool):
            raise EvalError("Operand must be a boolean.")
        return not operand

    raise EvalError(f"Undefined unary operator '{op.lexeme}'.")


def _binary(left: Value, op: Token, right: Value) -> Value:
    tt = op.type

    if tt in _ARITHMETIC:
        _require_numbers(left, right)
        return _ARITHMETIC[tt](left, right)

    if tt == TokenType.PLUS:
        if _is_number(left):
            _require_numbers(left, right)
            return to_f32(left + right)
        if isinstance(left, str):
            if not isinstance(right, str):
                raise EvalError("Operands must be two strings.")
            return left + right
        raise EvalError("Operands must be two numbers or two strings.")

    if tt in _COMPARISON:
        # Equality included: only numbers can be compared
        _require_numbers(left, right)
        return _COMPARISON[tt](left, right)

    raise EvalError(f"Undefined binary operator '{op.lexeme}'.")


def _is_number(value: Value) -> bool:
    # bool is an int subclass, never a float
    return isinstance(value, float)


def _require_numbers(left: Value, right: Value) -> None:
    if not (_is_number(left) and _is_number(right)):
        raise EvalError("Operands must be numbers.")


def _divide(left: float, right: float) -> float:
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return to_f32(left / right)


_ARITHMETIC: dict[TokenType, Callable[[float, float], float]] = {
    TokenType.MINUS: lambda a, b: to_f32(a - b),
    TokenType.STAR: lambda a, b: to_f32(a * b),
    TokenType.SLASH: _divide,
}

_COMPARISON: dict[TokenType, Callable[[float, float], bool]] = {
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
    TokenType.EQUAL_EQUAL: operator.eq,
    TokenType.NOT_EQUAL: operator.ne,
}


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def stringify(value: Value) -> str:
    """Render a runtime value the way the driver prints it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_number(value)
    return value


def _format_number(n: float) -> str:
    """Shortest text that reads back as the same f32, never in exponent form."""
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "inf" if n > 0 else "-inf"
    # Nine significant digits always round-trip a single-precision value
    for digits in range(1, 10):
        text = f"{n:.{digits}g}"
        if to_f32(float(text)) == n:
            break
    return format(Decimal(text), "f")


def interpret(expr: Expr, diagnostics: Diagnostics | None = None) -> str | None:
    """Evaluate and stringify expr; report and return None on a runtime error."""
    if diagnostics is None:
        diagnostics = Diagnostics()
    try:
        return stringify(evaluate(expr))
    except EvalError as exc:
        diagnostics.runtime_error(exc)
        return None
