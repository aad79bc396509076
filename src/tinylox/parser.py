"""tinylox parser — converts a token stream into an expression AST."""

from __future__ import annotations

from collections.abc import Callable

from tinylox.ast import Binary, Expr, Grouping, Literal, Unary
from tinylox.errors import Diagnostics, ParseError
from tinylox.scanner import scan
from tinylox.tokens import Token, TokenType

DEFAULT_MAX_DEPTH = 64


class Parser:
    """Recursive descent parser for tinylox token streams.

    Grammar, lowest precedence first::

        expression -> equality
        equality   -> comparison ( ( "!=" | "==" ) comparison )*
        comparison -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
        term       -> factor ( ( "-" | "+" ) factor )*
        factor     -> unary ( ( "/" | "*" ) unary )*
        unary      -> ( "!" | "-" ) unary | primary
        primary    -> "false" | "true" | "nil" | NUMBER | STRING
                    | "(" expression ")"
    """

    def __init__(
        self,
        tokens: list[Token],
        diagnostics: Diagnostics | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._tokens = tokens
        self._diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._max_depth = max_depth
        self._pos = 0
        self._depth = 0

    def parse(self) -> Expr:
        """Parse exactly one expression followed by end of input.

        A max_depth too large for the interpreter stack still ends in
        "Expression nested too deeply." rather than a RecursionError.
        """
        try:
            expr = self._expression()
        except RecursionError:
            raise self._error(self._peek(), "Expression nested too deeply.") from None
        if not self._at_eof():
            raise self._error(self._peek(), "Expect end of expression.")
        return expr

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _previous(self) -> Token:
        return self._tokens[self._pos - 1]

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _check(self, tt: TokenType) -> bool:
        if self._at_eof():
            return False
        return self._peek().type == tt

    def _advance(self) -> Token:
        if not self._at_eof():
            self._pos += 1
        return self._previous()

    def _match(self, *types: TokenType) -> bool:
        for tt in types:
            if self._check(tt):
                self._advance()
                return True
        return False

    def _consume(self, tt: TokenType, message: str) -> Token:
        if self._check(tt):
            return self._advance()
        raise self._error(self._peek(), message)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _expression(self) -> Expr:
        return self._equality()

    def _equality(self) -> Expr:
        return self._left_assoc(_EQUALITY, self._comparison)

    def _comparison(self) -> Expr:
        return self._left_assoc(_COMPARISON, self._term)

    def _term(self) -> Expr:
        return self._left_assoc(_TERM, self._factor)

    def _factor(self) -> Expr:
        return self._left_assoc(_FACTOR, self._unary)

    def _left_assoc(
        self, operators: frozenset[TokenType], operand: Callable[[], Expr]
    ) -> Expr:
        expr = operand()
        while self._match(*operators):
            op = self._previous()
            right = operand()
            expr = Binary(expr, op, right)
        return expr

    def _unary(self) -> Expr:
        if self._match(*_UNARY):
            op = self._previous()
            self._enter(op)
            operand = self._unary()
            self._depth -= 1
            return Unary(op, operand)
        return self._primary()

    def _primary(self) -> Expr:
        if self._match(TokenType.FALSE):
            return Literal(False)
        if self._match(TokenType.TRUE):
            return Literal(True)
        if self._match(TokenType.NIL):
            return Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self._previous().literal)

        if self._match(TokenType.LEFT_PAREN):
            self._enter(self._previous())
            inner = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            self._depth -= 1
            return Grouping(inner)

        raise self._error(self._peek(), "Expect expression.")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _enter(self, token: Token) -> None:
        self._depth += 1
        if self._depth > self._max_depth:
            raise self._error(token, "Expression nested too deeply.")

    def _error(self, token: Token, message: str) -> ParseError:
        self._diagnostics.error(token, message)
        return ParseError(message, token)


# Module-level constants
_EQUALITY: frozenset[TokenType] = frozenset({TokenType.NOT_EQUAL, TokenType.EQUAL_EQUAL})
_COMPARISON: frozenset[TokenType] = frozenset(
    {
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    }
)
_TERM: frozenset[TokenType] = frozenset({TokenType.MINUS, TokenType.PLUS})
_FACTOR: frozenset[TokenType] = frozenset({TokenType.SLASH, TokenType.STAR})
_UNARY: frozenset[TokenType] = frozenset({TokenType.NOT, TokenType.MINUS})


def parse(
    source: str,
    diagnostics: Diagnostics | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Expr:
    """Convenience function: scan and parse source text into an expression."""
    if diagnostics is None:
        diagnostics = Diagnostics()
    tokens = scan(source, diagnostics)
    return Parser(tokens, diagnostics, max_depth).parse()
