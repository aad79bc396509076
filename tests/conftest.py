"""Shared test fixtures and helpers."""

from __future__ import annotations

import io

import pytest

from tinylox.ast import Expr
from tinylox.errors import Diagnostics
from tinylox.parser import parse
from tinylox.scanner import scan
from tinylox.tokens import Token, TokenType


@pytest.fixture
def sink():
    """Return a Diagnostics sink that writes to a StringIO instead of stderr."""
    return Diagnostics(stream=io.StringIO())


@pytest.fixture
def lex(sink):
    """Return a helper that scans source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = scan(source, sink)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source(sink):
    """Return a helper that parses source and returns the expression AST."""

    def _parse(source: str) -> Expr:
        return parse(source, sink)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_lexemes(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token lexemes match the expected list."""
    actual = [t.lexeme for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def messages(sink: Diagnostics) -> list[str]:
    """Return the formatted diagnostic lines the sink has recorded."""
    return [d.format() for d in sink.reported]
