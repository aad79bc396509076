"""Diagnostics sink and error types."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TextIO

from tinylox.tokens import Token, TokenType


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reported problem: line, location text, and message."""

    line: int
    location: str
    message: str
    at_end: bool = False

    def format(self) -> str:
        if self.at_end:
            return f"[line {self.line}] at end: {self.message}"
        return f"[line {self.line}] Error {self.location}: {self.message}"


@dataclass
class Diagnostics:
    """Collects and prints diagnostics for one run of the pipeline.

    ``had_error`` tracks syntax errors only and is what the driver consults
    before evaluating. Lexical problems are printed in the same format but
    recorded under ``had_lex_error``; scanning always continues past them.
    """

    stream: TextIO | None = None
    had_error: bool = False
    had_lex_error: bool = False
    had_runtime_error: bool = False
    reported: list[Diagnostic] = field(default_factory=list)

    def error(self, token: Token, message: str) -> None:
        """Report a syntax error at token."""
        self.had_error = True
        if token.type == TokenType.EOF:
            self._report(Diagnostic(token.line, "", message, at_end=True))
        else:
            self._report(Diagnostic(token.line, "", message))

    def lex_error(self, line: int, message: str) -> None:
        """Report a lexical problem on line."""
        self.had_lex_error = True
        self._report(Diagnostic(line, "", message))

    def runtime_error(self, error: EvalError) -> None:
        """Report an evaluation failure; not recorded in reported."""
        self.had_runtime_error = True
        print(f"Runtime error: {error.message}", file=self._out())

    def _report(self, diagnostic: Diagnostic) -> None:
        self.reported.append(diagnostic)
        print(diagnostic.format(), file=self._out())

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stderr


class ParseError(Exception):
    """Raised on the first parse error; the sink has already reported it."""

    def __init__(self, message: str, token: Token) -> None:
        self.message = message
        self.token = token
        super().__init__(message)


class EvalError(Exception):
    """Raised on any evaluation failure. Carries only a static message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
