"""tinylox scanner — converts source text into a flat token stream."""

from __future__ import annotations

from tinylox.errors import Diagnostics
from tinylox.tokens import (
    KEYWORDS,
    LiteralValue,
    Token,
    TokenType,
    is_alnum,
    is_alpha,
    is_digit,
    to_f32,
)

_SINGLE_CHAR: dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# first char -> (two-char kind when followed by '=', one-char kind)
_MAYBE_EQUAL: dict[str, tuple[TokenType, TokenType]] = {
    "!": (TokenType.NOT_EQUAL, TokenType.NOT),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


class Scanner:
    """Tokenize tinylox source text into a list of Token objects."""

    def __init__(self, source: str, diagnostics: Diagnostics | None = None) -> None:
        self._source = source
        self._diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._tokens: list[Token] = []
        self._start = 0
        self._current = 0
        self._line = 1

    def scan(self) -> list[Token]:
        """Scan the full source and return the token list, ending with EOF."""
        while not self._at_end():
            self._start = self._current
            self._scan_token()

        self._tokens.append(Token(TokenType.EOF, "", None, self._line))
        return self._tokens

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self._current >= len(self._source)

    def _advance(self) -> str:
        ch = self._source[self._current]
        self._current += 1
        return ch

    def _peek(self, offset: int = 0) -> str:
        idx = self._current + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self._current += 1
        return True

    def _add_token(self, tt: TokenType, literal: LiteralValue = None) -> None:
        lexeme = self._source[self._start : self._current]
        self._tokens.append(Token(tt, lexeme, literal, self._line))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        ch = self._advance()

        if ch in _SINGLE_CHAR:
            self._add_token(_SINGLE_CHAR[ch])
            return

        if ch in " \r\t":
            return

        if ch == "\n":
            self._line += 1
            return

        if ch == '"':
            self._string()
            return

        if ch in _MAYBE_EQUAL:
            long_type, short_type = _MAYBE_EQUAL[ch]
            self._add_token(long_type if self._match("=") else short_type)
            return

        if ch == "/":
            if self._match("/"):
                # Line comment runs up to, not including, the newline
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)
            return

        if is_digit(ch):
            self._number()
            return

        if is_alpha(ch):
            self._identifier()
            return

        self._diagnostics.lex_error(self._line, f"Unexpected symbol: {ch}")

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _string(self) -> None:
        while not self._at_end() and self._peek() != '"':
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        if self._at_end():
            self._diagnostics.lex_error(self._line, "Unterminated string.")
            return

        self._advance()  # closing quote
        self._add_token(TokenType.STRING, self._source[self._start + 1 : self._current - 1])

    def _number(self) -> None:
        while is_digit(self._peek()):
            self._advance()

        # A trailing '.' with no digit after it is not part of the number
        if self._peek() == "." and is_digit(self._peek(1)):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        text = self._source[self._start : self._current]
        self._add_token(TokenType.NUMBER, to_f32(float(text)))

    def _identifier(self) -> None:
        while is_alnum(self._peek()):
            self._advance()

        text = self._source[self._start : self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def scan(source: str, diagnostics: Diagnostics | None = None) -> list[Token]:
    """Convenience function: scan source text and return the token list."""
    return Scanner(source, diagnostics).scan()
