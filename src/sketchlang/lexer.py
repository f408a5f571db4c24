"""Sketchlang lexer: turns source text into tokens on demand."""

from __future__ import annotations

from .tokens import (
    CHARACTER,
    EOF,
    ILLEGAL,
    INTEGER,
    REAL_NUMBER,
    SINGLE_OPS,
    STRING,
    TWO_CHAR_OPS,
    Keywords,
    Token,
)


WHITESPACE = " \t\r\n"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return c.isalpha() or c == "_"


def _is_ident_char(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Lexer:
    """Streaming lexer with one character of lookahead.

    Identifiers are classified against the session's keyword table at the
    moment they are read, so names linked mid-parse lex as keywords from
    that point on.
    """

    def __init__(self, source: str, keywords: Keywords | None = None):
        self.source = source
        self.keywords = keywords if keywords is not None else Keywords()
        self.pos = 0
        self.exhausted = False

    def _current(self) -> str:
        if self.pos >= len(self.source):
            return ""
        return self.source[self.pos]

    def _peek(self) -> str:
        if self.pos + 1 >= len(self.source):
            return ""
        return self.source[self.pos + 1]

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self.pos += 1

    def next_token(self) -> Token:
        self._skip_whitespace()
        c = self._current()
        if c == "":
            self.exhausted = True
            return Token(EOF, "")
        if c in TWO_CHAR_OPS:
            follow = TWO_CHAR_OPS[c].get(self._peek())
            if follow is not None:
                literal = c + self._peek()
                self.pos += 2
                return Token(follow, literal)
        if c in SINGLE_OPS:
            self.pos += 1
            return Token(SINGLE_OPS[c], c)
        if c == '"':
            return Token(STRING, self._read_quoted('"'))
        if c == "'":
            return Token(CHARACTER, self._read_quoted("'"))
        if _is_alpha(c):
            ident = self._read_identifier()
            return Token(self.keywords.lookup(ident), ident)
        if _is_digit(c):
            number = self._read_number()
            if "." in number:
                return Token(REAL_NUMBER, number)
            return Token(INTEGER, number)
        self.pos += 1
        return Token(ILLEGAL, c)

    def tokens(self) -> list[Token]:
        """Drain the remaining input, EOF token included."""
        result: list[Token] = []
        while True:
            tok = self.next_token()
            result.append(tok)
            if tok.kind == EOF:
                return result

    def _read_identifier(self) -> str:
        start = self.pos
        while self.pos < len(self.source) and _is_ident_char(self.source[self.pos]):
            self.pos += 1
        return self.source[start : self.pos]

    def _read_number(self) -> str:
        start = self.pos
        while self.pos < len(self.source) and (
            _is_digit(self.source[self.pos]) or self.source[self.pos] == "."
        ):
            self.pos += 1
        return self.source[start : self.pos]

    def _read_quoted(self, quote: str) -> str:
        # An unterminated literal runs to end of input.
        self.pos += 1
        start = self.pos
        while self.pos < len(self.source) and self.source[self.pos] != quote:
            self.pos += 1
        literal = self.source[start : self.pos]
        if self.pos < len(self.source):
            self.pos += 1
        return literal
