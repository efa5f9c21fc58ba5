"""Forward-only navigation over a token list."""

from __future__ import annotations

from tabdb.errors import QuerySyntaxError
from tabdb.parsing.lexer import Token


class Cursor:
    """Token-stream cursor with clamped lookahead.

    The position never moves backward. Reading past the end yields the last
    token of the stream, which is the lexer's EOF sentinel.
    """

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens:
            raise ValueError("Cursor needs at least one token")
        self._tokens = tokens
        self._pos = 0

    def current(self) -> Token:
        if self._pos >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[self._pos]

    def peek_next(self) -> Token:
        if self._pos + 1 >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[self._pos + 1]

    def advance(self) -> Token:
        """Move one token forward and return the new current token."""
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return self.current()

    def at(self, kind: str) -> bool:
        return self.current().kind == kind

    def expect(self, kind: str, message: str | None = None) -> Token:
        """Return the current token, raising if it is not of *kind*."""
        tok = self.current()
        if tok.kind != kind:
            found = tok.text if tok.kind != "EOF" else "end of input"
            raise QuerySyntaxError(message or f"Expected {kind}, got '{found}'", tok.pos)
        return tok
