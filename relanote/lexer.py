"""Lexer over relanote source text that drops comments and bad input."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace

from relanote.tokens import Span, Token, TokenKind, scan

_SKIPPED_KINDS = frozenset({TokenKind.LINE_COMMENT, TokenKind.ERROR})


class LexerError(Exception):
    """Raised for malformed relanote source text."""


class Lexer:
    """Pulls tokens from source text one at a time.

    Line comments and unrecognised characters are skipped; newlines are kept
    because they separate statements.
    """

    def __init__(self, text: str, source_id: int = 0) -> None:
        self._text = text
        self._source_id = source_id
        self._raw = scan(text)
        self._peeked: Token | None = None

    def _with_source(self, token: Token) -> Token:
        span = Span(token.span.start, token.span.end, self._source_id)
        return replace(token, span=span)

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        if self._peeked is None:
            self._peeked = self.next_token()
        return self._peeked

    def next_token(self) -> Token | None:
        """Consume and return the next token, or None at the end of input."""
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        for token in self._raw:
            if token.kind in _SKIPPED_KINDS:
                continue
            return self._with_source(token)
        return None

    def tokenize(self) -> list[Token]:
        """Consume the rest of the input and return its tokens plus EOF."""
        tokens = list(self)
        end = len(self._text)
        tokens.append(Token.eof(Span(end, end, self._source_id)))
        return tokens

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token


def lex(text: str) -> list[Token]:
    """Tokenize ``text`` completely, ending with an EOF token."""
    return Lexer(text).tokenize()