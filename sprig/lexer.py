"""Lexical scanner for Sprig.

The lexer turns source text into `(start, Token, end)` triples, where the
span is a half-open range of UTF-8 byte offsets. Scanning is lazy: tokens
are produced while the caller iterates, and the first invalid input raises
`LexError`. Iterating a `Lexer` a second time starts over from the
beginning of the source.

Whitespace and `//` line comments are skipped. Operators are recognised
by taking the longest run of symbol characters and looking the whole run
up in the operator table, so `=-` is an error rather than `=` followed by
`-`.
"""

from __future__ import annotations

from itertools import accumulate
from typing import Callable, Iterator, List, Optional

from .errors import LexError, LexErrorKind
from .tokens import (
    DELIMITERS, SYMBOL_CHARS, SYMBOLS, Spanned, Token, TokenKind, keyword_or_ident,
)
from .types import fits_i32


def is_ident_start(c: str) -> bool:
    return c.isascii() and c.isalpha()


def is_ident_continue(c: str) -> bool:
    return c == '_' or (c.isascii() and c.isalnum())


def is_dec_digit(c: str) -> bool:
    return '0' <= c <= '9'


class Lexer:
    """A restartable token stream over one source string."""

    def __init__(self, source: str):
        self.source = source
        # byte offset of every character index, only needed for non-ASCII input
        self._offsets: Optional[List[int]] = None
        if not source.isascii():
            self._offsets = list(accumulate((len(c.encode('utf-8')) for c in source), initial=0))

    def __iter__(self) -> Iterator[Spanned]:
        return self._scan()

    def offset(self, index: int) -> int:
        """Byte offset of the character at `index`."""
        if self._offsets is None:
            return index
        return self._offsets[index]

    def _take_while(self, start: int, keep_going: Callable[[str], bool]) -> int:
        end = start
        length = len(self.source)
        while end < length and keep_going(self.source[end]):
            end += 1
        return end

    def _symbol_run(self, start: int) -> int:
        # a run stops where a line comment begins
        source = self.source
        end = start + 1
        while end < len(source) and source[end] in SYMBOL_CHARS and not source.startswith('//', end):
            end += 1
        return end

    def _scan(self) -> Iterator[Spanned]:
        source = self.source
        length = len(source)
        i = 0
        while i < length:
            c = source[i]
            if c.isspace():
                i += 1
                continue
            start = i
            if c in SYMBOL_CHARS:
                if source.startswith('//', i):
                    newline = source.find('\n', i)
                    i = length if newline == -1 else newline
                    continue
                i = self._symbol_run(start)
                kind = SYMBOLS.get(source[start:i])
                if kind is None:
                    raise LexError(self.offset(start), c)
                yield self.offset(start), Token(kind), self.offset(i)
                continue
            if c in DELIMITERS:
                i += 1
                yield self.offset(start), Token(DELIMITERS[c]), self.offset(i)
                continue
            if c == '"':
                close = source.find('"', start + 1)
                if close == -1:
                    raise LexError(self.offset(start), None, LexErrorKind.UNTERMINATED_STRING)
                i = close + 1
                yield self.offset(start), Token(TokenKind.STRING_VALUE, source[start + 1:close]), self.offset(i)
                continue
            if is_dec_digit(c):
                i = self._take_while(start, is_dec_digit)
                value = int(source[start:i])
                if not fits_i32(value):
                    raise LexError(self.offset(start), None, LexErrorKind.INTEGER_OUT_OF_RANGE)
                yield self.offset(start), Token(TokenKind.DEC_LITERAL, value), self.offset(i)
                continue
            if is_ident_start(c):
                i = self._take_while(start, is_ident_continue)
                yield self.offset(start), keyword_or_ident(source[start:i]), self.offset(i)
                continue
            raise LexError(self.offset(start), c)


def tokenize(source: str) -> List[Spanned]:
    """Lex the whole source eagerly and return the list of spanned tokens."""
    return list(Lexer(source))
