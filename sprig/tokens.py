"""Token definitions for the Sprig lexer.

A token is a `TokenKind` tag plus an optional payload: the name of an
identifier, the contents of a string literal or the value of a decimal
literal. The lexer pairs every token with a half-open byte span, producing
`(start, Token, end)` triples.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class TokenKind(Enum):
    """Every kind of token the lexer can produce.

    The value of each member is the spelling used when a token kind is
    shown to the user, e.g. in the expected set of a syntax error.
    """

    # Data
    IDENT = 'identifier'
    STRING_VALUE = 'string literal'
    DEC_LITERAL = 'integer literal'

    # Keywords
    IF = 'if'
    ELSE = 'else'
    FN = 'fn'

    # Data types
    I32 = 'i32'
    BOOL = 'bool'
    STRING = 'String'

    TRUE = 'true'
    FALSE = 'false'

    # Symbols
    BANG = '!'
    BANG_EQUAL = '!='
    COLON = ':'
    COMMA = ','
    EQUAL = '='
    EQUAL_EQUAL = '=='
    FAT_ARROW = '=>'
    SLASH = '/'
    GREATER = '>'
    GREATER_EQUAL = '>='
    LESS = '<'
    LESS_EQUAL = '<='
    MINUS = '-'
    PLUS = '+'
    SEMI = ';'
    STAR = '*'
    PERCENT = '%'
    AND_AND = '&&'
    OR_OR = '||'

    # Delimiters
    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'

    def describe(self) -> str:
        if self in (TokenKind.IDENT, TokenKind.STRING_VALUE, TokenKind.DEC_LITERAL):
            return self.value
        return f'"{self.value}"'


KEYWORDS: Dict[str, TokenKind] = {
    'if': TokenKind.IF,
    'else': TokenKind.ELSE,
    'fn': TokenKind.FN,
    'i32': TokenKind.I32,
    'bool': TokenKind.BOOL,
    'String': TokenKind.STRING,
    'true': TokenKind.TRUE,
    'false': TokenKind.FALSE,
}

SYMBOL_CHARS = frozenset('!:,.=/><-+;*%&|')

SYMBOLS: Dict[str, TokenKind] = {
    kind.value: kind
    for kind in TokenKind
    if kind.value and all(c in SYMBOL_CHARS for c in kind.value)
}

DELIMITERS: Dict[str, TokenKind] = {
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    payload: Union[None, str, int] = None

    def __str__(self) -> str:
        if self.kind is TokenKind.IDENT:
            return f'identifier {self.payload}'
        if self.kind is TokenKind.STRING_VALUE:
            return f'string "{self.payload}"'
        if self.kind is TokenKind.DEC_LITERAL:
            return f'integer {self.payload}'
        return f'"{self.kind.value}"'


# (start byte offset, token, end byte offset)
Spanned = Tuple[int, Token, int]


def keyword_or_ident(word: str) -> Token:
    kind: Optional[TokenKind] = KEYWORDS.get(word)
    if kind is not None:
        return Token(kind)
    return Token(TokenKind.IDENT, word)
