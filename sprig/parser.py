"""Parser for the Sprig language.

Parsing is grammar driven: the grammar below is compiled by Lark into an
LALR(1) table, and the tokens come from Sprig's own lexer, plugged into
Lark as a custom lexer. Every grammar terminal is therefore `%declare`d
rather than defined by a pattern. Punctuation and keywords that carry no
information are declared with a leading underscore so that Lark drops them
from the parse tree.

The resulting parse tree is transformed into the AST in `sprig.ast` by
`ASTTransformer`. `parse` is the public entry point; it converts every
failure (lexical or syntactic) into a `ParsingError` carrying a byte span
and a human readable description.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

from lark import Lark, Transformer, v_args
from lark import Token as LarkToken
from lark.exceptions import UnexpectedInput, UnexpectedToken
from lark.lexer import Lexer as LarkLexer

from .ast import (
    Assign, BinaryOp, Block, Call, ExprStmt, Function, If, Opcode, Program,
    Value, Var, Variable,
)
from .errors import LexError, ParsingError
from .lexer import Lexer
from .tokens import Token, TokenKind
from .types import DataType, VarVal

# Tokens the AST never needs to see
_FILTERED = frozenset({
    TokenKind.FN, TokenKind.IF, TokenKind.ELSE,
    TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.LBRACE, TokenKind.RBRACE,
    TokenKind.COLON, TokenKind.COMMA, TokenKind.SEMI, TokenKind.EQUAL,
    TokenKind.FAT_ARROW, TokenKind.BANG,
})


def terminal_name(kind: TokenKind) -> str:
    """Name of the grammar terminal that a token kind is fed as."""
    return ('_' if kind in _FILTERED else '') + kind.name


TERMINALS: Dict[str, TokenKind] = {terminal_name(kind): kind for kind in TokenKind}

OPCODES: Dict[str, Opcode] = {
    terminal_name(TokenKind[kind]): Opcode(symbol)
    for kind, symbol in (
        ('STAR', '*'), ('SLASH', '/'), ('PERCENT', '%'), ('PLUS', '+'), ('MINUS', '-'),
        ('EQUAL_EQUAL', '=='), ('BANG_EQUAL', '!='), ('LESS', '<'), ('LESS_EQUAL', '<='),
        ('GREATER', '>'), ('GREATER_EQUAL', '>='), ('AND_AND', '&&'), ('OR_OR', '||'),
    )
}

DATA_TYPES: Dict[str, DataType] = {
    'I32': DataType.I32,
    'BOOL': DataType.BOOL,
    'STRING': DataType.STRING,
}


SPRIG_GRAMMAR = r"""
    start: function*

    function: _FN IDENT _LPAREN [params] _RPAREN [_FAT_ARROW data_type] _LBRACE block _RBRACE
    params: param (_COMMA param)*
    param: IDENT _COLON data_type
    data_type: I32 | BOOL | STRING

    // A block is zero or more statements followed by the value expression
    block: stmt* expr
    stmt: IDENT _EQUAL expr _SEMI -> assign
        | expr _SEMI -> expr_stmt

    // Expressions with precedence, all binary operators left associative
    ?expr: or_expr
    ?or_expr: and_expr
            | or_expr OR_OR and_expr -> binary
    ?and_expr: eq_expr
             | and_expr AND_AND eq_expr -> binary
    ?eq_expr: rel_expr
            | eq_expr (EQUAL_EQUAL | BANG_EQUAL) rel_expr -> binary
    ?rel_expr: add_expr
             | rel_expr (LESS | LESS_EQUAL | GREATER | GREATER_EQUAL) add_expr -> binary
    ?add_expr: mul_expr
             | add_expr (PLUS | MINUS) mul_expr -> binary
    ?mul_expr: primary
             | mul_expr (STAR | SLASH | PERCENT) primary -> binary

    ?primary: literal
            | var
            | call
            | if_expr
            | _LPAREN expr _RPAREN

    literal: DEC_LITERAL | STRING_VALUE | TRUE | FALSE
    var: IDENT
    call: IDENT _LPAREN [args] _RPAREN
    args: expr (_COMMA expr)*

    if_expr: _IF expr _LBRACE block _RBRACE [_ELSE else_branch]
    ?else_branch: _LBRACE block _RBRACE
                | if_expr

    %declare {terminals}
""".replace('{terminals}', ' '.join(TERMINALS))


class SprigLexer(LarkLexer):
    """Feeds `sprig.lexer.Lexer` tokens to Lark."""

    def __init__(self, lexer_conf):
        pass

    def lex(self, data: str) -> Iterator[LarkToken]:
        for start, token, end in Lexer(data):
            value = token.payload if token.payload is not None else token.kind.value
            yield LarkToken(terminal_name(token.kind), value, start_pos=start, end_pos=end)


SPRIG_PARSER = Lark(
    SPRIG_GRAMMAR,
    parser='lalr',
    lexer=SprigLexer,
    propagate_positions=True,
    maybe_placeholders=True,
)


@v_args(meta=True)
class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST.

    The span of every function name is collected in `name_spans`, in
    source order, so that `parse` can report duplicate definitions.
    """

    def __init__(self):
        super().__init__()
        self.name_spans: List[Tuple[int, int]] = []

    def start(self, meta, items):
        return list(items)

    def function(self, meta, items):
        name, params, return_type, block = items
        self.name_spans.append((name.start_pos, name.end_pos))
        return Function(
            name=str(name.value),
            arguments=tuple(params or ()),
            block=block,
            return_type=return_type,
            position=meta.start_pos,
        )

    def params(self, meta, items):
        return list(items)

    def param(self, meta, items):
        name, data_type = items
        return Variable(str(name.value), VarVal.absent(data_type))

    def data_type(self, meta, items):
        return DATA_TYPES[items[0].type]

    def block(self, meta, items):
        return Block(statements=tuple(items[:-1]), expr=items[-1])

    def assign(self, meta, items):
        name, expr = items
        return Assign(ident=str(name.value), expr=expr)

    def expr_stmt(self, meta, items):
        return ExprStmt(items[0])

    def binary(self, meta, items):
        left, op, right = items
        return BinaryOp(left, OPCODES[op.type], right, position=meta.start_pos)

    def literal(self, meta, items):
        token = items[0]
        if token.type == 'DEC_LITERAL':
            value = VarVal.i32(token.value)
        elif token.type == 'STRING_VALUE':
            value = VarVal.string(token.value)
        else:
            value = VarVal.boolean(token.type == 'TRUE')
        return Value(value, position=meta.start_pos)

    def var(self, meta, items):
        return Var(str(items[0].value), position=meta.start_pos)

    def call(self, meta, items):
        name, args = items
        return Call(str(name.value), tuple(args or ()), position=meta.start_pos)

    def args(self, meta, items):
        return list(items)

    def if_expr(self, meta, items):
        condition, if_block, else_branch = items
        return If(condition, if_block, else_branch, position=meta.start_pos)


def _describe_expected(expected) -> str:
    names = []
    for name in expected:
        kind = TERMINALS.get(name)
        names.append(kind.describe() if kind is not None else 'end of file')
    return ', '.join(sorted(names))


def _describe_token(token: LarkToken) -> str:
    kind = TERMINALS[token.type]
    if kind in (TokenKind.IDENT, TokenKind.STRING_VALUE, TokenKind.DEC_LITERAL):
        return str(Token(kind, token.value))
    return str(Token(kind))


def parse(source: str) -> Program:
    """Parse Sprig source code into a `Program`.

    Raises `ParsingError` for the first lexical or syntactic problem; there
    is no error recovery.
    """
    try:
        tree = SPRIG_PARSER.parse(source)
    except LexError as e:
        raise ParsingError(e.location, e.location + 1, e.description) from e
    except UnexpectedToken as e:
        if e.token.type == '$END':
            eof = len(source.encode('utf-8'))
            raise ParsingError(
                eof, eof, f"unexpected end of file, expecting {_describe_expected(e.expected)}"
            ) from e
        raise ParsingError(
            e.token.start_pos, e.token.end_pos,
            f"unexpected token {_describe_token(e.token)}, expected {_describe_expected(e.expected)}",
        ) from e
    except UnexpectedInput as e:
        location = e.pos_in_stream or 0
        raise ParsingError(location, location, 'invalid token') from e

    transformer = ASTTransformer()
    functions = transformer.transform(tree)
    program = Program()
    for function, (start, end) in zip(functions, transformer.name_spans):
        if function.name in program.functions:
            raise ParsingError(start, end, f"duplicate function '{function.name}'")
        program.functions[function.name] = function
    return program

