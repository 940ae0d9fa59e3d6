"""Error types for the three stages of the Sprig toolchain.

Lexing, parsing and evaluation each report failures through their own
exception class. The three classes share no base besides `Exception`
and carry structured fields rather than just a message.
"""

from __future__ import annotations

from bisect import bisect_right
from enum import Enum
from typing import Optional, Tuple


class LexErrorKind(Enum):
    UNEXPECTED_CHARACTER = 'unexpected character'
    UNTERMINATED_STRING = 'unterminated string literal'
    INTEGER_OUT_OF_RANGE = 'integer literal out of range'


class LexError(Exception):
    """Raised by the lexer at the first invalid input."""
    def __init__(self, location: int, char: Optional[str] = None,
                 kind: LexErrorKind = LexErrorKind.UNEXPECTED_CHARACTER):
        self.location = location
        self.char = char
        self.kind = kind
        super().__init__(f"{self.description} at {location}")

    @property
    def description(self) -> str:
        if self.kind is LexErrorKind.UNEXPECTED_CHARACTER:
            return f"Unexpected character {self.char if self.char is not None else ' '}"
        return self.kind.value.capitalize()


class ParsingError(Exception):
    """A syntax error spanning the byte range [from_, to) of the source."""
    def __init__(self, from_: int, to: int, description: str):
        self.from_ = from_
        self.to = to
        self.description = description
        super().__init__(f"{description} at {from_}..{to}")


class ErrorType(Enum):
    UNDEFINED_VARIABLE = 'UndefinedVariable'
    UNDEFINED_FUNCTION = 'UndefinedFunction'
    INVALID_OPCODE = 'InvalidOpcode'
    INVALID_OPERANDS = 'InvalidOperands'
    BOOLEAN_EXPECTED = 'BooleanExpected'
    WRONG_NUMBER_OF_ARGUMENTS = 'WrongNumberOfArguments'
    NO_MAIN = 'NoMain'
    DIVISION_BY_ZERO = 'DivisionByZero'
    INTEGER_OVERFLOW = 'IntegerOverflow'
    CALL_DEPTH_EXCEEDED = 'CallDepthExceeded'


_MESSAGES = {
    ErrorType.UNDEFINED_VARIABLE: 'Undefined variable {name}',
    ErrorType.UNDEFINED_FUNCTION: 'Undefined function {name}',
    ErrorType.INVALID_OPCODE: 'Invalid opcode',
    ErrorType.INVALID_OPERANDS: 'Invalid operands',
    ErrorType.BOOLEAN_EXPECTED: 'Expected Boolean value',
    ErrorType.WRONG_NUMBER_OF_ARGUMENTS: 'Wrong number of arguments {name}',
    ErrorType.NO_MAIN: "Function main wasn't found",
    ErrorType.DIVISION_BY_ZERO: 'Division by zero',
    ErrorType.INTEGER_OVERFLOW: 'Integer overflow',
    ErrorType.CALL_DEPTH_EXCEEDED: 'Call depth exceeded in {name}',
}


class ExecutionError(Exception):
    """Exception type used to propagate Sprig runtime errors.

    `name` holds the variable or function involved for the error types
    that have one; `position` is the byte offset of the expression that
    failed.
    """
    def __init__(self, error_type: ErrorType, position: int = 0, name: Optional[str] = None):
        self.error_type = error_type
        self.position = position
        self.name = name
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return _MESSAGES[self.error_type].format(name=self.name)

    def __repr__(self) -> str:
        if self.name is None:
            return f"ExecutionError({self.error_type.value}, position={self.position})"
        return f"ExecutionError({self.error_type.value}({self.name!r}), position={self.position})"


def line_col(source: str, offset: int) -> Tuple[int, int]:
    """Convert a byte offset into a 1-based (line, column) pair.

    Columns count bytes, matching the offsets reported by the lexer.
    """
    data = source.encode('utf-8')
    starts = [0]
    idx = data.find(b'\n')
    while idx != -1:
        starts.append(idx + 1)
        idx = data.find(b'\n', idx + 1)
    line = bisect_right(starts, offset)
    return line, offset - starts[line - 1] + 1
