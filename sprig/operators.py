"""Binary operator semantics.

Operators are typed at run time: the pair of operand types selects a row
of `OPERATIONS` and the opcode selects the operation within that row.
A pair with no row is `InvalidOperands`; a row without the opcode is
`InvalidOpcode`. Absent values never match a row.

i32 arithmetic is checked: a result outside the i32 range raises
`IntegerOverflow` and a zero divisor raises `DivisionByZero`. Division
truncates toward zero and the remainder takes the sign of the dividend.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

from .ast import Opcode
from .errors import ErrorType, ExecutionError
from .types import DataType, VarVal, fits_i32

Operation = Callable[[Any, Any], VarVal]


def _i32(value: int) -> VarVal:
    if not fits_i32(value):
        raise OverflowError(value)
    return VarVal.i32(value)


def _truncating_div(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError('division by zero')
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _div(a: int, b: int) -> VarVal:
    return _i32(_truncating_div(a, b))


def _mod(a: int, b: int) -> VarVal:
    return _i32(a - b * _truncating_div(a, b))


def _bool(fn: Callable[[Any, Any], bool]) -> Operation:
    return lambda a, b: VarVal.boolean(fn(a, b))


_EQUALITY: Dict[Opcode, Operation] = {
    Opcode.EQ: _bool(lambda a, b: a == b),
    Opcode.NE: _bool(lambda a, b: a != b),
}

OPERATIONS: Dict[Tuple[DataType, DataType], Dict[Opcode, Operation]] = {
    (DataType.I32, DataType.I32): {
        Opcode.ADD: lambda a, b: _i32(a + b),
        Opcode.SUB: lambda a, b: _i32(a - b),
        Opcode.MUL: lambda a, b: _i32(a * b),
        Opcode.DIV: _div,
        Opcode.MOD: _mod,
        **_EQUALITY,
        Opcode.LT: _bool(lambda a, b: a < b),
        Opcode.LE: _bool(lambda a, b: a <= b),
        Opcode.GT: _bool(lambda a, b: a > b),
        Opcode.GE: _bool(lambda a, b: a >= b),
    },
    (DataType.BOOL, DataType.BOOL): {
        **_EQUALITY,
        Opcode.AND: _bool(lambda a, b: a and b),
        Opcode.OR: _bool(lambda a, b: a or b),
    },
    (DataType.STRING, DataType.STRING): dict(_EQUALITY),
}


def apply_binary_op(op: Opcode, left: VarVal, right: VarVal, position: int = 0) -> VarVal:
    """Apply `op` to two evaluated operands."""
    row = None
    if not (left.is_absent or right.is_absent):
        row = OPERATIONS.get((left.data_type, right.data_type))
    if row is None:
        raise ExecutionError(ErrorType.INVALID_OPERANDS, position)
    operation = row.get(op)
    if operation is None:
        raise ExecutionError(ErrorType.INVALID_OPCODE, position)
    try:
        return operation(left.value, right.value)
    except ZeroDivisionError:
        raise ExecutionError(ErrorType.DIVISION_BY_ZERO, position) from None
    except OverflowError:
        raise ExecutionError(ErrorType.INTEGER_OVERFLOW, position) from None
