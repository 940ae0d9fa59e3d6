"""Runtime values for Sprig.

Every value the interpreter handles is a `VarVal`: a `DataType` tag plus
a Python payload. The i32, bool and String variants may also be *absent*
(payload `None`), which is only used as the placeholder stored for a
declared function parameter before it is bound. Values are immutable, so
copying one is just passing the reference around.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

I32_MIN = -2 ** 31
I32_MAX = 2 ** 31 - 1


def fits_i32(value: int) -> bool:
    return I32_MIN <= value <= I32_MAX


class DataType(Enum):
    I32 = 'i32'
    BOOL = 'bool'
    STRING = 'String'
    UNIT = '()'


_PAYLOAD_TYPES = {
    DataType.I32: int,
    DataType.BOOL: bool,
    DataType.STRING: str,
}


@dataclass(frozen=True)
class VarVal:
    """A tagged Sprig value.

    Use the constructors (`i32`, `boolean`, `string`, `unit`, `absent`)
    rather than building instances by hand; they validate the payload.
    """
    data_type: DataType
    value: Any = None

    def __post_init__(self):
        if self.data_type is DataType.UNIT:
            if self.value is not None:
                raise ValueError('unit carries no payload')
            return
        if self.value is None:
            return
        expected = _PAYLOAD_TYPES[self.data_type]
        # bool is a subclass of int; keep the two apart
        if type(self.value) is not expected:
            raise TypeError(f"{self.data_type.value} payload must be {expected.__name__}, "
                            f"got {type(self.value).__name__}")
        if self.data_type is DataType.I32 and not fits_i32(self.value):
            raise ValueError(f'{self.value} does not fit in i32')

    @staticmethod
    def i32(value: int) -> 'VarVal':
        return VarVal(DataType.I32, value)

    @staticmethod
    def boolean(value: bool) -> 'VarVal':
        return VarVal(DataType.BOOL, value)

    @staticmethod
    def string(value: str) -> 'VarVal':
        return VarVal(DataType.STRING, value)

    @staticmethod
    def unit() -> 'VarVal':
        return VarVal(DataType.UNIT)

    @staticmethod
    def absent(data_type: DataType) -> 'VarVal':
        return VarVal(data_type)

    @staticmethod
    def from_python(value: Any) -> 'VarVal':
        """Wrap a plain Python value supplied by a host."""
        if isinstance(value, VarVal):
            return value
        if value is None:
            return VarVal.unit()
        if isinstance(value, bool):
            return VarVal.boolean(value)
        if isinstance(value, int):
            return VarVal.i32(value)
        if isinstance(value, str):
            return VarVal.string(value)
        raise TypeError(f'cannot convert {type(value).__name__} to a Sprig value')

    @property
    def is_absent(self) -> bool:
        return self.data_type is not DataType.UNIT and self.value is None

    def __repr__(self) -> str:
        if self.data_type is DataType.UNIT:
            return 'VarVal(())'
        if self.is_absent:
            return f'VarVal({self.data_type.value}, absent)'
        return f'VarVal({self.data_type.value}, {self.value!r})'


@dataclass
class ArgList:
    """Evaluated call arguments, in call-site order."""
    args: List[VarVal] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.args)

    def __iter__(self):
        return iter(self.args)


def to_string(value: VarVal) -> str:
    """Render a value the way `print` shows it. Absent values render empty."""
    if value.data_type is DataType.UNIT:
        return '()'
    if value.is_absent:
        return ''
    if value.data_type is DataType.BOOL:
        return 'true' if value.value else 'false'
    return str(value.value)
