"""Native functions available to Sprig programs run from the command line.

A native is any callable taking an `ArgList` and returning a `VarVal`.
The interpreter looks natives up before user functions and never checks
their arity, so each native decides for itself what arguments it accepts.
"""

from typing import Callable, Dict

from sprig.types import ArgList, VarVal, to_string

Native = Callable[[ArgList], VarVal]


def std_print(args: ArgList) -> VarVal:
    print(''.join(to_string(arg) for arg in args))
    return VarVal.unit()


def standard_natives() -> Dict[str, Native]:
    """Return a fresh name -> native table with the standard functions."""
    return {
        'print': std_print,
    }
