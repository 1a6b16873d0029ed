"""
miniasm — 32-bit ALU Operations

Pure functions over already-resolved operand values. Every result is
wrapped back to a signed 32-bit integer, matching a C ``int`` machine:

  DIV  truncates toward zero          (-7 / 2  == -3)
  MOD  takes the sign of the dividend (-7 % 2  == -1)
  SHL/SHR and ROL/ROR use only the low 5 bits of the shift count.
  SHR is arithmetic (sign-filling).
  ROL/ROR rotate one bit at a time over the unsigned word.
"""

from .config import INT_BITS
from .errors import ErrorKind, ExecutionError
from .memory import to_int32, WORD_MASK


SHIFT_MASK = INT_BITS - 1
TOP_BIT = INT_BITS - 1


# ══════════════════════════════════════════════
# Arithmetic
# ══════════════════════════════════════════════

def add(a: int, b: int) -> int:
    return to_int32(a + b)


def sub(a: int, b: int) -> int:
    return to_int32(a - b)


def mul(a: int, b: int) -> int:
    return to_int32(a * b)


def div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    if b == 0:
        raise ExecutionError(ErrorKind.DIVISION_BY_ZERO, f"{a} / 0")
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return to_int32(q)


def mod(a: int, b: int) -> int:
    """Remainder with the sign of the dividend (C ``%``)."""
    if b == 0:
        raise ExecutionError(ErrorKind.DIVISION_BY_ZERO, f"{a} % 0")
    r = abs(a) % abs(b)
    if a < 0:
        r = -r
    return to_int32(r)


def inc(a: int) -> int:
    return to_int32(a + 1)


def dec(a: int) -> int:
    return to_int32(a - 1)


def neg(a: int) -> int:
    return to_int32(-a)


# ══════════════════════════════════════════════
# Bitwise / logical
# ══════════════════════════════════════════════

def bit_and(a: int, b: int) -> int:
    return to_int32(a & b)


def bit_or(a: int, b: int) -> int:
    return to_int32(a | b)


def bit_xor(a: int, b: int) -> int:
    return to_int32(a ^ b)


def flip(a: int) -> int:
    """Bitwise complement (C ``~``)."""
    return to_int32(~a)


def logical_not(a: int) -> int:
    """Logical negation (C ``!``): 1 for zero, 0 otherwise."""
    return 1 if a == 0 else 0


def shl(a: int, n: int) -> int:
    return to_int32(a << (n & SHIFT_MASK))


def shr(a: int, n: int) -> int:
    return to_int32(to_int32(a) >> (n & SHIFT_MASK))


def rol(a: int, n: int) -> int:
    """Rotate left by ``n & 31`` single-bit steps."""
    word = a & WORD_MASK
    for _ in range(n & SHIFT_MASK):
        word = ((word << 1) | (word >> TOP_BIT)) & WORD_MASK
    return to_int32(word)


def ror(a: int, n: int) -> int:
    """Rotate right by ``n & 31`` single-bit steps."""
    word = a & WORD_MASK
    for _ in range(n & SHIFT_MASK):
        word = (word >> 1) | ((word & 1) << TOP_BIT)
    return to_int32(word)


# ══════════════════════════════════════════════
# Comparison — result is 0 or 1
# ══════════════════════════════════════════════

def equ(a: int, b: int) -> int:
    return int(a == b)


def gter(a: int, b: int) -> int:
    return int(a > b)


def less(a: int, b: int) -> int:
    return int(a < b)


def geq(a: int, b: int) -> int:
    return int(a >= b)


def leq(a: int, b: int) -> int:
    return int(a <= b)
