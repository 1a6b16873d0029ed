"""
Self-dereferencing operands.

A Value is a literal base plus a dereference depth. Written in source as
a run of ``*`` characters before an integer:

    5       base 5, depth 0   → 5
    *5      base 5, depth 1   → memory[5]
    **5     base 5, depth 2   → memory[memory[5]]

A negative base prints in its unsigned 32-bit form, since the tokenizer
reads ``-`` as a separator. ``Value.unset`` models an operand that was
never given a literal; the parser itself always supplies one.
"""

from __future__ import annotations
from dataclasses import dataclass

from .config import MAX_REFERENCE_DEPTH
from .errors import ErrorKind, ExecutionError
from .memory import MemoryPool, WORD_MASK, random_int


@dataclass(frozen=True)
class Value:
    base: int
    depth: int = 0

    @classmethod
    def unset(cls, friendly: bool = False) -> Value:
        """Operand that was never given a literal: zero or garbage."""
        return cls(0 if friendly else random_int(), 0)

    def resolve(self, memory: MemoryPool, max_depth: int = MAX_REFERENCE_DEPTH) -> int:
        """Apply ``depth`` chained loads starting from ``base``."""
        if self.depth > max_depth:
            raise ExecutionError(
                ErrorKind.REFERENCES_OVERFLOW,
                f"depth {self.depth} exceeds {max_depth}")
        result = self.base
        for _ in range(self.depth):
            result = memory[result]
        return result

    def __str__(self) -> str:
        base = self.base & WORD_MASK if self.base < 0 else self.base
        return "*" * self.depth + str(base)
