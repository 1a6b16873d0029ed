"""
miniasm — Flat Integer Memory Pool

The machine's only mutable storage: a flat array of signed 32-bit cells
addressed 0 … size-1. Every read and write is bounds-checked.

Resizing is destructive. The old contents are discarded and every cell
is refilled, either with zeros (friendly mode) or with random garbage
drawn from the OS entropy pool (default). The garbage fill turns any
read of a cell the program never wrote into a visible, non-reproducible
bug, so well-formed programs must initialise everything they use.

A fresh pool has size 0; a program starts with MEM before touching cells.
"""

import os
from array import array
from typing import Iterator

from .config import MAX_MEMORY_SIZE
from .errors import ErrorKind, ExecutionError


WORD_MASK = 0xFFFFFFFF
SIGN_BIT = 0x80000000
CELL_TYPECODE = 'i'   # C int, 4 bytes on every supported platform


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to the signed 32-bit range."""
    value &= WORD_MASK
    if value & SIGN_BIT:
        return value - (WORD_MASK + 1)
    return value


def random_int() -> int:
    """One signed 32-bit integer of process-random garbage."""
    return int.from_bytes(os.urandom(4), "little", signed=True)


class MemoryPool:
    """Bounds-checked, resizable array of signed 32-bit integers.

    Usage:
        pool = MemoryPool(friendly=True)
        pool.resize(3)
        pool[0] = 5
        pool[0]      # 5
        pool[3]      # ExecutionError(MEMORY_INDEX)
    """

    def __init__(self, size: int = 0, *, friendly: bool = False,
                 max_size: int = MAX_MEMORY_SIZE):
        self.friendly = friendly
        self.max_size = max_size
        self._mem = array(CELL_TYPECODE)
        if size:
            self.resize(size)

    # --- Core read/write ---

    def _check(self, pos: int) -> int:
        if not 0 <= pos < len(self._mem):
            raise ExecutionError(
                ErrorKind.MEMORY_INDEX,
                f"address {pos} outside pool of {len(self._mem)} cells")
        return pos

    def __getitem__(self, pos: int) -> int:
        return self._mem[self._check(pos)]

    def __setitem__(self, pos: int, value: int):
        self._mem[self._check(pos)] = to_int32(value)

    def __len__(self) -> int:
        return len(self._mem)

    def __iter__(self) -> Iterator[int]:
        return iter(self._mem)

    @property
    def size(self) -> int:
        return len(self._mem)

    # --- Resize ---

    def resize(self, size: int):
        """Discard all cells and reinitialise ``size`` new ones."""
        if size < 0:
            raise ExecutionError(ErrorKind.MEMORY_LIMIT,
                                 f"negative pool size {size}")
        if size > self.max_size:
            raise ExecutionError(ErrorKind.MEMORY_LIMIT,
                                 f"{size} cells requested, maximum is {self.max_size}")

        fresh = array(CELL_TYPECODE)
        if self.friendly:
            fresh.frombytes(bytes(size * fresh.itemsize))
        else:
            fresh.frombytes(os.urandom(size * fresh.itemsize))
        self._mem = fresh

    def snapshot(self, start: int = 0, end: int = None) -> list:
        """Copy of a cell range, for inspection and tests."""
        return self._mem[start:end].tolist()

    def __repr__(self):
        mode = "friendly" if self.friendly else "random"
        return f"MemoryPool(size={len(self._mem)}, {mode})"
