"""
Memory pool and Value tests.

The pool is the machine's only storage; a Value resolves against it by
chained loads. Friendly mode zero-fills, default mode fills with garbage.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from miniasm.config import MAX_MEMORY_SIZE, MAX_REFERENCE_DEPTH
from miniasm.errors import ErrorKind, ExecutionError
from miniasm.memory import MemoryPool, to_int32
from miniasm.value import Value


class CountingPool(MemoryPool):
    """MemoryPool that counts reads."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads = 0

    def __getitem__(self, pos):
        self.reads += 1
        return super().__getitem__(pos)


class TestInt32:
    def test_wrap(self):
        assert to_int32(0) == 0
        assert to_int32(2**31 - 1) == 2**31 - 1
        assert to_int32(2**31) == -2**31
        assert to_int32(2**32) == 0
        assert to_int32(-1) == -1
        assert to_int32(-2**31 - 1) == 2**31 - 1


class TestMemoryPool:
    def test_starts_empty(self):
        pool = MemoryPool()
        assert len(pool) == 0
        with pytest.raises(ExecutionError) as exc:
            pool[0]
        assert exc.value.kind is ErrorKind.MEMORY_INDEX

    def test_read_write(self):
        pool = MemoryPool(4, friendly=True)
        pool[3] = 99
        assert pool[3] == 99
        assert pool.snapshot() == [0, 0, 0, 99]

    def test_store_wraps(self):
        pool = MemoryPool(1, friendly=True)
        pool[0] = 2**31
        assert pool[0] == -2**31

    @pytest.mark.parametrize("pos", [-1, 4, 100])
    def test_out_of_bounds(self, pos):
        pool = MemoryPool(4, friendly=True)
        with pytest.raises(ExecutionError) as exc:
            pool[pos]
        assert exc.value.kind is ErrorKind.MEMORY_INDEX
        with pytest.raises(ExecutionError):
            pool[pos] = 1

    def test_friendly_resize_zero_fills(self):
        pool = MemoryPool(friendly=True)
        pool.resize(10)
        assert pool.snapshot() == [0] * 10

    def test_resize_is_destructive(self):
        pool = MemoryPool(3, friendly=True)
        pool[0] = 7
        pool.resize(3)
        assert pool[0] == 0

    def test_random_fill_differs(self):
        """Two garbage fills of 64 cells collide with negligible probability."""
        a = MemoryPool(64)
        b = MemoryPool(64)
        assert a.snapshot() != b.snapshot()
        assert any(v != 0 for v in a)

    def test_resize_limit(self):
        pool = MemoryPool(friendly=True, max_size=8)
        pool.resize(8)
        with pytest.raises(ExecutionError) as exc:
            pool.resize(9)
        assert exc.value.kind is ErrorKind.MEMORY_LIMIT

    def test_default_limit(self):
        with pytest.raises(ExecutionError) as exc:
            MemoryPool(friendly=True).resize(MAX_MEMORY_SIZE + 1)
        assert exc.value.kind is ErrorKind.MEMORY_LIMIT

    def test_negative_size(self):
        with pytest.raises(ExecutionError) as exc:
            MemoryPool(friendly=True).resize(-1)
        assert exc.value.kind is ErrorKind.MEMORY_LIMIT

    def test_resize_to_zero(self):
        pool = MemoryPool(5, friendly=True)
        pool.resize(0)
        assert len(pool) == 0


class TestValue:
    def test_literal(self):
        pool = CountingPool(friendly=True)
        assert Value(42).resolve(pool) == 42
        assert pool.reads == 0

    def test_single_deref(self):
        pool = MemoryPool(4, friendly=True)
        pool[2] = 17
        assert Value(2, 1).resolve(pool) == 17

    def test_chain(self):
        pool = MemoryPool(4, friendly=True)
        pool[0] = 1
        pool[1] = 2
        pool[2] = 3
        assert Value(0, 2).resolve(pool) == 2
        assert Value(0, 3).resolve(pool) == 3

    @pytest.mark.parametrize("depth", [0, 1, 5, MAX_REFERENCE_DEPTH])
    def test_exactly_depth_loads(self, depth):
        pool = CountingPool(1, friendly=True)
        pool[0] = 0   # cell holding its own address
        assert Value(0, depth).resolve(pool) == 0
        assert pool.reads == depth

    def test_depth_overflow(self):
        pool = CountingPool(1, friendly=True)
        pool[0] = 0
        with pytest.raises(ExecutionError) as exc:
            Value(0, MAX_REFERENCE_DEPTH + 1).resolve(pool)
        assert exc.value.kind is ErrorKind.REFERENCES_OVERFLOW
        assert pool.reads == 0

    def test_deref_out_of_bounds(self):
        pool = MemoryPool(2, friendly=True)
        pool[0] = 5
        with pytest.raises(ExecutionError) as exc:
            Value(0, 2).resolve(pool)
        assert exc.value.kind is ErrorKind.MEMORY_INDEX

    def test_unset(self):
        assert Value.unset(friendly=True) == Value(0, 0)
        assert Value.unset().depth == 0

    def test_str(self):
        assert str(Value(3, 0)) == "3"
        assert str(Value(3, 2)) == "**3"

    def test_str_negative_base_is_unsigned(self):
        assert str(Value(-1)) == "4294967295"
        assert str(Value(-2**31, 1)) == "*2147483648"
