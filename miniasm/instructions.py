"""
Instruction set for the miniasm virtual machine.

Every opcode has a fixed operand shape. Operands are read left to right
and the destination address, when there is one, always comes last:

  Shape              Operands               Opcodes
  ─────────────────  ─────────────────────  ─────────────────────────────
  NONE               —                      NOP
  INDEX              idx                    NOP (tagged), IN
  VALUE              v                      MEM, OUT, JMP, JMOV
  VALUE_INDEX        v, idx                 SET, INC, DEC, NEC, FLIP, NOT
  VALUE_VALUE        v1, v2                 JIF, JIFM
  VALUE_VALUE_INDEX  v1, v2, idx            ADD SUB MUL DIV MOD AND OR XOR
                                            SHL SHR ROL ROR
                                            EQU GTER LESS GEQ LEQ

A Command pairs an Opcode with the operand record for its shape. Commands
are plain values: executing one never changes it. All machine state a
command may touch is reached through the Environment the execution loop
hands to ``execute``.

Time cost: IN and OUT cost 1, everything else is free. The run budget
therefore meters I/O, not raw instruction count.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from . import alu
from .config import MAX_REFERENCE_DEPTH
from .errors import ErrorKind, ExecutionError
from .memory import MemoryPool, to_int32
from .value import Value


# ──────────────────────────────────────────────
# Opcodes
# ──────────────────────────────────────────────

class Opcode(enum.Enum):
    NOP = "NOP"
    MEM = "MEM"
    IN = "IN"
    OUT = "OUT"
    SET = "SET"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    MOD = "MOD"
    INC = "INC"
    DEC = "DEC"
    NEC = "NEC"
    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    FLIP = "FLIP"
    NOT = "NOT"
    SHL = "SHL"
    SHR = "SHR"
    ROL = "ROL"
    ROR = "ROR"
    EQU = "EQU"
    GTER = "GTER"
    LESS = "LESS"
    GEQ = "GEQ"
    LEQ = "LEQ"
    JMP = "JMP"
    JMOV = "JMOV"
    JIF = "JIF"
    JIFM = "JIFM"


# ──────────────────────────────────────────────
# Operand records
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class NoArgs:
    def operands(self) -> Tuple[Value, ...]:
        return ()


@dataclass(frozen=True)
class IndexArgs:
    index: Value

    def operands(self) -> Tuple[Value, ...]:
        return (self.index,)


@dataclass(frozen=True)
class ValueArgs:
    value: Value

    def operands(self) -> Tuple[Value, ...]:
        return (self.value,)


@dataclass(frozen=True)
class ValueIndexArgs:
    value: Value
    index: Value

    def operands(self) -> Tuple[Value, ...]:
        return (self.value, self.index)


@dataclass(frozen=True)
class BinaryArgs:
    lhs: Value
    rhs: Value

    def operands(self) -> Tuple[Value, ...]:
        return (self.lhs, self.rhs)


@dataclass(frozen=True)
class BinaryIndexArgs:
    lhs: Value
    rhs: Value
    index: Value

    def operands(self) -> Tuple[Value, ...]:
        return (self.lhs, self.rhs, self.index)


Args = Union[NoArgs, IndexArgs, ValueArgs, ValueIndexArgs, BinaryArgs, BinaryIndexArgs]


class Shape(enum.Enum):
    """Operand shape: the record type and how many Values it holds."""
    NONE = (NoArgs, 0)
    INDEX = (IndexArgs, 1)
    VALUE = (ValueArgs, 1)
    VALUE_INDEX = (ValueIndexArgs, 2)
    VALUE_VALUE = (BinaryArgs, 2)
    VALUE_VALUE_INDEX = (BinaryIndexArgs, 3)

    @property
    def record(self) -> type:
        return self.value[0]

    @property
    def arity(self) -> int:
        return self.value[1]

    def build(self, values: List[Value]) -> Args:
        return self.record(*values)


OPCODE_SHAPES: Dict[Opcode, Shape] = {
    Opcode.NOP: Shape.NONE,
    Opcode.MEM: Shape.VALUE,
    Opcode.IN: Shape.INDEX,
    Opcode.OUT: Shape.VALUE,
    Opcode.SET: Shape.VALUE_INDEX,
    Opcode.INC: Shape.VALUE_INDEX,
    Opcode.DEC: Shape.VALUE_INDEX,
    Opcode.NEC: Shape.VALUE_INDEX,
    Opcode.FLIP: Shape.VALUE_INDEX,
    Opcode.NOT: Shape.VALUE_INDEX,
    Opcode.JMP: Shape.VALUE,
    Opcode.JMOV: Shape.VALUE,
    Opcode.JIF: Shape.VALUE_VALUE,
    Opcode.JIFM: Shape.VALUE_VALUE,
}
for _op in (Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV, Opcode.MOD,
            Opcode.AND, Opcode.OR, Opcode.XOR, Opcode.SHL, Opcode.SHR,
            Opcode.ROL, Opcode.ROR, Opcode.EQU, Opcode.GTER, Opcode.LESS,
            Opcode.GEQ, Opcode.LEQ):
    OPCODE_SHAPES[_op] = Shape.VALUE_VALUE_INDEX
del _op

# A NOP carrying one index operand records its own position.
TAGGED_NOP_SHAPE = Shape.INDEX

# Three-operand opcodes: dest = fn(v1, v2)
BINARY_OPS: Dict[Opcode, Callable[[int, int], int]] = {
    Opcode.ADD: alu.add,
    Opcode.SUB: alu.sub,
    Opcode.MUL: alu.mul,
    Opcode.DIV: alu.div,
    Opcode.MOD: alu.mod,
    Opcode.AND: alu.bit_and,
    Opcode.OR: alu.bit_or,
    Opcode.XOR: alu.bit_xor,
    Opcode.SHL: alu.shl,
    Opcode.SHR: alu.shr,
    Opcode.ROL: alu.rol,
    Opcode.ROR: alu.ror,
    Opcode.EQU: alu.equ,
    Opcode.GTER: alu.gter,
    Opcode.LESS: alu.less,
    Opcode.GEQ: alu.geq,
    Opcode.LEQ: alu.leq,
}

# Two-operand opcodes: dest = fn(v)
UNARY_OPS: Dict[Opcode, Callable[[int], int]] = {
    Opcode.INC: alu.inc,
    Opcode.DEC: alu.dec,
    Opcode.NEC: alu.neg,
    Opcode.FLIP: alu.flip,
    Opcode.NOT: alu.logical_not,
}

TIME_COSTS: Dict[Opcode, int] = {
    Opcode.IN: 1,
    Opcode.OUT: 1,
}


def time_cost(opcode: Opcode) -> int:
    return TIME_COSTS.get(opcode, 0)


# ──────────────────────────────────────────────
# Command
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Command:
    """One parsed source line: an opcode and its operand record."""
    opcode: Opcode
    args: Args = field(default_factory=NoArgs)
    line_num: int = field(default=0, compare=False)

    @property
    def is_tagged_nop(self) -> bool:
        return self.opcode is Opcode.NOP and isinstance(self.args, IndexArgs)

    @property
    def operands(self) -> Tuple[Value, ...]:
        return self.args.operands()

    def __str__(self) -> str:
        parts = [self.opcode.value]
        parts.extend(str(v) for v in self.operands)
        return " ".join(parts)


# ──────────────────────────────────────────────
# Execution environment
# ──────────────────────────────────────────────

class Environment:
    """Machine state visible to an executing Command.

    ``position`` is the index of the command being executed. ``cursor``
    is the index of the next command to fetch; by the time a command
    executes the loop has already moved it to ``position + 1``. Absolute
    jumps overwrite the cursor; relative jumps (JMOV, JIFM) and the
    tagged NOP count from ``position``.

    Input is any iterable of ints (or integer strings) consumed one per
    IN. Every OUT value is appended to ``outputs`` and handed to
    ``on_output`` when one is set.
    """

    def __init__(self, memory: MemoryPool, inputs=None,
                 on_output: Optional[Callable[[int], None]] = None,
                 max_depth: int = MAX_REFERENCE_DEPTH):
        self.memory = memory
        self.cursor = 0
        self.position = 0
        self.max_depth = max_depth
        self.outputs: List[int] = []
        self.on_output = on_output
        self._inputs: Iterator = iter(inputs if inputs is not None else ())

    def get(self, value: Value) -> int:
        return value.resolve(self.memory, self.max_depth)

    def store(self, index: Value, result: int):
        self.memory[self.get(index)] = result

    def read_input(self) -> int:
        try:
            raw = next(self._inputs)
        except StopIteration:
            raise ExecutionError(ErrorKind.INVALID_INPUT, "input exhausted") from None
        try:
            return to_int32(int(raw))
        except (TypeError, ValueError):
            raise ExecutionError(ErrorKind.INVALID_INPUT, f"not an integer: {raw!r}") from None

    def emit(self, value: int):
        self.outputs.append(value)
        if self.on_output is not None:
            self.on_output(value)


# ──────────────────────────────────────────────
# Dispatch
# ──────────────────────────────────────────────

def execute(command: Command, env: Environment) -> int:
    """Run one command against ``env`` and return its time cost.

    Source operands are resolved before the destination is written.
    """
    op = command.opcode
    args = command.args

    match op:
        case Opcode.NOP:
            if isinstance(args, IndexArgs):
                env.store(args.index, env.position)

        case Opcode.MEM:
            env.memory.resize(env.get(args.value))

        case Opcode.IN:
            env.store(args.index, env.read_input())

        case Opcode.OUT:
            env.emit(env.get(args.value))

        case Opcode.SET:
            env.store(args.index, env.get(args.value))

        case Opcode.JMP:
            env.cursor = env.get(args.value)

        case Opcode.JMOV:
            env.cursor = env.position + env.get(args.value)

        case Opcode.JIF:
            if env.get(args.lhs) != 0:
                env.cursor = env.get(args.rhs)

        case Opcode.JIFM:
            if env.get(args.lhs) != 0:
                env.cursor = env.position + env.get(args.rhs)

        case _ if op in UNARY_OPS:
            env.store(args.index, UNARY_OPS[op](env.get(args.value)))

        case _ if op in BINARY_OPS:
            a = env.get(args.lhs)
            b = env.get(args.rhs)
            env.store(args.index, BINARY_OPS[op](a, b))

    return time_cost(op)
