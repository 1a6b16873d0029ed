"""
miniasm — Program and Execution Loop

A Program owns the parsed command list, the memory pool, the cursor and
the elapsed-time counter.

Execution model:
  1. Halt if the cursor has run past the last command
  2. Check the cursor is not negative
  3. Fetch commands[cursor], then advance the cursor by one
  4. Execute the command (it may overwrite the cursor: JMP, JIF, ...;
     JMOV and JIFM land relative to the command's own index)
  5. Add its time cost; abort if the total passes the time limit

Termination:
  - HALTED:  cursor >= len(commands). There is no HALT opcode; falling
             off the end is the only way to finish.
  - abort:   any ExecutionError. Nothing after the faulting command runs.

Usage:
    program = Program.from_source("MEM 1\\nSET 5 0\\nOUT *0\\n",
                                  config=MachineConfig(friendly=True))
    program.run()          # [5]
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional

from .config import MachineConfig
from .errors import ErrorKind, ExecutionError
from .instructions import Command, Environment, execute
from .memory import MemoryPool
from .parser import Parser


log = logging.getLogger(__name__)


class State(Enum):
    RUNNING = 'RUNNING'
    HALTED = 'HALTED'


class Program:
    """Command list plus the machine state it runs against."""

    def __init__(self, config: Optional[MachineConfig] = None, inputs=None,
                 on_output: Optional[Callable[[int], None]] = None):
        if config is None:
            config = MachineConfig.from_env()
        self.config = config
        self.memory = MemoryPool(friendly=config.friendly, max_size=config.max_memory)
        self.env = Environment(self.memory, inputs, on_output, config.max_depth)
        self._commands: List[Command] = []
        self._elapsed = 0

        self._trace = False
        self.trace_output: List[str] = []

    @classmethod
    def from_source(cls, source: str, **kwargs) -> Program:
        program = cls(**kwargs)
        program.load(source.splitlines())
        return program

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def append(self, command: Command):
        self._commands.append(command)

    def load(self, lines: Iterable[str]) -> int:
        """Parse ``lines`` and append every command. Returns the count added."""
        commands = Parser(self.config).parse_lines(lines)
        self._commands.extend(commands)
        log.info("Loaded %d commands", len(commands))
        return len(commands)

    # ══════════════════════════════════════════════
    # State
    # ══════════════════════════════════════════════

    @property
    def commands(self) -> List[Command]:
        return list(self._commands)

    @property
    def cursor(self) -> int:
        return self.env.cursor

    @cursor.setter
    def cursor(self, value: int):
        self.env.cursor = value

    @property
    def elapsed(self) -> int:
        return self._elapsed

    @property
    def outputs(self) -> List[int]:
        return self.env.outputs

    @property
    def exited(self) -> bool:
        return self.env.cursor >= len(self._commands)

    @property
    def state(self) -> State:
        return State.HALTED if self.exited else State.RUNNING

    def enable_trace(self, enabled: bool = True):
        """Record one ``[index] COMMAND`` line per executed step."""
        self._trace = enabled

    def listing(self) -> str:
        width = len(str(max(len(self._commands) - 1, 0)))
        return "\n".join(f"{i:>{width}}  {cmd}" for i, cmd in enumerate(self._commands))

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> State:
        """Execute one command. Raises ExecutionError on any fault."""
        if self.exited:
            return State.HALTED

        position = self.env.cursor
        if position < 0:
            raise ExecutionError(ErrorKind.INVALID_POSITION,
                                 f"cursor {position}", position)

        command = self._commands[position]
        self.env.position = position
        self.env.cursor = position + 1

        if self._trace:
            self.trace_output.append(f"[{position}] {command}")
        log.debug("#%d %s", position, command)

        try:
            cost = execute(command, self.env)
        except ExecutionError as e:
            if e.position is None:
                raise ExecutionError(e.kind, e.detail, position, command) from None
            raise

        self._elapsed += cost
        if self._elapsed > self.config.time_limit:
            raise ExecutionError(
                ErrorKind.TIME_LIMIT,
                f"{self._elapsed} > {self.config.time_limit}", position, command)

        return self.state

    def run(self) -> List[int]:
        """Run until the cursor falls off the end. Returns all outputs."""
        log.info("Running %d commands (time limit %d)",
                 len(self._commands), self.config.time_limit)
        while self.step() is State.RUNNING:
            pass
        log.info("Halted after %d time units, %d outputs",
                 self._elapsed, len(self.env.outputs))
        return self.env.outputs
