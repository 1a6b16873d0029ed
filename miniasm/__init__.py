"""
miniasm — a tiny line-oriented assembly virtual machine
========================================================
Runs programs written in a small assembly language against a flat array
of 32-bit integers, under a fixed time budget.

Architecture:
    ┌──────────┐    ┌───────────┐    ┌──────────┐    ┌──────────────┐    ┌───────────┐
    │  Source  │───>│ Tokenizer │───>│  Parser  │───>│ Instructions │───>│  Program  │
    │  lines   │    │ (runs)    │    │ (Command)│    │ (execute)    │    │ (loop)    │
    └──────────┘    └───────────┘    └──────────┘    └──────────────┘    └───────────┘

    - lexer.py:        character-class runs → Tokens
    - parser.py:       opcode lookup + operand reading → Command
    - value.py:        self-dereferencing operands (base + depth)
    - memory.py:       bounds-checked int32 pool, destructive resize
    - alu.py:          32-bit arithmetic / bitwise / compare helpers
    - instructions.py: opcode table, operand shapes, dispatch
    - program.py:      fetch-execute loop, cursor, time budget

Example:
    >>> from miniasm import run_source, MachineConfig
    >>> run_source("MEM 1\\nADD 2 3 0\\nOUT *0", config=MachineConfig(friendly=True))
    [5]
"""

__version__ = "0.1.0"

from typing import List, Optional

from .config import MachineConfig, DEFAULT_CONFIG
from .errors import ErrorKind, MachineError, LexerError, ParseError, ExecutionError
from .lexer import Token, TokenType, Tokenizer, tokenize
from .value import Value
from .memory import MemoryPool
from .instructions import Command, Environment, Opcode, Shape, execute
from .parser import Parser, parse
from .program import Program, State


def run_source(source: str, *, inputs=None, config: Optional[MachineConfig] = None,
               on_output=None) -> List[int]:
    """Parse and run ``source``; return every integer it emitted.

    Full pipeline: Tokenizer -> Parser -> Program.run.

    Args:
        source: Program text, one instruction per line.
        inputs: Integers consumed by IN, in order.
        config: Limits and friendly mode (default: from environment).
        on_output: Called with each value as OUT emits it.

    Raises:
        MachineError: on any fatal condition.
    """
    program = Program.from_source(source, config=config, inputs=inputs,
                                  on_output=on_output)
    return program.run()
