"""
Error types for the miniasm virtual machine.

Every failure in miniasm is fatal: the run stops, no further instruction
executes, and one diagnostic names what went wrong. Library code raises
one of the exceptions below; only the command-line front end catches them.

    MachineError            base class, carries an ErrorKind tag
      ├── LexerError        tokenizer rejected a line
      ├── ParseError        line could not become a Command
      └── ExecutionError    fault while a Program was running
"""

from __future__ import annotations
import enum
from typing import Optional


class ErrorKind(enum.Enum):
    """Failure categories. The value is the diagnostic text."""
    MEMORY_INDEX = "Memory index error"
    REFERENCES_OVERFLOW = "References overflow"
    MEMORY_LIMIT = "Memory limit exceeded"
    TIME_LIMIT = "Time limit exceeded"
    INVALID_POSITION = "Invalid position"
    INVALID_VALUE = "Invalid value"
    INTEGER_TOO_LONG = "Integer too long"
    LEXEME_TOO_LONG = "Lexeme too long"
    UNKNOWN_INSTRUCTION = "Unknown instruction"
    DIVISION_BY_ZERO = "Division by zero"
    INVALID_INPUT = "Invalid input"


class MachineError(Exception):
    """Base for all miniasm failures."""

    def __init__(self, kind: ErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        message = kind.value
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class LexerError(MachineError):
    def __init__(self, kind: ErrorKind, detail: str = "", line_num: int = 0):
        self.line_num = line_num
        if line_num:
            detail = f"line {line_num}: {detail}" if detail else f"line {line_num}"
        super().__init__(kind, detail)


class ParseError(MachineError):
    """Raised when a source line cannot be turned into a Command."""

    def __init__(self, kind: ErrorKind, detail: str = "",
                 line_num: int = 0, line_text: str = ""):
        self.line_num = line_num
        self.line_text = line_text
        if line_num:
            detail = f"line {line_num}: {detail}" if detail else f"line {line_num}"
        super().__init__(kind, detail)


class ExecutionError(MachineError):
    """Raised when a running Program hits an invalid state.

    ``position`` is the index of the command that faulted (None when the
    fault happened before a command was fetched).
    """

    def __init__(self, kind: ErrorKind, detail: str = "",
                 position: Optional[int] = None, command: Optional[object] = None):
        self.position = position
        self.command = command
        if position is not None:
            where = f"at #{position}"
            if command is not None:
                where = f"{where} ({command})"
            detail = f"{detail} {where}" if detail else where
        super().__init__(kind, detail)
