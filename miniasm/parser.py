"""
Line parser for miniasm source.

Each line is parsed on its own:

  1. Tokenize. An empty line, or one whose first token is a ``#``
     comment, produces no command.
  2. Look the first token up in the opcode table (case-sensitive).
  3. Read the operands the opcode's shape asks for, left to right.

Reading one operand (``read_value``) walks tokens until it meets an
integer. Every non-integer token on the way adds its length to the
dereference depth, so ``** * 7`` and ``***7`` both mean base 7, depth 3,
and filler words count too (``at 7`` is base 7, depth 2). The integer
ends the operand. Running out of tokens first is an error.

NOP is the one special case: when the line's last token is an integer
the NOP becomes a tagged NOP with a single index operand.

Tokens after the last operand are ignored.
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Tuple

from .config import MachineConfig
from .errors import ErrorKind, ParseError
from .instructions import (
    Command, Opcode, OPCODE_SHAPES, Shape, TAGGED_NOP_SHAPE,
)
from .lexer import Token, Tokenizer
from .memory import to_int32
from .value import Value


log = logging.getLogger(__name__)

OPCODES = {op.value: op for op in Opcode}


class Parser:
    """Turns source lines into Commands."""

    def __init__(self, config: Optional[MachineConfig] = None):
        if config is None:
            config = MachineConfig()
        self.max_integer_length = config.max_integer_length
        self.tokenizer = Tokenizer(config.max_lexeme_length)

    # ── Operands ──────────────────────────────

    def read_value(self, tokens: List[Token], pos: int) -> Tuple[Value, int]:
        """Read one operand starting at ``tokens[pos]``.

        Returns the Value and the index just past its integer token.
        """
        depth = 0
        while True:
            if pos >= len(tokens):
                raise ParseError(ErrorKind.INVALID_VALUE, "missing operand")
            tok = tokens[pos]
            if tok.is_int:
                if len(tok) > self.max_integer_length:
                    raise ParseError(
                        ErrorKind.INTEGER_TOO_LONG,
                        f"{tok.text!r} has {len(tok)} digits, maximum is "
                        f"{self.max_integer_length}")
                return Value(to_int32(int(tok.text)), depth), pos + 1
            depth += len(tok)
            pos += 1

    def read_operands(self, shape: Shape, tokens: List[Token], pos: int = 1):
        values = []
        for _ in range(shape.arity):
            value, pos = self.read_value(tokens, pos)
            values.append(value)
        return shape.build(values)

    # ── Lines ─────────────────────────────────

    def parse_tokens(self, tokens: List[Token], line_num: int = 0) -> Optional[Command]:
        if not tokens or tokens[0].is_comment:
            return None

        head = tokens[0]
        opcode = OPCODES.get(head.text)
        if opcode is None:
            raise ParseError(ErrorKind.UNKNOWN_INSTRUCTION, repr(head.text))

        shape = OPCODE_SHAPES[opcode]
        if opcode is Opcode.NOP and len(tokens) > 1 and tokens[-1].is_int:
            shape = TAGGED_NOP_SHAPE

        args = self.read_operands(shape, tokens)
        return Command(opcode, args, line_num)

    def parse(self, line: str, line_num: int = 0) -> Optional[Command]:
        """Parse one line. Returns None for blank and comment lines."""
        tokens = self.tokenizer.tokenize_all(line, line_num)
        try:
            return self.parse_tokens(tokens, line_num)
        except ParseError as e:
            if line_num and not e.line_num:
                raise ParseError(e.kind, e.detail, line_num, line.rstrip("\n")) from None
            raise

    def parse_lines(self, lines: Iterable[str]) -> List[Command]:
        """Parse every line, skipping those that produce no command."""
        commands = []
        for line_num, line in enumerate(lines, start=1):
            command = self.parse(line, line_num)
            if command is not None:
                log.debug("L%d: %s", line_num, command)
                commands.append(command)
        return commands


def parse(line: str) -> Optional[Command]:
    """Convenience: parse one line with the default limits."""
    return Parser().parse(line)
