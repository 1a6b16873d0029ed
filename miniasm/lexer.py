"""
Line tokenizer for miniasm source.

Each source line is scanned once, left to right. Every character falls
into one of four classes:

    letter   A-Z a-z          → IDENT runs   (opcodes, filler words)
    digit    0-9              → INT runs     (literal bases)
    sign     * #              → SIGN runs    (dereference stars, comments)
    other    anything else    → separator, never part of a token

Consecutive characters of the same class form one token. A change of
class closes the current token and opens a new one, so ``**12ab`` is
three tokens: ``**``, ``12``, ``ab``. A token whose first character is
``#`` is a COMMENT marker; the parser ignores lines that start with one.

Tokens keep their text only. Turning digits into numbers is the
parser's job.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .config import MAX_LEXEME_LENGTH
from .errors import ErrorKind, LexerError


# ──────────────────────────────────────────────
# Token types
# ──────────────────────────────────────────────

class TokenType(enum.Enum):
    IDENT = "IDENT"
    INT = "INT"
    SIGN = "SIGN"
    COMMENT = "COMMENT"


SIGN_CHARS = "*#"
COMMENT_CHAR = "#"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    col: int = 0

    @property
    def is_int(self) -> bool:
        return self.type is TokenType.INT

    @property
    def is_comment(self) -> bool:
        return self.type is TokenType.COMMENT

    def __len__(self) -> int:
        return len(self.text)

    def __repr__(self):
        return f"Token({self.type.name}, {self.text!r}, C{self.col})"


# ──────────────────────────────────────────────
# Character classes
# ──────────────────────────────────────────────

def classify(ch: str) -> Optional[TokenType]:
    """Return the run type a character belongs to, or None for separators."""
    if ch.isascii() and ch.isalpha():
        return TokenType.IDENT
    if '0' <= ch <= '9':
        return TokenType.INT
    if ch in SIGN_CHARS:
        return TokenType.SIGN
    return None


# ──────────────────────────────────────────────
# Tokenizer
# ──────────────────────────────────────────────

class Tokenizer:
    """Splits one line of source into Tokens."""

    def __init__(self, max_lexeme_length: int = MAX_LEXEME_LENGTH):
        self.max_lexeme_length = max_lexeme_length

    def _make(self, line: str, kind: TokenType, start: int, end: int,
              line_num: int) -> Token:
        if end - start > self.max_lexeme_length:
            raise LexerError(
                ErrorKind.LEXEME_TOO_LONG,
                f"{end - start} characters at column {start + 1}",
                line_num)
        text = line[start:end]
        if kind is TokenType.SIGN and text.startswith(COMMENT_CHAR):
            kind = TokenType.COMMENT
        return Token(kind, text, start + 1)

    def tokenize(self, line: str, line_num: int = 0) -> Iterator[Token]:
        """Yield the tokens of ``line`` lazily."""
        mode = None
        start = 0
        for pos, ch in enumerate(line):
            kind = classify(ch)
            if kind is mode:
                continue
            if mode is not None:
                yield self._make(line, mode, start, pos, line_num)
            mode = kind
            start = pos
        if mode is not None:
            yield self._make(line, mode, start, len(line), line_num)

    def tokenize_all(self, line: str, line_num: int = 0) -> List[Token]:
        return list(self.tokenize(line, line_num))


def tokenize(line: str) -> List[Token]:
    """Convenience: tokenize one line with the default limits."""
    return Tokenizer().tokenize_all(line)
