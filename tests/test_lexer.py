"""
Tokenizer tests for miniasm.

Each line splits into runs of one character class: letters, digits, or
signs (* #). Anything else separates runs and is dropped.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from miniasm.errors import ErrorKind, LexerError
from miniasm.lexer import Token, TokenType, Tokenizer, tokenize, classify


def _texts(line):
    return [t.text for t in tokenize(line)]


def _types(line):
    return [t.type for t in tokenize(line)]


class TestCharacterClasses:
    def test_classify(self):
        assert classify("a") is TokenType.IDENT
        assert classify("Z") is TokenType.IDENT
        assert classify("7") is TokenType.INT
        assert classify("*") is TokenType.SIGN
        assert classify("#") is TokenType.SIGN
        assert classify(" ") is None
        assert classify("-") is None
        assert classify(",") is None

    def test_non_ascii_letters_separate(self):
        assert _texts("ADDé5") == ["ADD", "5"]


class TestRuns:
    def test_simple_instruction(self):
        assert _texts("ADD 2 3 0") == ["ADD", "2", "3", "0"]
        assert _types("ADD 2 3 0") == [
            TokenType.IDENT, TokenType.INT, TokenType.INT, TokenType.INT]

    def test_star_operand(self):
        """"ADD 5 *3 r" → the star is its own run in front of the integer."""
        tokens = tokenize("ADD 5 *3 r")
        assert [t.text for t in tokens] == ["ADD", "5", "*", "3", "r"]
        assert tokens[2].type is TokenType.SIGN
        assert tokens[4].type is TokenType.IDENT

    def test_class_change_splits_without_separator(self):
        assert _texts("**12ab") == ["**", "12", "ab"]
        assert _texts("SET1") == ["SET", "1"]

    def test_separators_dropped(self):
        assert _texts("  SET,\t5 ;; 0\r\n") == ["SET", "5", "0"]

    def test_negative_sign_is_separator(self):
        assert _texts("JMOV -2") == ["JMOV", "2"]

    def test_trailing_run_emitted_without_newline(self):
        assert _texts("OUT 42") == ["OUT", "42"]

    def test_empty_and_blank_lines(self):
        assert tokenize("") == []
        assert tokenize("   \t\n") == []
        assert tokenize("-- ,, ;;") == []

    def test_columns_are_one_based(self):
        tokens = tokenize("  OUT 7")
        assert tokens[0].col == 3
        assert tokens[1].col == 7

    def test_token_len(self):
        assert len(Token(TokenType.SIGN, "***")) == 3


class TestComments:
    def test_hash_starts_comment(self):
        tokens = tokenize("# a comment")
        assert tokens[0].type is TokenType.COMMENT
        assert tokens[0].is_comment

    def test_hash_mixed_with_stars(self):
        assert tokenize("#*")[0].type is TokenType.COMMENT
        assert tokenize("*#")[0].type is TokenType.SIGN

    def test_trailing_comment_is_a_token(self):
        tokens = tokenize("OUT 1 # done")
        assert [t.type for t in tokens] == [
            TokenType.IDENT, TokenType.INT, TokenType.COMMENT, TokenType.IDENT]


class TestLaziness:
    def test_tokenize_is_a_generator(self):
        gen = Tokenizer().tokenize("SET 1 2")
        assert next(gen).text == "SET"
        assert next(gen).text == "1"
        assert next(gen).text == "2"
        with pytest.raises(StopIteration):
            next(gen)


class TestLexemeLimit:
    def test_long_lexeme_rejected(self):
        with pytest.raises(LexerError) as exc:
            Tokenizer(max_lexeme_length=8).tokenize_all("OUT " + "*" * 9 + "1", 3)
        assert exc.value.kind is ErrorKind.LEXEME_TOO_LONG
        assert exc.value.line_num == 3

    def test_lexeme_at_limit_ok(self):
        tokens = Tokenizer(max_lexeme_length=8).tokenize_all("*" * 8)
        assert tokens[0].text == "*" * 8
