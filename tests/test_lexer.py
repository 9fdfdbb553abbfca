# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the statement tokenizer.
#
# Test coverage includes:
#   - Whitespace splitting
#   - Comma separators with and without surrounding spaces
#   - Comment stripping (full-line and trailing)
#   - Mnemonic and label splitting
# =============================================================================

import pytest

from ibmasm.lexer import strip_comment, tokenize
from ibmasm.opcodes import (
    InstructionKind,
    Mnemonic,
    instruction_size,
    is_mnemonic,
    parse_mnemonic,
    split_statement,
)


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestTokenize:
    """Test splitting lines into tokens."""

    def test_empty_line(self):
        """Empty lines produce no tokens."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Lines with only whitespace produce no tokens."""
        assert tokenize("   \t   ") == []

    def test_comma_is_own_token(self):
        """A comma followed by a space is a separate token."""
        assert tokenize("A 1, 2") == ["A", "1", ",", "2"]

    def test_comma_without_spaces(self):
        """A comma glued to its operands is still split out."""
        assert tokenize("AR 1,2") == ["AR", "1", ",", "2"]

    def test_label_and_tabs(self):
        """Tabs and repeated spaces separate tokens."""
        assert tokenize("LOOP\tAR  1 ,2") == ["LOOP", "AR", "1", ",", "2"]

    def test_operand_with_parentheses(self):
        """Indirect operands stay in one token."""
        assert tokenize("L 3, 0(2)") == ["L", "3", ",", "0(2)"]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test comment stripping."""

    def test_full_line_comment(self):
        """A line starting with # is empty."""
        assert tokenize("# just a comment") == []

    def test_indented_comment(self):
        """Leading whitespace before # still makes a comment line."""
        assert tokenize("    # indented") == []

    def test_trailing_comment(self):
        """Everything from # to end of line is dropped."""
        assert tokenize("AR 1, 2  # add r2 to r1") == ["AR", "1", ",", "2"]

    def test_comment_containing_commas(self):
        """Commas inside a comment do not produce tokens."""
        assert tokenize("J LOOP # a, b, c") == ["J", "LOOP"]

    def test_strip_comment(self):
        """strip_comment returns the code part without surrounding spaces."""
        assert strip_comment("  LR 1, 2 # copy") == "LR 1, 2 "
        assert strip_comment("#x") == ""


# =============================================================================
# Instruction Set Tests
# =============================================================================

class TestInstructionSet:
    """Test mnemonic lookup and statement splitting."""

    @pytest.mark.parametrize("name", [
        "A", "AR", "S", "SR", "M", "MR", "D", "DR", "C", "CR",
        "L", "LR", "ST", "LA", "J", "JP", "JZ", "JN", "DC", "DS",
    ])
    def test_all_mnemonics_recognized(self, name):
        """Every mnemonic of the instruction set is recognized."""
        assert is_mnemonic(name)
        assert parse_mnemonic(name).value == name

    def test_unknown_mnemonic(self):
        """Unknown and lowercase spellings are rejected."""
        assert parse_mnemonic("NOP") is None
        assert parse_mnemonic("ar") is None

    def test_instruction_kinds(self):
        """Kinds follow the operand shape."""
        assert Mnemonic.AR.kind is InstructionKind.REGISTER_REGISTER
        assert Mnemonic.LA.kind is InstructionKind.REGISTER_MEMORY
        assert Mnemonic.JN.kind is InstructionKind.JUMP
        assert Mnemonic.DS.kind is InstructionKind.DATA

    def test_instruction_sizes(self):
        """RR instructions take 2 bytes, other code 4."""
        assert instruction_size(Mnemonic.CR) == 2
        assert instruction_size(Mnemonic.C) == 4
        assert instruction_size(Mnemonic.J) == 4

    def test_split_with_label(self):
        """The first token is a label when the second is a mnemonic."""
        assert split_statement(["LOOP", "AR", "1", ",", "2"]) == ("LOOP", "AR", ["1", ",", "2"])

    def test_split_without_label(self):
        """Without a label the first token is the mnemonic."""
        assert split_statement(["J", "LOOP"]) == (None, "J", ["LOOP"])

    def test_split_unknown_mnemonic(self):
        """An unknown first token is still reported as the mnemonic."""
        assert split_statement(["FOO", "1"]) == (None, "FOO", ["1"])
