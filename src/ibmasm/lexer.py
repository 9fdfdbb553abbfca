"""
Statement Lexer
===============

Splits one source line into a flat list of string tokens.

Grammar (informal)
------------------
    [label] MNEMONIC operand[, operand] [# comment]

Rules:
- Everything from the first '#' to end of line is a comment.
- Tokens are separated by whitespace.
- A comma is always a token of its own, with or without surrounding spaces.

Example
-------
>>> from ibmasm.lexer import tokenize
>>> tokenize("LOOP  AR 1,2   # add")
['LOOP', 'AR', '1', ',', '2']
>>> tokenize("   # only a comment")
[]

Both the layout pass and the execution engine call tokenize() on demand;
nothing is cached, so the source statement stays the single authority for
decoding an instruction.

Copyright (c) 2026 ibmasm Contributors
"""

COMMENT_CHAR = "#"
SEPARATOR = ","


def strip_comment(line: str) -> str:
    """
    Remove the comment part of a line and surrounding whitespace.

    Args:
        line: Raw source line

    Returns:
        The code part of the line ('' for blank or comment-only lines)
    """
    code = line.strip()
    if code.startswith(COMMENT_CHAR):
        return ""
    return code.split(COMMENT_CHAR, 1)[0]


def tokenize(line: str) -> list[str]:
    """
    Split a raw source line into tokens.

    Args:
        line: Raw source line, comments included

    Returns:
        List of tokens; empty for blank or comment-only lines
    """
    code = strip_comment(line)
    return code.replace(SEPARATOR, f" {SEPARATOR} ").split()
