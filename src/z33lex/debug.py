"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from z33lex.lexer import Lexer, split_lines
from z33lex.tokens import StateName, Token, TokenKind


def dump_tokens(source: str, *, file: TextIO = sys.stderr) -> None:
    """Print every line's start state and tokens to *file*."""
    lexer = Lexer()
    for line_no, line in enumerate(split_lines(source), start=1):
        state = lexer.state
        tokens = lexer.feed(line)
        file.write(f"{line_no:>4} {_states(state.stack)}\n")
        for tok in tokens:
            if tok.kind is TokenKind.WHITESPACE:
                continue
            file.write(f"       {format_token(tok)}\n")


def format_token(tok: Token) -> str:
    return f"{tok.start:>3}-{tok.end:<3} {tok.kind.name:<20} {tok.text!r}"


def _states(stack: tuple[StateName, ...]) -> str:
    return "[" + " > ".join(name.name for name in stack) + "]"
