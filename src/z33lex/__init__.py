"""Lexer and highlighter for the Z33 assembly language."""

from __future__ import annotations

from z33lex.lexer import Lexer, LexerState, split_lines, tokenize, tokenize_line
from z33lex.tokens import StateName, Token, TokenKind

__version__ = "0.1.0"

__all__ = [
    "Lexer",
    "LexerState",
    "StateName",
    "Token",
    "TokenKind",
    "split_lines",
    "tokenize",
    "tokenize_line",
    "__version__",
]
