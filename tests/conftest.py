"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from z33lex.lexer import LexerState, tokenize_line
from z33lex.tokens import Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that tokenizes one line and drops whitespace tokens."""

    def _lex(line: str, state: LexerState | None = None) -> list[Token]:
        tokens, _ = tokenize_line(line, state)
        return [t for t in tokens if t.kind != TokenKind.WHITESPACE]

    return _lex


@pytest.fixture
def lex_state():
    """Return a helper that tokenizes one line and returns only the final state."""

    def _lex_state(line: str, state: LexerState | None = None) -> LexerState:
        _, final = tokenize_line(line, state)
        return final

    return _lex_state


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def find_tokens(tokens: list[Token], kind: TokenKind) -> list[Token]:
    """Return all tokens of the given kind."""
    return [t for t in tokens if t.kind == kind]


def assert_partition(line: str, tokens: list[Token]) -> None:
    """Assert that the tokens cover ``line`` exactly, in order, without overlap."""
    assert tokens, "Expected at least one token"
    pos = 0
    for tok in tokens:
        assert tok.start == pos, f"Gap or overlap at column {pos}: {tok}"
        assert tok.end >= tok.start
        assert tok.text == line[tok.start : tok.end]
        pos = tok.end
    assert pos == len(line), f"Tokens stop at {pos}, line has {len(line)} characters"
