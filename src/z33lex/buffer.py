"""Incremental re-tokenization of a whole buffer.

Each line is lexed with the state left by the line above it. After an edit
only the replaced lines are lexed again, plus whatever follows them until a
line is reached whose start state is the same as the one its cached tokens
were produced with. From there on the cached tokens are still exact, since
lexing a line is deterministic in (text, start state).

Thread Safety:
    A TokenizedBuffer belongs to one document; it is not shared.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from z33lex.errors import LexDiagnostic, collect_diagnostics
from z33lex.lexer import Lexer, LexerState, split_lines, strip_line_break
from z33lex.tokens import Token

logger = logging.getLogger(__name__)


class TokenizedBuffer:
    """Lines of a document with their tokens and per-line lexer states."""

    def __init__(self, text: str = "") -> None:
        self._lines: list[str] = []
        self._starts: list[LexerState | None] = []
        self._ends: list[LexerState | None] = []
        self._tokens: list[list[Token]] = []
        self.set_text(text)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def tokens(self) -> list[list[Token]]:
        return [list(line_tokens) for line_tokens in self._tokens]

    @property
    def end_state(self) -> LexerState:
        """State after the last line (ROOT for an empty buffer)."""
        if not self._ends:
            return LexerState()
        return self._state(self._ends[-1])

    def start_state(self, line: int) -> LexerState:
        """State the given 0-based line was lexed with."""
        return self._state(self._starts[line])

    def set_text(self, text: str) -> int:
        """Replace the whole buffer and tokenize it from scratch."""
        lines = split_lines(text)
        self._lines = []
        self._starts = []
        self._ends = []
        self._tokens = []
        return self.replace_lines(0, 0, lines)

    def update_text(self, text: str) -> int:
        """Replace the buffer contents, re-lexing only the lines that differ.

        Hosts with full-document sync call this after every change; the
        edited region is recovered from the common prefix and suffix.
        """
        new_lines = split_lines(text)
        old_lines = self._lines

        prefix = 0
        limit = min(len(old_lines), len(new_lines))
        while prefix < limit and old_lines[prefix] == new_lines[prefix]:
            prefix += 1

        suffix = 0
        limit -= prefix
        while (
            suffix < limit
            and old_lines[len(old_lines) - 1 - suffix] == new_lines[len(new_lines) - 1 - suffix]
        ):
            suffix += 1

        return self.replace_lines(
            prefix, len(old_lines) - suffix, new_lines[prefix : len(new_lines) - suffix]
        )

    def replace_lines(self, start: int, end: int, new_lines: Sequence[str]) -> int:
        """Replace lines ``[start, end)`` and re-lex what the edit affects.

        Returns the number of lines that were lexed again.
        """
        if not 0 <= start <= end <= len(self._lines):
            raise IndexError(f"invalid line range [{start}, {end}) for {len(self._lines)} lines")

        count = len(new_lines)
        self._lines[start:end] = [strip_line_break(line) for line in new_lines]
        self._starts[start:end] = [None] * count
        self._ends[start:end] = [None] * count
        self._tokens[start:end] = [[] for _ in range(count)]

        relexed = self._relex(start, start + count)
        logger.debug(
            "replaced lines [%d, %d) with %d line(s), re-lexed %d",
            start,
            end,
            count,
            relexed,
        )
        return relexed

    def diagnostics(self) -> list[LexDiagnostic]:
        return collect_diagnostics(self._lines, self._tokens)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _relex(self, start: int, dirty_end: int) -> int:
        state = self._state(self._ends[start - 1]) if start else LexerState()
        relexed = 0
        for idx in range(start, len(self._lines)):
            if idx >= dirty_end and self._starts[idx] == state:
                break
            lexer = Lexer(state)
            self._tokens[idx] = lexer.feed(self._lines[idx])
            self._starts[idx] = state
            state = lexer.state
            self._ends[idx] = state
            relexed += 1
        return relexed

    @staticmethod
    def _state(state: LexerState | None) -> LexerState:
        if state is None:
            raise RuntimeError("line has not been tokenized")
        return state.copy()
