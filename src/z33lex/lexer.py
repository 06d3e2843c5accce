"""Z33 lexer: a table-driven state machine over one source line at a time."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from z33lex.rules import RULE_TABLE, Pop, Push, Rule
from z33lex.tokens import StateName, Token, TokenKind

logger = logging.getLogger(__name__)

# Line terminators as editors and LSP clients count them
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_TRAILING_BREAK = re.compile(r"(?:\r\n|\r|\n)\Z")


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\r\\n``, ``\\r`` and ``\\n`` only.

    A final terminator does not start an extra empty line, and an empty text
    has no lines. Other characters ``str.splitlines`` breaks on (form feed,
    ``\\x85``, ``\\u2028`` and the like) stay inside their line.
    """
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def strip_line_break(line: str) -> str:
    """Remove exactly one trailing line terminator, if any."""
    m = _TRAILING_BREAK.search(line)
    return line[: m.start()] if m else line


class LexerState:
    """Stack of active state names. The bottom entry is always ROOT."""

    __slots__ = ("_stack",)

    def __init__(self, stack: Iterable[StateName] = ()) -> None:
        names = list(stack)
        if names and names[0] is StateName.ROOT:
            names = names[1:]
        self._stack: list[StateName] = [StateName.ROOT, *names]

    @property
    def top(self) -> StateName:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def stack(self) -> tuple[StateName, ...]:
        return tuple(self._stack)

    def push(self, name: StateName) -> None:
        self._stack.append(name)

    def pop(self) -> bool:
        """Leave the current state. Returns False when already at ROOT."""
        if len(self._stack) == 1:
            return False
        self._stack.pop()
        return True

    def copy(self) -> LexerState:
        return LexerState(self._stack)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LexerState):
            return NotImplemented
        return self._stack == other._stack

    def __hash__(self) -> int:
        return hash(self.stack)

    def __repr__(self) -> str:
        names = ", ".join(name.name for name in self._stack)
        return f"LexerState([{names}])"


class Lexer:
    """Tokenize Z33 source line by line, carrying state across lines."""

    def __init__(
        self,
        state: LexerState | None = None,
        table: Mapping[StateName, tuple[Rule, ...]] = RULE_TABLE,
    ) -> None:
        self._table = table
        self._state = state.copy() if state is not None else LexerState()
        self._line = ""
        self._pos = 0
        self._tokens: list[Token] = []

    @property
    def state(self) -> LexerState:
        return self._state.copy()

    def feed(self, line: str) -> list[Token]:
        """Tokenize one line and keep the resulting state for the next one.

        A single trailing terminator is not matched by any rule; it is
        covered by a final WHITESPACE token.
        """
        self._line = strip_line_break(line)
        self._pos = 0
        self._tokens = []

        end = len(self._line)
        while self._pos < end:
            self._step()
        self._finish_line()

        if not self._tokens:
            self._emit(TokenKind.END_OF_LINE, end)
        if end < len(line):
            self._tokens.append(Token(TokenKind.WHITESPACE, line[end:], end, len(line)))
        return self._tokens

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _step(self) -> None:
        for rule in self._table[self._state.top]:
            m = rule.pattern.match(self._line, self._pos)
            if m is None or m.end() == self._pos:
                continue
            self._emit(rule.kind, m.end())
            self._apply(rule)
            return

        # Nothing matched: consume one character so the loop always advances
        logger.debug(
            "no rule in %s matched %r at column %d",
            self._state.top.name,
            self._line[self._pos],
            self._pos,
        )
        self._emit(TokenKind.TEXT, self._pos + 1)

    def _finish_line(self) -> None:
        """Apply rules matching the empty string at end of line, e.g. ``$``."""
        end = len(self._line)
        for _ in range(self._state.depth):
            rule = self._match_empty(end)
            if rule is None:
                return
            self._emit(rule.kind, end)
            self._apply(rule)
            if not isinstance(rule.transition, Pop):
                return

    def _match_empty(self, pos: int) -> Rule | None:
        for rule in self._table[self._state.top]:
            m = rule.pattern.match(self._line, pos)
            if m is not None and m.end() == pos:
                return rule
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, kind: TokenKind, end: int) -> Token:
        tok = Token(kind, self._line[self._pos : end], self._pos, end)
        self._tokens.append(tok)
        self._pos = end
        return tok

    def _apply(self, rule: Rule) -> None:
        transition = rule.transition
        if isinstance(transition, Push):
            self._state.push(transition.state)
        elif isinstance(transition, Pop):
            if not self._state.pop():
                logger.debug("pop at ROOT ignored at column %d", self._pos)


def tokenize_line(line: str, state: LexerState | None = None) -> tuple[list[Token], LexerState]:
    """Tokenize one line starting from ``state`` (ROOT when omitted).

    The given state is left untouched; the state to carry into the next line
    is returned alongside the tokens.
    """
    lexer = Lexer(state)
    tokens = lexer.feed(line)
    return tokens, lexer.state


def tokenize(source: str) -> list[list[Token]]:
    """Convenience function: tokenize a whole buffer, one token list per line."""
    lexer = Lexer()
    return [lexer.feed(line) for line in split_lines(source)]
