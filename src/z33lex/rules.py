"""Ordered rule table for the Z33 lexer.

Each state is a tuple of :class:`Rule` values tried in declaration order, the
first match winning. Shared rule groups (fragments) are plain tuples spliced
into the states that include them when the table is built, so the lexer
engine only ever sees flat, immutable rule lists.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from z33lex.tokens import StateName, TokenKind


@dataclass(frozen=True, slots=True)
class Push:
    """Enter ``state`` on top of the current one."""

    state: StateName


@dataclass(frozen=True, slots=True)
class Pop:
    """Return to the enclosing state."""


POP = Pop()

Transition = Push | Pop | None


@dataclass(frozen=True, slots=True)
class Rule:
    """One pattern of the table: what it matches, what it emits, where it goes."""

    pattern: re.Pattern[str]
    kind: TokenKind
    transition: Transition = None


def _rule(pattern: str, kind: TokenKind, transition: Transition = None) -> Rule:
    return Rule(re.compile(pattern), kind, transition)


# ---------------------------------------------------------------------------
# Mnemonics
# ---------------------------------------------------------------------------

MNEMONICS: tuple[tuple[str, str], ...] = (
    ("add", "Add a value to a register"),
    ("and", "Bitwise `and` with a given value"),
    ("call", "Push `%pc` and go to the given address"),
    ("cmp", "Compare a value with a register"),
    ("div", "Divide a register by a value"),
    ("fas", "Load a memory cell to a register and set this cell to 1"),
    ("in", "Read a value from an I/O controller"),
    ("jmp", "Unconditional jump"),
    ("jeq", "Jump if equal"),
    ("jne", "Jump if not equal"),
    ("jle", "Jump if less or equal"),
    ("jlt", "Jump if strictly less"),
    ("jge", "Jump if greater or equal"),
    ("jgt", "Jump if strictly greater"),
    ("ld", "Load a register with a value"),
    ("mul", "Multiply a value to a register"),
    ("neg", "Arithmetic negation of a register"),
    ("nop", "No-op"),
    ("not", "Bitwise negation of a register"),
    ("or", "Bitwise `or` with a given value"),
    ("out", "Write a value to an I/O controller"),
    ("pop", "Pop a value from the stack"),
    ("push", "Push a value into the stack"),
    ("reset", "Reset the computer"),
    ("rti", "Return from an interrupt or an exception"),
    ("rtn", "Return from a `call`"),
    ("shl", "Bitshift to the left"),
    ("shr", "Bitshift to the right"),
    ("st", "Store a register value in memory"),
    ("sub", "Substract a value from a register"),
    ("swap", "Swap a value and a register"),
    ("trap", "Start a `trap` exception"),
    ("xor", "Bitwise `xor` with a given value"),
)

MNEMONIC_NAMES = frozenset(name for name, _ in MNEMONICS)

# Longest first so no mnemonic shadows a longer one sharing its prefix
_MNEMONIC_ALT = "|".join(sorted(MNEMONIC_NAMES, key=lambda n: (-len(n), n)))


# ---------------------------------------------------------------------------
# Fragments
# ---------------------------------------------------------------------------

WHITESPACE: tuple[Rule, ...] = (_rule(r"[ \t]+", TokenKind.WHITESPACE),)

CONSTANTS: tuple[Rule, ...] = (_rule(r"\d+", TokenKind.NUMBER),)

COMMENTS: tuple[Rule, ...] = (_rule(r"//.*", TokenKind.COMMENT),)

# Exact names must come before the near-miss rules
REGISTERS: tuple[Rule, ...] = (
    _rule(r"%(?:sp|pc|a|b)(?!\w)", TokenKind.REGISTER),
    _rule(r"%(?:sp|pc|a|b)\w+", TokenKind.ERROR),  # %ab, %spx
    _rule(r"%s(?!p)\w*", TokenKind.ERROR),  # %s, %sx
    _rule(r"%p(?!c)\w*", TokenKind.ERROR),  # %p, %pz
    _rule(r"%(?![abps])\w*", TokenKind.ERROR),  # %, %x
)


# ---------------------------------------------------------------------------
# Missing-comma diagnostics
# ---------------------------------------------------------------------------

_OPERAND = r"%?\w+"
_BRACKETED = r"\[[^\]]*\]"
# Anything but a word character, comma or slash
_BAD_SEPARATOR = r"[^\w,/]+"

MISSING_COMMA: tuple[Rule, ...] = (
    _rule(_BRACKETED + _BAD_SEPARATOR + _OPERAND, TokenKind.ERROR_MISSING_COMMA, POP),
    _rule(_OPERAND + _BAD_SEPARATOR + _BRACKETED, TokenKind.ERROR_MISSING_COMMA, POP),
    _rule(_OPERAND + _BAD_SEPARATOR + _OPERAND, TokenKind.ERROR_MISSING_COMMA, POP),
)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------

ROOT: tuple[Rule, ...] = (
    *WHITESPACE,
    _rule(rf"(?<=\s)(?:{_MNEMONIC_ALT})\b", TokenKind.COMMAND, Push(StateName.COMMAND)),
    _rule(rf"^(?:{_MNEMONIC_ALT})\b", TokenKind.COMMAND, Push(StateName.COMMAND)),
    _rule(r"\w+:", TokenKind.LABEL),
    _rule(r"#\w+", TokenKind.MACRO),
    _rule(r"\.\w+", TokenKind.MACRO),
    *CONSTANTS,
    *COMMENTS,
)

COMMAND: tuple[Rule, ...] = (
    *WHITESPACE,
    _rule(r"$", TokenKind.END_OF_LINE, POP),
    *MISSING_COMMA,
    _rule(r"\[", TokenKind.OPERATOR, Push(StateName.IDX)),
    _rule(r",", TokenKind.OPERATOR),
    *CONSTANTS,
    *COMMENTS,
    *REGISTERS,
)

IDX: tuple[Rule, ...] = (
    *WHITESPACE,
    _rule(r"\]", TokenKind.OPERATOR, POP),
    _rule(r"[^A-Za-z0-9\-+% \t\]].*", TokenKind.ERROR, POP),
    *CONSTANTS,
    *REGISTERS,
)

RULE_TABLE: MappingProxyType[StateName, tuple[Rule, ...]] = MappingProxyType(
    {
        StateName.ROOT: ROOT,
        StateName.COMMAND: COMMAND,
        StateName.IDX: IDX,
    }
)
