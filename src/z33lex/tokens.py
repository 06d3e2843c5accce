"""Token kinds, lexer state names, and the Token data structure."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    # Classified source
    COMMAND = auto()  # instruction mnemonic
    REGISTER = auto()  # %a %b %sp %pc
    LABEL = auto()  # word:
    MACRO = auto()  # #word or .word
    NUMBER = auto()  # decimal digits
    COMMENT = auto()  # // to end of line
    OPERATOR = auto()  # [ ] ,
    END_OF_LINE = auto()  # zero-width, closes an instruction

    # Diagnostics
    ERROR = auto()  # near-miss register, bad char inside [...]
    ERROR_MISSING_COMMA = auto()  # two operands without a separator

    # Filler
    WHITESPACE = auto()  # spaces/tabs
    TEXT = auto()  # single unclassified character


ERROR_KINDS = frozenset({TokenKind.ERROR, TokenKind.ERROR_MISSING_COMMA})


class StateName(Enum):
    ROOT = auto()
    COMMAND = auto()
    IDX = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A classified span of one source line, 0-based columns, end exclusive."""

    kind: TokenKind
    text: str
    start: int
    end: int

    @property
    def is_error(self) -> bool:
        return self.kind in ERROR_KINDS
