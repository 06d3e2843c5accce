"""Diagnostics built from error tokens, and configuration errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from z33lex.lexer import strip_line_break
from z33lex.tokens import Token, TokenKind

_VALID_REGISTERS = "%a, %b, %sp or %pc"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


class ConfigError(Exception):
    """Raised when a z33lex.toml file cannot be read or has bad values."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


@dataclass(frozen=True, slots=True)
class LexDiagnostic:
    """An error token located in its buffer. ``line`` is 1-based."""

    token: Token
    line: int
    source_line: str

    @property
    def column(self) -> int:
        """1-based column of the first character."""
        return self.token.start + 1

    @property
    def severity(self) -> Severity:
        if self.token.kind is TokenKind.ERROR_MISSING_COMMA:
            return Severity.WARNING
        return Severity.ERROR

    @property
    def message(self) -> str:
        text = self.token.text
        if self.token.kind is TokenKind.ERROR_MISSING_COMMA:
            return f"missing comma between operands in '{text}'"
        if text.startswith("%"):
            return f"invalid register '{text}' (expected {_VALID_REGISTERS})"
        return f"invalid character '{text[0]}' in index expression"

    def format(self, filename: str = "input.S") -> str:
        col = self.column
        underline_len = max(1, self.token.end - self.token.start)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"{self.severity.value}: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {self.source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


def collect_diagnostics(lines: list[str], tokens: list[list[Token]]) -> list[LexDiagnostic]:
    """Pair every error token with its line, in source order."""
    diagnostics: list[LexDiagnostic] = []
    for idx, (source_line, line_tokens) in enumerate(zip(lines, tokens)):
        for tok in line_tokens:
            if tok.is_error:
                diagnostics.append(LexDiagnostic(tok, idx + 1, strip_line_break(source_line)))
    return diagnostics
