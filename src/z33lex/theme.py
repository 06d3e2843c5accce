"""Display styles for token kinds and the static completion list."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from z33lex.errors import ConfigError
from z33lex.rules import MNEMONICS
from z33lex.tokens import Token, TokenKind


@dataclass(frozen=True, slots=True)
class Style:
    """Foreground color as ``rrggbb`` hex (None keeps the host default)."""

    foreground: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True, slots=True)
class Completion:
    label: str
    detail: str


Theme = Mapping[TokenKind, Style]

_PLAIN = Style()

DEFAULT_THEME: Theme = MappingProxyType(
    {
        TokenKind.NUMBER: Style("d98fca", bold=True),
        TokenKind.COMMAND: Style("ffffff", bold=True),
        TokenKind.REGISTER: Style("7693d9", bold=True),
        TokenKind.LABEL: Style("ffc14f"),
        TokenKind.COMMENT: Style("737373", italic=True),
        TokenKind.MACRO: Style("826a51"),
        TokenKind.OPERATOR: Style("b9b900"),
        TokenKind.ERROR: Style("f44747", underline=True),
        TokenKind.ERROR_MISSING_COMMA: Style("f44747", underline=True),
        TokenKind.END_OF_LINE: _PLAIN,
        TokenKind.WHITESPACE: _PLAIN,
        TokenKind.TEXT: _PLAIN,
    }
)

_HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}")


def style_for(kind: TokenKind, theme: Theme | None = None) -> Style:
    """Return the display style of ``kind``, falling back to the default theme."""
    if theme is not None and kind in theme:
        return theme[kind]
    return DEFAULT_THEME.get(kind, _PLAIN)


def build_theme(overrides: Mapping[str, object]) -> Theme:
    """Apply ``{kind_name: "rrggbb"}`` color overrides to the default theme.

    Kind names are matched case-insensitively against TokenKind members.
    """
    theme = dict(DEFAULT_THEME)
    for name, value in overrides.items():
        try:
            kind = TokenKind[str(name).upper()]
        except KeyError:
            raise ConfigError(f"unknown token kind in [theme]: {name!r}") from None
        color = str(value).lstrip("#")
        if not _HEX_COLOR.fullmatch(color):
            raise ConfigError(f"invalid color for {name!r}: {value!r} (expected rrggbb)")
        theme[kind] = replace(theme[kind], foreground=color.lower())
    return MappingProxyType(theme)


def completions() -> list[Completion]:
    """The full mnemonic list, independent of where the cursor is."""
    return [Completion(name, detail) for name, detail in MNEMONICS]


# ---------------------------------------------------------------------------
# ANSI rendering
# ---------------------------------------------------------------------------

_RESET = "\x1b[0m"


def ansi_prefix(style: Style) -> str:
    """Return the SGR escape sequence that starts ``style`` (empty if plain)."""
    codes: list[str] = []
    if style.bold:
        codes.append("1")
    if style.italic:
        codes.append("3")
    if style.underline:
        codes.append("4")
    if style.foreground is not None:
        r, g, b = (int(style.foreground[i : i + 2], 16) for i in (0, 2, 4))
        codes.append(f"38;2;{r};{g};{b}")
    if not codes:
        return ""
    return f"\x1b[{';'.join(codes)}m"


def render_ansi(tokens: Iterable[Token], theme: Theme | None = None) -> str:
    """Render one line of tokens with terminal colors."""
    parts: list[str] = []
    for tok in tokens:
        if not tok.text:
            continue
        prefix = ansi_prefix(style_for(tok.kind, theme))
        if prefix:
            parts.append(f"{prefix}{tok.text}{_RESET}")
        else:
            parts.append(tok.text)
    return "".join(parts)
