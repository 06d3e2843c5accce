"""Tests for token styles, theme overrides, completions, and ANSI rendering."""

from __future__ import annotations

import pytest

from z33lex.errors import ConfigError
from z33lex.lexer import tokenize_line
from z33lex.rules import MNEMONICS
from z33lex.theme import (
    DEFAULT_THEME,
    Style,
    ansi_prefix,
    build_theme,
    completions,
    render_ansi,
    style_for,
)
from z33lex.tokens import TokenKind


class TestStyles:
    def test_every_kind_has_a_style(self) -> None:
        assert set(DEFAULT_THEME) == set(TokenKind)

    def test_register_style(self) -> None:
        style = style_for(TokenKind.REGISTER)
        assert style.foreground == "7693d9"
        assert style.bold

    def test_errors_are_distinguished(self) -> None:
        for kind in (TokenKind.ERROR, TokenKind.ERROR_MISSING_COMMA):
            assert style_for(kind).underline

    def test_filler_is_plain(self) -> None:
        assert style_for(TokenKind.WHITESPACE) == Style()
        assert style_for(TokenKind.TEXT) == Style()

    def test_custom_theme_falls_back(self) -> None:
        theme = {TokenKind.LABEL: Style("000000")}
        assert style_for(TokenKind.LABEL, theme).foreground == "000000"
        assert style_for(TokenKind.NUMBER, theme) == DEFAULT_THEME[TokenKind.NUMBER]


class TestBuildTheme:
    def test_override_keeps_attributes(self) -> None:
        theme = build_theme({"register": "#00FF00"})
        assert theme[TokenKind.REGISTER] == Style("00ff00", bold=True)
        assert theme[TokenKind.LABEL] == DEFAULT_THEME[TokenKind.LABEL]

    def test_kind_names_are_case_insensitive(self) -> None:
        theme = build_theme({"ERROR_MISSING_COMMA": "ff8800"})
        assert theme[TokenKind.ERROR_MISSING_COMMA].foreground == "ff8800"

    def test_unknown_kind(self) -> None:
        with pytest.raises(ConfigError, match="unknown token kind"):
            build_theme({"keyword": "ffffff"})

    @pytest.mark.parametrize("value", ["red", "fff", "1234567", 255])
    def test_invalid_color(self, value: object) -> None:
        with pytest.raises(ConfigError, match="invalid color"):
            build_theme({"number": value})

    def test_default_theme_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_THEME[TokenKind.NUMBER] = Style()  # type: ignore[index]


class TestCompletions:
    def test_full_mnemonic_list(self) -> None:
        labels = [c.label for c in completions()]
        assert labels == [name for name, _ in MNEMONICS]
        assert len(labels) == len(set(labels))
        assert {"ld", "st", "jmp", "reset", "trap"} <= set(labels)

    def test_every_completion_has_detail(self) -> None:
        assert all(c.detail for c in completions())


class TestAnsi:
    def test_plain_style_has_no_prefix(self) -> None:
        assert ansi_prefix(Style()) == ""

    def test_prefix_codes(self) -> None:
        assert ansi_prefix(Style("7693d9", bold=True)) == "\x1b[1;38;2;118;147;217m"
        assert ansi_prefix(Style(underline=True)) == "\x1b[4m"

    def test_render_line(self) -> None:
        tokens, _ = tokenize_line("ld %a, 1")
        out = render_ansi(tokens)
        assert "\x1b[1;38;2;118;147;217m%a\x1b[0m" in out
        assert out.startswith("\x1b[1;38;2;255;255;255mld\x1b[0m")

    def test_render_preserves_text(self) -> None:
        line = "loop: add %a, 1 // increment"
        tokens, _ = tokenize_line(line)
        out = render_ansi(tokens, {kind: Style() for kind in TokenKind})
        assert out == line
