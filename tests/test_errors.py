"""Test diagnostic messages, severities, position accuracy, and context snippets."""

from z33lex.errors import ConfigError, LexDiagnostic, Severity, collect_diagnostics
from z33lex.lexer import split_lines, tokenize


def _diagnostics(source: str) -> list[LexDiagnostic]:
    return collect_diagnostics(split_lines(source), tokenize(source))


class TestMessages:
    def test_near_miss_register(self):
        (diag,) = _diagnostics("ld %ab, 1")
        assert diag.severity == Severity.ERROR
        assert "'%ab'" in diag.message
        assert "%sp" in diag.message

    def test_missing_comma_is_warning(self):
        (diag,) = _diagnostics("ld %a %b")
        assert diag.severity == Severity.WARNING
        assert "missing comma" in diag.message

    def test_index_character(self):
        (diag,) = _diagnostics("ld [%a@4], %b")
        assert diag.severity == Severity.ERROR
        assert "'@'" in diag.message


class TestPositions:
    def test_column_is_one_based(self):
        (diag,) = _diagnostics("ld %ab, 1")
        assert diag.line == 1
        assert diag.column == 4

    def test_second_line(self):
        (diag,) = _diagnostics("nop\n  push %x")
        assert diag.line == 2
        assert diag.column == 8

    def test_source_order(self):
        diags = _diagnostics("ld %x, %pz\nld %a %b")
        assert [d.token.text for d in diags] == ["%x", "%pz", "%a %b"]


class TestFormatting:
    def test_format_contains_line(self):
        (diag,) = _diagnostics("ld %ab, 1 // load")
        assert "ld %ab, 1 // load" in diag.format()

    def test_format_underlines_token(self):
        (diag,) = _diagnostics("ld %ab, 1")
        last = diag.format().splitlines()[-1]
        assert last.endswith("   ^^^")

    def test_format_prefix_follows_severity(self):
        (error,) = _diagnostics("ld %ab, 1")
        (warning,) = _diagnostics("ld %a %b")
        assert error.format().startswith("error:")
        assert warning.format().startswith("warning:")

    def test_format_contains_position(self):
        (diag,) = _diagnostics("nop\nld %x, 1")
        assert "2:4" in diag.format()

    def test_format_with_custom_filename(self):
        (diag,) = _diagnostics("ld %x, 1")
        assert "--> fact.S:1:4" in diag.format("fact.S")


class TestConfigError:
    def test_message_with_path(self):
        err = ConfigError("bad value", "z33lex.toml")
        assert str(err) == "z33lex.toml: bad value"
        assert err.message == "bad value"

    def test_message_without_path(self):
        assert str(ConfigError("bad value")) == "bad value"
