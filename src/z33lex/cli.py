"""Command-line interface for z33lex."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from z33lex.errors import ConfigError
from z33lex.lexer import split_lines
from z33lex.theme import DEFAULT_THEME, Theme, build_theme

logger = logging.getLogger(__name__)

CONFIG_NAME = "z33lex.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    check: bool
    list_tokens: bool
    color: bool
    theme: Theme
    debug: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="z33lex",
        description="Highlight and check Z33 assembly source",
    )
    p.add_argument("input", help="Input .S file")
    p.add_argument(
        "--check",
        action="store_true",
        help="Report lexical diagnostics and exit 1 if any are found",
    )
    p.add_argument(
        "--tokens",
        dest="list_tokens",
        action="store_true",
        help="Print the token stream instead of highlighted source",
    )
    p.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        default=None,
        help="Disable ANSI colors",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens and states to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        if config_path is not None:
            raise ConfigError("config file not found", str(path))
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", str(path)) from exc


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Theme overrides
    theme: Theme = DEFAULT_THEME
    cfg_theme = config.get("theme")
    if isinstance(cfg_theme, dict):
        theme = build_theme(cfg_theme)
    elif cfg_theme is not None:
        raise ConfigError("[theme] must be a table", str(config_path or input_dir / CONFIG_NAME))

    # Color: config < CLI
    color = True
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_color = cfg_output.get("color")
        if isinstance(cfg_color, bool):
            color = cfg_color
    if args.color is not None:
        color = args.color

    return CliOptions(
        input_file=input_file,
        check=args.check,
        list_tokens=args.list_tokens,
        color=color,
        theme=theme,
        debug=args.debug,
        verbose=args.verbose,
    )


def highlight_source(source: str, options: CliOptions) -> str:
    """Render source as colored text, or list its tokens with --tokens."""
    from z33lex.debug import format_token
    from z33lex.lexer import tokenize
    from z33lex.theme import render_ansi

    out: list[str] = []
    lines = split_lines(source)
    for line_no, (line, tokens) in enumerate(zip(lines, tokenize(source)), start=1):
        if options.list_tokens:
            out.extend(f"{line_no}:{format_token(tok)}" for tok in tokens)
        elif options.color:
            out.append(render_ansi(tokens, options.theme))
        else:
            out.append(line)
    return "\n".join(out) + ("\n" if out else "")


def check_source(source: str, options: CliOptions) -> int:
    """Print diagnostics to stderr and return how many were found."""
    from z33lex.buffer import TokenizedBuffer

    diagnostics = TokenizedBuffer(source).diagnostics()
    for diag in diagnostics:
        print(diag.format(str(options.input_file)), file=sys.stderr)
    if diagnostics:
        print(f"{len(diagnostics)} problem(s) found in {options.input_file}", file=sys.stderr)
    return len(diagnostics)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        source = options.input_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.input_file}: {exc}", file=sys.stderr)
        return 2

    logger.debug("read %d line(s) from %s", len(split_lines(source)), options.input_file)

    if options.debug:
        from z33lex.debug import dump_tokens

        dump_tokens(source, file=sys.stderr)

    if options.check:
        return 1 if check_source(source, options) else 0

    sys.stdout.write(highlight_source(source, options))
    return 0
