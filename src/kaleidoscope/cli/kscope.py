"""
kscope - Kaleidoscope Front End Command-Line Interface
======================================================

This module implements the command-line driver for the Kaleidoscope
front end. It reads a program from a file or standard input, parses it
one top-level construct at a time and reports what was parsed.

Usage Examples
--------------
Parse a file:
    $ kscope program.ks

Dump the AST of every construct:
    $ kscope program.ks --ast

Interactive session (the default when stdin is a terminal):
    $ kscope -i
    ready> def foo(a b) a*a + 2*a*b + b*b;
    Parsed a function definition.
    ready>

Add a binary operator:
    $ kscope -O '/=40' program.ks

Dump tokens only:
    $ kscope --tokens program.ks
"""

import logging
from pathlib import Path
from typing import Optional

import click

from kaleidoscope import __version__
from kaleidoscope.cli.errors import handle_cli_exception
from kaleidoscope.frontend.ast import ASTPrinter, TopLevel
from kaleidoscope.frontend.errors import ParseError
from kaleidoscope.frontend.lexer import Lexer
from kaleidoscope.frontend.session import FrontendOptions, ParseSession

logger = logging.getLogger(__name__)

PROMPT = "ready> "


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def parse_operators(
    ctx: click.Context,
    param: click.Parameter,
    values: tuple[str, ...],
) -> dict[str, int]:
    """Convert repeated CHAR=PRECEDENCE options into a mapping."""
    operators = {}
    for value in values:
        op, sep, precedence = value.rpartition("=")
        if not sep or not op:
            raise click.BadParameter(f"expected CHAR=PRECEDENCE, got {value!r}")
        try:
            operators[op] = int(precedence)
        except ValueError:
            raise click.BadParameter(f"precedence must be an integer in {value!r}")
    return operators


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST of each parsed construct",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "-i", "--interactive",
    is_flag=True,
    help="Prompt with 'ready> ' (automatic when stdin is a terminal)",
)
@click.option(
    "-O", "--operator",
    "operators",
    multiple=True,
    callback=parse_operators,
    metavar="CHAR=PREC",
    help="Install a binary operator with the given precedence (can be repeated)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any construct failed to parse",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose (debug) logging",
)
@click.version_option(version=__version__, prog_name="kscope")
def main(
    input_file: Optional[Path],
    ast: bool,
    tokens: bool,
    interactive: bool,
    operators: dict[str, int],
    strict: bool,
    verbose: bool,
) -> None:
    """
    Parse Kaleidoscope source and report each top-level construct.

    INPUT_FILE is the source to parse; standard input is read if omitted.

    \b
    Examples:
        kscope program.ks            # One status line per construct
        kscope program.ks --ast      # AST dump per construct
        kscope --tokens program.ks   # Token stream
        kscope -O '/=40' prog.ks     # Add a division operator

    Syntax errors are reported on stderr; the offending token is skipped
    and parsing continues with the next construct.
    """
    setup_logging(verbose)

    try:
        session = ParseSession(FrontendOptions(operators=operators, strict=strict))

        if input_file is None:
            stream = click.get_text_stream("stdin")
            filename = "<stdin>"
            interactive = interactive or stream.isatty()
        else:
            stream = input_file.open(encoding="ascii", errors="replace")
            filename = str(input_file)

        try:
            if tokens:
                for token in Lexer(stream, filename).tokenize():
                    click.echo(repr(token))
                return

            result = session.parse_stream(
                stream,
                filename,
                prompt=_prompt if interactive else None,
                on_item=_make_reporter(ast),
                on_error=_report_error,
            )
        finally:
            if input_file is not None:
                stream.close()
            if interactive:
                click.echo(err=True)

        logger.debug(f"{len(result.items)} constructs, {len(result.errors)} errors")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


def _prompt() -> None:
    click.echo(PROMPT, nl=False, err=True)


def _make_reporter(ast: bool):
    printer = ASTPrinter()

    def report(item: TopLevel) -> None:
        if ast:
            click.echo(printer.print(item))
        else:
            click.echo(item.describe())

    return report


def _report_error(error: ParseError) -> None:
    click.echo(str(error), err=True)


if __name__ == "__main__":
    main()
