"""
Kaleidoscope Parse Session
==========================

This module provides the main programmatic interface to the front end.
It wires the pipeline together for one input:

    Source → Lexer → Parser → Driver → ParseResult

Usage
-----
Command line:
    $ kscope program.ks --ast

Programmatic:
    >>> from kaleidoscope.frontend import parse_source
    >>> result = parse_source("def double(x) x*2; double(4);")
    >>> [item.kind.name for item in result.items]
    ['DEFINITION', 'EXPRESSION']

Error Handling
--------------
Syntax errors are recovered by the driver and collected on the result.
With ``FrontendOptions(strict=True)`` a ParseFailedError carrying the
full error report is raised instead.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TextIO, Union
import logging

from kaleidoscope.frontend.ast import Function, Prototype, TopLevel, TopLevelKind
from kaleidoscope.frontend.driver import Driver, TopLevelConsumer
from kaleidoscope.frontend.errors import ErrorCollector, FrontendError, ParseError
from kaleidoscope.frontend.lexer import Lexer
from kaleidoscope.frontend.parser import Parser
from kaleidoscope.frontend.precedence import PrecedenceTable

logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front end configuration options.

    Attributes:
        operators: Extra binary operators (character -> precedence),
                   installed on top of the default table
        strict: Raise ParseFailedError if any construct failed to parse
        max_errors: Stop the session after this many syntax errors
    """
    operators: dict[str, int] = field(default_factory=dict)
    strict: bool = False
    max_errors: int = 100

    def precedence_table(self) -> PrecedenceTable:
        """Build the precedence table these options describe."""
        table = PrecedenceTable.default()
        for op, precedence in self.operators.items():
            table.install(op, precedence)
        return table


@dataclass
class ParseResult:
    """
    Result of parsing one input.

    Attributes:
        filename: Name of the parsed source
        items: Successfully parsed constructs in source order
        errors: Syntax errors the driver recovered from
    """
    filename: str = "<input>"
    items: list[TopLevel] = field(default_factory=list)
    errors: list[FrontendError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def _of_kind(self, kind: TopLevelKind) -> list:
        return [item.node for item in self.items if item.kind == kind]

    @property
    def definitions(self) -> list[Function]:
        return self._of_kind(TopLevelKind.DEFINITION)

    @property
    def externs(self) -> list[Prototype]:
        return self._of_kind(TopLevelKind.EXTERN)

    @property
    def expressions(self) -> list[Function]:
        return self._of_kind(TopLevelKind.EXPRESSION)


class ParseSession:
    """
    Parses Kaleidoscope sources with a fixed configuration.

    Every call builds a fresh Lexer/Parser/Driver, so a session can be
    reused for any number of inputs and results never depend on earlier
    parses.

    Example:
        session = ParseSession(FrontendOptions(operators={"/": 40}))
        result = session.parse_file("program.ks")
        for fn in result.definitions:
            print(fn.prototype.name)

    Attributes:
        options: Front end configuration
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        """
        Initialize the session.

        Args:
            options: Configuration (uses defaults if None)

        Raises:
            OperatorDefinitionError: If an extra operator is invalid
        """
        self.options = options or FrontendOptions()
        self._precedence = self.options.precedence_table()

    def parse_stream(
        self,
        stream: Union[str, TextIO],
        filename: str = "<input>",
        consumer: Optional[TopLevelConsumer] = None,
        prompt: Optional[Callable[[], None]] = None,
        on_item: Optional[Callable[[TopLevel], None]] = None,
        on_error: Optional[Callable[[ParseError], None]] = None,
    ) -> ParseResult:
        """
        Parse every top-level construct from a string or text stream.

        Args:
            stream: Source text or text stream
            filename: Source name for error messages
            consumer: Downstream consumer for each construct
            prompt: Called before waiting for each construct
            on_item: Called with each construct as soon as it is parsed
            on_error: Called with each syntax error as soon as it is caught

        Returns:
            ParseResult with constructs and recovered errors

        Raises:
            ParseFailedError: In strict mode, if any construct failed
        """
        logger.debug(f"parsing {filename}")

        errors = ErrorCollector(max_errors=self.options.max_errors)
        parser = Parser(Lexer(stream, filename), self._precedence)
        driver = Driver(parser, consumer, errors, prompt, on_error)

        result = ParseResult(filename=filename)
        for item in driver:
            result.items.append(item)
            if on_item is not None:
                on_item(item)
        result.errors = list(errors.errors)

        logger.debug(
            f"{filename}: {len(result.items)} constructs, {len(result.errors)} errors"
        )

        if self.options.strict:
            errors.raise_if_errors()

        return result

    def parse_source(self, source: str, filename: str = "<input>") -> ParseResult:
        """Parse a source string."""
        return self.parse_stream(source, filename)

    def parse_file(
        self,
        filepath: Union[str, Path],
        consumer: Optional[TopLevelConsumer] = None,
        on_item: Optional[Callable[[TopLevel], None]] = None,
        on_error: Optional[Callable[[ParseError], None]] = None,
    ) -> ParseResult:
        """
        Parse a source file.

        The callbacks are those of parse_stream().

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        with path.open(encoding="ascii", errors="replace") as stream:
            return self.parse_stream(
                stream, str(path), consumer, on_item=on_item, on_error=on_error
            )


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    filename: str = "<input>",
    options: Optional[FrontendOptions] = None,
) -> ParseResult:
    """
    Parse Kaleidoscope source text.

    This is a convenience function that creates a session and parses the
    source in one call.

    Args:
        source: The source text
        filename: Source name for error messages
        options: Front end options (defaults if None)

    Returns:
        The ParseResult
    """
    return ParseSession(options).parse_source(source, filename)
