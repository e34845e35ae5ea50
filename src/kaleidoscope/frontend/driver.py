"""
Top-Level Driver
================

The driver is the loop that sits between the parser and whatever
consumes the AST (a code generator, an evaluator, a printer). It primes
the parser's lookahead, dispatches one top-level construct at a time and
hands each result to a consumer.

Dispatch
--------
| Current token | Action                                  |
|---------------|-----------------------------------------|
| EOF           | stop                                    |
| ';'           | skip it (empty statement)               |
| def           | parse a function definition             |
| extern        | parse an extern declaration             |
| anything else | parse a bare expression                 |

Error Recovery
--------------
The driver is the only place syntax errors are caught. A failed
construct is discarded, the error is logged and collected, exactly one
token is skipped, and dispatch resumes. A single malformed construct
never ends the session.

Example
-------
>>> from kaleidoscope.frontend.driver import Driver, RecordingConsumer
>>> from kaleidoscope.frontend.parser import Parser
>>> consumer = RecordingConsumer()
>>> driver = Driver(Parser.from_source("def (  1+1;"), consumer)
>>> [item.describe() for item in driver.run()]
['Parsed a top-level expr']
>>> driver.errors.error_count()
1
"""

from typing import Callable, Iterator, Optional, Protocol
import logging

from kaleidoscope.frontend.ast import Function, Prototype, TopLevel, TopLevelKind
from kaleidoscope.frontend.errors import ErrorCollector, ParseError
from kaleidoscope.frontend.lexer import TokenKind
from kaleidoscope.frontend.parser import Parser

logger = logging.getLogger(__name__)


# =============================================================================
# Consumer Interface
# =============================================================================

class TopLevelConsumer(Protocol):
    """
    Protocol for downstream consumers of parsed top-level constructs.

    The driver calls exactly one of these methods per successful
    construct.
    """

    def handle_definition(self, function: Function) -> None:
        """Receive a 'def' function definition."""
        ...

    def handle_extern(self, prototype: Prototype) -> None:
        """Receive an 'extern' declaration."""
        ...

    def handle_top_level_expr(self, function: Function) -> None:
        """Receive a bare expression wrapped in an anonymous function."""
        ...


class RecordingConsumer:
    """
    Consumer that keeps every construct it receives, in order.

    Attributes:
        items: Received constructs as TopLevel results
    """

    def __init__(self) -> None:
        self.items: list[TopLevel] = []

    def handle_definition(self, function: Function) -> None:
        self.items.append(TopLevel(TopLevelKind.DEFINITION, function))

    def handle_extern(self, prototype: Prototype) -> None:
        self.items.append(TopLevel(TopLevelKind.EXTERN, prototype))

    def handle_top_level_expr(self, function: Function) -> None:
        self.items.append(TopLevel(TopLevelKind.EXPRESSION, function))


# =============================================================================
# Driver
# =============================================================================

class Driver:
    """
    Runs a parser over its whole input, one top-level construct at a time.

    A Driver is single-use: it primes the parser when iteration starts
    and runs until EOF (or until ``errors`` is full).

    Usage:
        driver = Driver(parser, consumer)
        for item in driver:
            print(item.describe())

    Attributes:
        parser: The parser being driven
        consumer: Receives each successful construct (optional)
        errors: Collects the syntax errors recovered from
    """

    def __init__(
        self,
        parser: Parser,
        consumer: Optional[TopLevelConsumer] = None,
        errors: Optional[ErrorCollector] = None,
        prompt: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[ParseError], None]] = None,
    ):
        """
        Initialize the driver.

        Args:
            parser: Parser to drive (not yet primed)
            consumer: Downstream consumer of successful constructs
            errors: Error collector (a new one if None)
            prompt: Called whenever the driver is about to wait for the
                    next construct, e.g. to print 'ready> '
            on_error: Called with each syntax error as soon as it is caught
        """
        self.parser = parser
        self.consumer = consumer
        self.errors = errors if errors is not None else ErrorCollector()
        self.prompt = prompt
        self.on_error = on_error

    def __iter__(self) -> Iterator[TopLevel]:
        self._prompt()
        self.parser.advance()  # prime the lookahead

        while self.parser.current.kind != TokenKind.EOF:
            if self.parser.current.is_symbol(";"):
                self.parser.advance()  # empty statement
                self._prompt()
                continue

            try:
                item = self.parser.parse_top_level()
            except ParseError as e:
                self._recover(e)
                if self.errors.should_stop():
                    logger.warning(f"stopping after {self.errors.error_count()} errors")
                    return
                self._prompt()
                continue

            self._dispatch(item)
            yield item
            self._prompt()

    def run(self) -> list[TopLevel]:
        """Drive the parser to the end of input and return every construct."""
        return list(self)

    def _prompt(self) -> None:
        if self.prompt is not None:
            self.prompt()

    def _recover(self, error: ParseError) -> None:
        """Record ``error`` and skip the token the failure stopped at."""
        logger.info(f"syntax error: {error.message}")
        self.errors.add(error)
        if self.on_error is not None:
            self.on_error(error)

        skipped = self.parser.current
        self.parser.advance()
        logger.debug(f"skipped {skipped.describe()} at {skipped.location}")

    def _dispatch(self, item: TopLevel) -> None:
        if self.consumer is None:
            return

        if item.kind == TopLevelKind.DEFINITION:
            self.consumer.handle_definition(item.node)
        elif item.kind == TopLevelKind.EXTERN:
            self.consumer.handle_extern(item.node)
        else:
            self.consumer.handle_top_level_expr(item.node)
