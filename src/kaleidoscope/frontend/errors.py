"""
Front End Error Hierarchy
=========================

This module defines the exceptions raised by the Kaleidoscope lexer,
parser and driver. All of them inherit from FrontendError, which itself
inherits from KaleidoscopeError.

Exception Hierarchy
-------------------
FrontendError (base for all front end errors)
├── ParseError - syntax errors detected while parsing
│   ├── UnexpectedTokenError - the current token does not match what a
│   │                          production requires
│   └── IncompleteConstructError - a nested production failed; carries the
│                                  root cause unchanged
├── OperatorDefinitionError - invalid binary operator registration
└── ParseFailedError - aggregate report raised by strict sessions

Error Message Format
--------------------
    calc.ks:3:9: error: Expected ')' in prototype
    hint: found identifier 'x'

The message text itself ("Expected ')' in prototype") is kept verbatim
from the classic Kaleidoscope front end so tools matching on it keep working.
"""

from typing import Optional, List

from kaleidoscope.errors import KaleidoscopeError, SourceLocation


# =============================================================================
# Base Front End Exception
# =============================================================================

class FrontendError(KaleidoscopeError):
    """
    Base exception for all front end errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: Extra context, such as the token actually found
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and hint.

            calc.ks:1:5: error: Expected '(' in prototype
            hint: found number 4
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Syntax Errors
# =============================================================================

class ParseError(FrontendError):
    """
    Syntax error detected while parsing.

    Every failure of a parse function is a ParseError. The driver is the
    only place that catches it; it discards the construct being parsed and
    skips one token.
    """
    pass


class UnexpectedTokenError(ParseError):
    """
    The current token does not match what a production requires.

    Covers all of the "Expected X" messages and the "unknown token when
    expecting an expression" message.

    Attributes:
        found: Short description of the offending token
    """

    def __init__(
        self,
        message: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
    ):
        self.found = found
        hint = f"found {found}" if found else None
        super().__init__(message, location=location, hint=hint)


class IncompleteConstructError(ParseError):
    """
    A nested production failed inside a larger construct.

    The root cause is propagated without additional context: message,
    location and hint are the cause's. The enclosing construct is kept on
    the exception for callers that want it.

    Example:
        def foo(a) (a+
        -> IncompleteConstructError(construct="function body",
                                    cause=UnexpectedTokenError(...))
    """

    def __init__(self, construct: str, cause: ParseError):
        self.construct = construct
        self.cause = cause
        super().__init__(cause.message, location=cause.location, hint=cause.hint)


# =============================================================================
# Configuration Errors
# =============================================================================

class OperatorDefinitionError(FrontendError):
    """
    Invalid binary operator registration.

    Raised when installing an operator whose character cannot be a binary
    operator (letters, digits, parentheses, comma, ...) or whose precedence
    is not a positive integer.
    """

    def __init__(self, operator: str, reason: str):
        self.operator = operator
        super().__init__(f"cannot define operator {operator!r}: {reason}")


class ParseFailedError(FrontendError):
    """
    Aggregate error raised by a strict session.

    The message is a pre-formatted report from ErrorCollector and is passed
    through without another prefix.

    Attributes:
        errors: The individual errors the report was built from
    """

    def __init__(self, message: str, errors: Optional[List[FrontendError]] = None):
        self.errors = list(errors or [])
        super().__init__(message)

    def _format_message(self) -> str:
        return self.message

    @property
    def summary(self) -> str:
        """One-line count, e.g. "2 errors"."""
        count = len(self.errors)
        return f"{count} {'error' if count == 1 else 'errors'}"


# =============================================================================
# Error Collection
# =============================================================================

class ErrorCollector:
    """
    Collects syntax errors recovered by the driver.

    Example:
        collector = ErrorCollector(max_errors=10)
        collector.add(error)
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before should_stop() is True
        """
        self.errors: List[FrontendError] = []
        self.max_errors = max_errors

    def add(self, error: FrontendError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()

    def raise_if_errors(self) -> None:
        """Raise a ParseFailedError if any errors were collected."""
        if self.has_errors():
            raise ParseFailedError(self.report(), self.errors)
