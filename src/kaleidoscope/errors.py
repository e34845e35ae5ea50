"""
Kaleidoscope Error Base
=======================

This module defines the root of the exception hierarchy for the whole
Kaleidoscope package, plus the source location type shared by the lexer,
parser and error reporting.

Exception Hierarchy
-------------------
KaleidoscopeError (base)
└── FrontendError (see kaleidoscope.frontend.errors)
    ├── ParseError - syntax errors from the parser
    │   ├── UnexpectedTokenError - token does not fit the production
    │   └── IncompleteConstructError - a nested production failed
    ├── OperatorDefinitionError - invalid precedence table extension
    └── ParseFailedError - aggregate report of a strict session

Error messages follow this format:
    filename:line:column: error: description
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class KaleidoscopeError(Exception):
    """
    Base exception for all Kaleidoscope errors.

    Callers can catch everything raised by the package with a single
    except clause:

        try:
            result = parse_source("def foo(a b) a+b")
        except KaleidoscopeError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text, used for tokens, AST nodes and errors.

    Attributes:
        filename: Name of the source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
