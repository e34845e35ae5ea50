"""
Kaleidoscope - Front End for a Toy Expression Language
======================================================

This package provides the lexer, parser and AST for Kaleidoscope, a small
language of numeric expressions, function definitions and extern
declarations. Code generation and execution are left to downstream
consumers of the AST.

Main Components
---------------
- **frontend**: lexer, precedence table, parser, driver and session
- **cli**: the ``kscope`` command-line tool

Quick Start
-----------
Parse a program:
    >>> from kaleidoscope import parse_source
    >>> result = parse_source("extern sin(x); def f(x) sin(x)*2; f(1);")
    >>> [item.describe() for item in result.items]
    ['Parsed an extern', 'Parsed a function definition.', 'Parsed a top-level expr']

Drive a parser yourself:
    >>> from kaleidoscope import Parser, Driver, RecordingConsumer
    >>> consumer = RecordingConsumer()
    >>> Driver(Parser.from_source("1+2*3"), consumer).run()

Or use the command-line tool:
    $ kscope program.ks --ast
    $ kscope -i
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from kaleidoscope.errors import KaleidoscopeError, SourceLocation
from kaleidoscope.frontend import (
    ParseSession,
    ParseResult,
    FrontendOptions,
    parse_source,
    FrontendError,
    ParseError,
    UnexpectedTokenError,
    IncompleteConstructError,
    OperatorDefinitionError,
    ParseFailedError,
    Lexer,
    Token,
    TokenKind,
    Parser,
    PrecedenceTable,
    Driver,
    TopLevelConsumer,
    RecordingConsumer,
    NumberExpr,
    VariableExpr,
    BinaryExpr,
    CallExpr,
    Prototype,
    Function,
    TopLevel,
    TopLevelKind,
)

__all__ = [
    "__version__",
    "KaleidoscopeError",
    "SourceLocation",
    "ParseSession",
    "ParseResult",
    "FrontendOptions",
    "parse_source",
    "FrontendError",
    "ParseError",
    "UnexpectedTokenError",
    "IncompleteConstructError",
    "OperatorDefinitionError",
    "ParseFailedError",
    "Lexer",
    "Token",
    "TokenKind",
    "Parser",
    "PrecedenceTable",
    "Driver",
    "TopLevelConsumer",
    "RecordingConsumer",
    "NumberExpr",
    "VariableExpr",
    "BinaryExpr",
    "CallExpr",
    "Prototype",
    "Function",
    "TopLevel",
    "TopLevelKind",
]
