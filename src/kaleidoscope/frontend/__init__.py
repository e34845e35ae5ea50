"""
Kaleidoscope Front End
======================

This package implements the front end of the Kaleidoscope toy language:
everything from raw characters to an abstract syntax tree.

- A pull-based lexer producing one token per call
- A recursive descent parser with operator-precedence climbing
- A top-level driver with one-token error recovery
- A session facade tying them together

Pipeline
--------
    Characters → Lexer → Parser → Driver → consumer (code generator, ...)

Usage
-----
>>> from kaleidoscope.frontend import parse_source
>>> result = parse_source("def foo(a b) a+b")
>>> fn = result.definitions[0]
>>> fn.prototype.params
('a', 'b')

Language
--------
- Definitions:   def name(param param ...) expression
- Declarations:  extern name(param ...)
- Expressions:   numbers, variables, calls, parentheses and the binary
                 operators < + - * (more can be installed)
- Comments:      '#' to end of line
- ';' separates top-level constructs
"""

from kaleidoscope.frontend.session import (
    ParseSession,
    ParseResult,
    FrontendOptions,
    parse_source,
)
from kaleidoscope.frontend.errors import (
    FrontendError,
    ParseError,
    UnexpectedTokenError,
    IncompleteConstructError,
    OperatorDefinitionError,
    ParseFailedError,
    ErrorCollector,
)
from kaleidoscope.frontend.lexer import Lexer, Token, TokenKind
from kaleidoscope.frontend.parser import Parser
from kaleidoscope.frontend.precedence import PrecedenceTable
from kaleidoscope.frontend.driver import Driver, TopLevelConsumer, RecordingConsumer
from kaleidoscope.frontend.ast import (
    ExprAST,
    NumberExpr,
    VariableExpr,
    BinaryExpr,
    CallExpr,
    Prototype,
    Function,
    TopLevel,
    TopLevelKind,
    ASTVisitor,
    ASTPrinter,
)

__all__ = [
    # Main API
    "ParseSession",
    "ParseResult",
    "FrontendOptions",
    "parse_source",
    # Errors
    "FrontendError",
    "ParseError",
    "UnexpectedTokenError",
    "IncompleteConstructError",
    "OperatorDefinitionError",
    "ParseFailedError",
    "ErrorCollector",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    # Parser
    "Parser",
    "PrecedenceTable",
    # Driver
    "Driver",
    "TopLevelConsumer",
    "RecordingConsumer",
    # AST Nodes
    "ExprAST",
    "NumberExpr",
    "VariableExpr",
    "BinaryExpr",
    "CallExpr",
    "Prototype",
    "Function",
    "TopLevel",
    "TopLevelKind",
    "ASTVisitor",
    "ASTPrinter",
]
