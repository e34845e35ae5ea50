"""
Kaleidoscope Recursive Descent Parser
=====================================

This module implements the recursive descent parser for Kaleidoscope.
Tokens are pulled from a Lexer one at a time and a single lookahead
token (``current``) drives every decision. Binary expressions are
parsed by operator-precedence climbing against a PrecedenceTable.

Grammar (Simplified EBNF)
-------------------------
toplevel        ::= definition | external | expression
definition      ::= 'def' prototype expression
external        ::= 'extern' prototype
prototype       ::= IDENTIFIER '(' IDENTIFIER* ')'

expression      ::= primary binoprhs
binoprhs        ::= (BINOP primary)*
primary         ::= identifierexpr | numberexpr | parenexpr
identifierexpr  ::= IDENTIFIER
                  | IDENTIFIER '(' (expression (',' expression)*)? ')'
numberexpr      ::= NUMBER
parenexpr       ::= '(' expression ')'

All binary operators are left-associative. Parentheses only reshape the
tree; they never produce a node of their own.

Error Handling
--------------
Parse functions either return a complete node or raise a ParseError.
UnexpectedTokenError is raised where the current token breaks a
production; when a nested production fails, the enclosing construct
re-raises it as IncompleteConstructError chained to the cause. After a
failure the lookahead token is left wherever the failure happened.

Nesting is limited to MAX_NESTING_DEPTH productions so that deeply
parenthesized input fails as a ParseError instead of exhausting the
interpreter stack.

Example Usage
-------------
>>> from kaleidoscope.frontend.parser import Parser
>>> parser = Parser.from_source("1+2*3")
>>> parser.advance()
Token(NUMBER, 1.0, 1:1)
>>> parser.parse_expression()
BinaryExpr(op='+', lhs=NumberExpr(value=1.0), rhs=BinaryExpr(...))
"""

from typing import Callable, Optional, TypeVar
import logging

from kaleidoscope.frontend.lexer import Lexer, Token, TokenKind
from kaleidoscope.frontend.precedence import PrecedenceTable, token_precedence
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
)
from kaleidoscope.frontend.errors import (
    UnexpectedTokenError,
    IncompleteConstructError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Deepest chain of nested productions (parentheses, arguments, operands)
# a single construct may contain
MAX_NESTING_DEPTH = 100


class Parser:
    """
    Recursive descent parser for Kaleidoscope.

    The parser owns its lexer, its lookahead token and a read-only
    snapshot of the operator precedence table. It is single-threaded and
    parses one stream; independent streams need independent parsers.

    Usage:
        parser = Parser(Lexer(source, "calc.ks"))
        parser.advance()                  # prime the lookahead
        item = parser.parse_top_level()   # TopLevel, or None at EOF

    Attributes:
        lexer: Token source
        current: The lookahead token (None until advance() is first called)
    """

    def __init__(
        self,
        lexer: Lexer,
        precedence: Optional[PrecedenceTable] = None,
    ):
        """
        Initialize the parser.

        Args:
            lexer: The lexer to pull tokens from
            precedence: Operator table (the default operators if None)
        """
        self.lexer = lexer
        self.current: Optional[Token] = None
        self._depth = 0
        table = precedence if precedence is not None else PrecedenceTable.default()
        self._operators = table.snapshot()

    @classmethod
    def from_source(
        cls,
        source: str,
        filename: str = "<input>",
        precedence: Optional[PrecedenceTable] = None,
    ) -> "Parser":
        """Create a parser over a source string."""
        return cls(Lexer(source, filename), precedence)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def advance(self) -> Token:
        """Read the next token into ``current`` and return it."""
        self.current = self.lexer.next_token()
        return self.current

    def _check(self, char: str) -> bool:
        """Check if the current token is the given symbol."""
        return self.current.is_symbol(char)

    def _error(self, message: str) -> UnexpectedTokenError:
        """Build an UnexpectedTokenError pointing at the current token."""
        return UnexpectedTokenError(
            message,
            found=self.current.describe(),
            location=self.current.location,
        )

    def _parse_nested(self, construct: str, parse: Callable[[], T]) -> T:
        """
        Run a nested production on behalf of an enclosing construct.

        An UnexpectedTokenError from the nested production is re-raised as
        IncompleteConstructError; one that is already incomplete passes
        through untouched.

        Raises:
            UnexpectedTokenError: If nesting would exceed MAX_NESTING_DEPTH
        """
        if self._depth >= MAX_NESTING_DEPTH:
            raise self._error("expression nested too deeply")

        self._depth += 1
        try:
            return parse()
        except UnexpectedTokenError as e:
            raise IncompleteConstructError(construct, e) from e
        finally:
            self._depth -= 1

    # =========================================================================
    # Primary Expressions
    # =========================================================================

    def parse_number_expr(self) -> NumberExpr:
        """numberexpr ::= NUMBER"""
        token = self.current
        self.advance()
        return NumberExpr(token.value, location=token.location)

    def parse_paren_expr(self) -> ExprAST:
        """parenexpr ::= '(' expression ')'"""
        self.advance()  # consume (
        expr = self._parse_nested("parenthesized expression", self.parse_expression)

        if not self._check(")"):
            raise self._error("Expected ')'")
        self.advance()  # consume )

        return expr

    def parse_identifier_expr(self) -> ExprAST:
        """
        identifierexpr ::= IDENTIFIER
                         | IDENTIFIER '(' (expression (',' expression)*)? ')'
        """
        token = self.current
        name = token.value
        self.advance()  # consume identifier

        # Plain variable reference
        if not self._check("("):
            return VariableExpr(name, location=token.location)

        self.advance()  # consume (
        args = []
        if not self._check(")"):
            while True:
                args.append(self._parse_nested("argument list", self.parse_expression))

                if self._check(")"):
                    break
                if not self._check(","):
                    raise self._error("Expected ')' or ',' in argument list")
                self.advance()  # consume ,

        self.advance()  # consume )

        return CallExpr(name, tuple(args), location=token.location)

    def parse_primary(self) -> ExprAST:
        """primary ::= identifierexpr | numberexpr | parenexpr"""
        if self.current.kind == TokenKind.IDENTIFIER:
            return self.parse_identifier_expr()
        if self.current.kind == TokenKind.NUMBER:
            return self.parse_number_expr()
        if self._check("("):
            return self.parse_paren_expr()

        raise self._error("unknown token when expecting an expression")

    # =========================================================================
    # Binary Expressions
    # =========================================================================

    def _current_precedence(self) -> int:
        return token_precedence(self.current, self._operators)

    def parse_bin_op_rhs(self, min_precedence: int, lhs: ExprAST) -> ExprAST:
        """
        binoprhs ::= (BINOP primary)*

        Precedence climbing: keeps folding ``lhs op rhs`` while the current
        operator binds at least as tightly as ``min_precedence``. When the
        operator after ``rhs`` binds tighter than ``op``, it takes ``rhs``
        as its own left operand first.

        Args:
            min_precedence: Weakest operator this call may consume
            lhs: Expression parsed so far

        Returns:
            The combined expression
        """
        while True:
            precedence = self._current_precedence()

            # Not an operator, or binds too loosely for this level
            if precedence < min_precedence:
                return lhs

            op_token = self.current
            self.advance()  # consume operator

            rhs = self._parse_nested(f"right operand of '{op_token.value}'", self.parse_primary)

            # A tighter operator follows: let it take rhs first
            next_precedence = self._current_precedence()
            if precedence < next_precedence:
                rhs = self.parse_bin_op_rhs(precedence + 1, rhs)

            lhs = BinaryExpr(op_token.value, lhs, rhs, location=lhs.location)

    def parse_expression(self) -> ExprAST:
        """expression ::= primary binoprhs"""
        lhs = self.parse_primary()
        return self.parse_bin_op_rhs(0, lhs)

    # =========================================================================
    # Functions and Top-Level Constructs
    # =========================================================================

    def parse_prototype(self) -> Prototype:
        """prototype ::= IDENTIFIER '(' IDENTIFIER* ')'"""
        if self.current.kind != TokenKind.IDENTIFIER:
            raise self._error("Expected function name in prototype")

        token = self.current
        self.advance()  # consume name

        if not self._check("("):
            raise self._error("Expected '(' in prototype")

        params = []
        while self.advance().kind == TokenKind.IDENTIFIER:
            params.append(self.current.value)

        if not self._check(")"):
            raise self._error("Expected ')' in prototype")
        self.advance()  # consume )

        return Prototype(token.value, tuple(params), location=token.location)

    def parse_definition(self) -> Function:
        """definition ::= 'def' prototype expression"""
        self.advance()  # consume def
        prototype = self._parse_nested("function prototype", self.parse_prototype)
        body = self._parse_nested("function body", self.parse_expression)
        return Function(prototype, body)

    def parse_extern(self) -> Prototype:
        """external ::= 'extern' prototype"""
        self.advance()  # consume extern
        return self._parse_nested("extern declaration", self.parse_prototype)

    def parse_top_level_expr(self) -> Function:
        """toplevelexpr ::= expression, wrapped in an anonymous function"""
        location = self.current.location
        expr = self.parse_expression()
        return Function(Prototype("", (), location=location), expr)

    def parse_top_level(self) -> Optional[TopLevel]:
        """
        Parse one top-level construct from the current token.

        Empty statements (';') are not handled here; the driver skips them.

        Returns:
            The tagged result, or None if the current token is EOF

        Raises:
            ParseError: If the construct is malformed
        """
        kind = self.current.kind

        if kind == TokenKind.EOF:
            return None

        if kind == TokenKind.DEF:
            item = TopLevel(TopLevelKind.DEFINITION, self.parse_definition())
        elif kind == TokenKind.EXTERN:
            item = TopLevel(TopLevelKind.EXTERN, self.parse_extern())
        else:
            item = TopLevel(TopLevelKind.EXPRESSION, self.parse_top_level_expr())

        logger.debug(f"parsed {item.kind.name.lower()} at {item.location}")
        return item
