"""
Kaleidoscope Abstract Syntax Tree (AST) Definitions
===================================================

This module defines the AST node types produced by the Kaleidoscope
parser and handed to downstream consumers (code generators, evaluators,
pretty printers).

Node Hierarchy
--------------
ExprAST (base for expressions)
├── NumberExpr - numeric literal
├── VariableExpr - variable reference
├── BinaryExpr - binary operator application
└── CallExpr - function call
Prototype - function name and parameter names
Function - prototype plus body expression
TopLevel - tagged result of one top-level parse (definition, extern,
           or bare expression)

Design Notes
------------
- All nodes are frozen dataclasses; a node owns its children and the tree
  has no shared or back references
- Child sequences are tuples so a built tree cannot be mutated
- Each node may record its source location; locations are excluded from
  equality, so two parses of the same text compare equal
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Union

from kaleidoscope.errors import SourceLocation


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class ExprAST:
    """
    Base class for all expression nodes.

    Attributes:
        location: Source location of the expression's first token
    """
    location: Optional[SourceLocation] = field(default=None, compare=False, kw_only=True)


@dataclass(frozen=True)
class NumberExpr(ExprAST):
    """
    Numeric literal such as ``1.0``.

    Attributes:
        value: The literal value
    """
    value: float


@dataclass(frozen=True)
class VariableExpr(ExprAST):
    """
    Reference to a variable, such as ``a``.

    Attributes:
        name: The variable name
    """
    name: str


@dataclass(frozen=True)
class BinaryExpr(ExprAST):
    """
    Binary operation such as ``a + b``.

    Attributes:
        op: The operator character
        lhs: Left operand
        rhs: Right operand
    """
    op: str
    lhs: ExprAST
    rhs: ExprAST


@dataclass(frozen=True)
class CallExpr(ExprAST):
    """
    Function call such as ``foo(1, x)``.

    Attributes:
        callee: Name of the function being called
        args: Argument expressions in call order
    """
    callee: str
    args: tuple[ExprAST, ...] = ()


# =============================================================================
# Function Nodes
# =============================================================================

@dataclass(frozen=True)
class Prototype:
    """
    A function's name and parameter names, without a body.

    Duplicate parameter names are accepted; checking them belongs to a
    later stage. Anonymous top-level expressions use the empty name.

    Attributes:
        name: Function name ("" for anonymous wrappers)
        params: Parameter names in declaration order
        location: Source location of the function name
    """
    name: str
    params: tuple[str, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, kw_only=True)

    @property
    def is_anonymous(self) -> bool:
        """True for the wrapper around a bare top-level expression."""
        return self.name == ""


@dataclass(frozen=True)
class Function:
    """
    A function definition: prototype plus body expression.

    Attributes:
        prototype: The function's prototype
        body: The expression the function evaluates
    """
    prototype: Prototype
    body: ExprAST


# =============================================================================
# Tagged Top-Level Result
# =============================================================================

class TopLevelKind(Enum):
    """Which top-level production produced a TopLevel result."""
    DEFINITION = auto()     # def name(params) body
    EXTERN = auto()         # extern name(params)
    EXPRESSION = auto()     # bare expression


@dataclass(frozen=True)
class TopLevel:
    """
    Result of parsing one top-level construct.

    Attributes:
        kind: Which production occurred
        node: A Function for DEFINITION and EXPRESSION, a Prototype for EXTERN
    """
    kind: TopLevelKind
    node: Union[Function, Prototype]

    @property
    def prototype(self) -> Prototype:
        """The construct's prototype (the node itself for externs)."""
        if isinstance(self.node, Prototype):
            return self.node
        return self.node.prototype

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.prototype.location

    def describe(self) -> str:
        """Status line reported for this construct by the interactive driver."""
        if self.kind == TopLevelKind.DEFINITION:
            return "Parsed a function definition."
        if self.kind == TopLevelKind.EXTERN:
            return "Parsed an extern"
        return "Parsed a top-level expr"


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; everything else falls through to generic_visit, which visits
    children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_CallExpr(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: Any) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Any) -> None:
        """Visit all child nodes of ``node``."""
        for value in node.__dict__.values():
            if isinstance(value, (ExprAST, Prototype, Function)):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ExprAST):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(function))

    Output for ``def foo(a b) a+b``:
        Function foo(a, b)
          Binary '+'
            Variable a
            Variable b

    Each visit_* method emits one line and returns the node's children.
    print() walks them with an explicit stack, so long left-associative
    chains such as ``1+1+...+1`` print without recursing per node.
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Any) -> str:
        """Print the AST and return as string."""
        self.output = []
        if isinstance(node, TopLevel):
            node = node.node

        pending = [(node, 0)]
        while pending:
            node, self.indent_level = pending.pop()
            children = self.visit(node) or ()
            # Reversed so the first child is printed first
            for child in reversed(children):
                pending.append((child, self.indent_level + 1))

        self.indent_level = 0
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_Function(self, node: Function):
        proto = node.prototype
        name = proto.name or "<anonymous>"
        self._emit(f"Function {name}({', '.join(proto.params)})")
        return (node.body,)

    def visit_Prototype(self, node: Prototype):
        self._emit(f"Extern {node.name}({', '.join(node.params)})")

    def visit_NumberExpr(self, node: NumberExpr):
        self._emit(f"Number {node.value:g}")

    def visit_VariableExpr(self, node: VariableExpr):
        self._emit(f"Variable {node.name}")

    def visit_BinaryExpr(self, node: BinaryExpr):
        self._emit(f"Binary '{node.op}'")
        return (node.lhs, node.rhs)

    def visit_CallExpr(self, node: CallExpr):
        self._emit(f"Call {node.callee}")
        return node.args
