# =============================================================================
# test_ast.py - AST Unit Tests
# =============================================================================
# Tests for AST nodes, the visitor base class and the pretty printer.
# =============================================================================

import dataclasses

import pytest
from kaleidoscope.errors import SourceLocation
from kaleidoscope.frontend.parser import Parser
from kaleidoscope.frontend.ast import (
    ASTPrinter,
    ASTVisitor,
    BinaryExpr,
    CallExpr,
    Function,
    NumberExpr,
    Prototype,
    TopLevel,
    TopLevelKind,
    VariableExpr,
)


def parse_one(source: str) -> TopLevel:
    parser = Parser.from_source(source)
    parser.advance()
    return parser.parse_top_level()


class TestNodes:
    """Node construction and equality."""

    def test_nodes_are_frozen(self):
        node = NumberExpr(1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.value = 2.0

    def test_location_ignored_by_equality(self):
        here = SourceLocation("a.ks", 1, 1)
        there = SourceLocation("b.ks", 9, 9)
        assert VariableExpr("x", location=here) == VariableExpr("x", location=there)
        assert Prototype("f", ("a",), location=here) == Prototype("f", ("a",))

    def test_structure_matters(self):
        assert BinaryExpr("+", NumberExpr(1), NumberExpr(2)) != BinaryExpr("+", NumberExpr(2), NumberExpr(1))
        assert CallExpr("f", (NumberExpr(1),)) != CallExpr("f", ())

    def test_anonymous_prototype(self):
        assert Prototype("").is_anonymous
        assert not Prototype("main").is_anonymous

    def test_top_level_prototype(self):
        proto = Prototype("sin", ("x",))
        assert TopLevel(TopLevelKind.EXTERN, proto).prototype is proto
        fn = Function(Prototype("f"), NumberExpr(1))
        assert TopLevel(TopLevelKind.DEFINITION, fn).prototype is fn.prototype

    def test_top_level_location(self):
        item = parse_one("\n  def f(x) x")
        assert str(item.location) == "<input>:2:7"


class TestVisitor:
    """ASTVisitor dispatch and traversal."""

    def test_generic_visit_reaches_all_nodes(self):
        class Collector(ASTVisitor):
            def __init__(self):
                self.seen = []

            def visit_VariableExpr(self, node):
                self.seen.append(node.name)

            def visit_CallExpr(self, node):
                self.seen.append(f"{node.callee}()")
                self.generic_visit(node)

        collector = Collector()
        collector.visit(parse_one("def f(a b) g(a, b*c) + d").node)
        assert collector.seen == ["g()", "a", "b", "c", "d"]

    def test_visit_returns_method_result(self):
        class Evaluator(ASTVisitor):
            def visit_NumberExpr(self, node):
                return node.value

            def visit_BinaryExpr(self, node):
                lhs, rhs = self.visit(node.lhs), self.visit(node.rhs)
                if node.op == "+":
                    return lhs + rhs
                if node.op == "-":
                    return lhs - rhs
                if node.op == "*":
                    return lhs * rhs
                return float(lhs < rhs)

        body = parse_one("1+2*3-4 < 3").node.body
        assert Evaluator().visit(body) == 0.0
        assert Evaluator().visit(parse_one("10-2-3").node.body) == 5.0


class TestPrinter:
    """ASTPrinter output."""

    def test_definition(self):
        text = ASTPrinter().print(parse_one("def foo(a b) a+1"))
        assert text == "\n".join([
            "Function foo(a, b)",
            "  Binary '+'",
            "    Variable a",
            "    Number 1",
        ])

    def test_extern(self):
        assert ASTPrinter().print(parse_one("extern sin(x)")) == "Extern sin(x)"

    def test_anonymous_call(self):
        text = ASTPrinter().print(parse_one("f(2.5, g())"))
        assert text == "\n".join([
            "Function <anonymous>()",
            "  Call f",
            "    Number 2.5",
            "    Call g",
        ])

    def test_printer_reusable(self):
        printer = ASTPrinter()
        printer.print(parse_one("1"))
        assert printer.print(parse_one("x")) == "Function <anonymous>()\n  Variable x"

    def test_long_chain(self):
        """Left-associative chains print without recursing per node."""
        text = ASTPrinter().print(parse_one("+".join(["1"] * 2000)))
        lines = text.splitlines()
        assert len(lines) == 1 + 1999 + 2000
        assert lines[1] == "  Binary '+'"
        assert lines[-1] == "    Number 1"
        assert lines[2000] == " " * 4000 + "Number 1"
