# =============================================================================
# test_precedence.py - Precedence Table Unit Tests
# =============================================================================
# Tests for the binary operator precedence table.
#
# Test coverage includes:
#   - Default operators and lookup
#   - Operator installation and validation
#   - Read-only snapshots
# =============================================================================

import pytest
from kaleidoscope.frontend.precedence import (
    DEFAULT_PRECEDENCE,
    NOT_AN_OPERATOR,
    PrecedenceTable,
    token_precedence,
)
from kaleidoscope.frontend.lexer import Token, TokenKind
from kaleidoscope.frontend.errors import OperatorDefinitionError


def symbol(char: str) -> Token:
    return Token(TokenKind.SYMBOL, char, 1, 1, "<test>")


class TestDefaultTable:
    """The standard operators."""

    def test_default_values(self):
        table = PrecedenceTable.default()
        assert dict(table.operators) == {"<": 10, "+": 20, "-": 20, "*": 40}

    def test_default_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_PRECEDENCE["/"] = 40

    def test_defaults_not_shared(self):
        """Installing on one default table leaves others untouched."""
        first = PrecedenceTable.default()
        first.install("/", 40)
        assert "/" not in PrecedenceTable.default()

    def test_empty_table(self):
        assert len(PrecedenceTable()) == 0

    def test_mapping_protocol(self):
        table = PrecedenceTable.default()
        assert "+" in table
        assert table["*"] == 40
        assert sorted(table) == ["*", "+", "-", "<"]


class TestTokenPrecedence:
    """Lookup of a token's binding strength."""

    @pytest.mark.parametrize("char,expected", [
        ("<", 10),
        ("+", 20),
        ("-", 20),
        ("*", 40),
    ])
    def test_default_operators(self, char, expected):
        assert token_precedence(symbol(char), DEFAULT_PRECEDENCE) == expected

    @pytest.mark.parametrize("char", ["/", ";", "(", ")", ","])
    def test_non_operators(self, char):
        assert token_precedence(symbol(char), DEFAULT_PRECEDENCE) == NOT_AN_OPERATOR

    def test_non_symbol_tokens(self):
        """Identifiers, numbers and EOF are never operators."""
        assert token_precedence(Token(TokenKind.IDENTIFIER, "x", 1, 1, "t"), DEFAULT_PRECEDENCE) == -1
        assert token_precedence(Token(TokenKind.NUMBER, 1.0, 1, 1, "t"), DEFAULT_PRECEDENCE) == -1
        assert token_precedence(Token(TokenKind.EOF, None, 1, 1, "t"), DEFAULT_PRECEDENCE) == -1

    def test_non_ascii_symbol(self):
        assert token_precedence(symbol("×"), {"×": 40}) == NOT_AN_OPERATOR

    def test_non_positive_entry(self):
        """Entries of zero or less read as not-an-operator."""
        assert token_precedence(symbol("%"), {"%": 0}) == NOT_AN_OPERATOR


class TestInstall:
    """Registering extra operators."""

    def test_install_new_operator(self):
        table = PrecedenceTable.default()
        table.install("/", 40)
        assert table["/"] == 40

    def test_reinstall_changes_precedence(self):
        table = PrecedenceTable.default()
        table.install("<", 5)
        assert table["<"] == 5

    def test_remove(self):
        table = PrecedenceTable.default()
        table.remove("<")
        table.remove("/")
        assert "<" not in table

    def test_constructor_validates(self):
        with pytest.raises(OperatorDefinitionError):
            PrecedenceTable({"a": 10})

    @pytest.mark.parametrize("op", ["a", "7", " ", "==", ""])
    def test_invalid_characters(self, op):
        with pytest.raises(OperatorDefinitionError):
            PrecedenceTable().install(op, 10)

    @pytest.mark.parametrize("op", list("(),;#."))
    def test_reserved_characters(self, op):
        with pytest.raises(OperatorDefinitionError) as exc_info:
            PrecedenceTable().install(op, 10)
        assert "reserved" in str(exc_info.value)

    @pytest.mark.parametrize("precedence", [0, -3, 2.5, True, "10"])
    def test_invalid_precedence(self, precedence):
        with pytest.raises(OperatorDefinitionError):
            PrecedenceTable().install("/", precedence)

    def test_error_message(self):
        with pytest.raises(OperatorDefinitionError) as exc_info:
            PrecedenceTable().install("x", 10)
        assert exc_info.value.operator == "x"
        assert "cannot define operator 'x'" in str(exc_info.value)


class TestSnapshot:
    """Read-only snapshots."""

    def test_snapshot_is_read_only(self):
        snapshot = PrecedenceTable.default().snapshot()
        with pytest.raises(TypeError):
            snapshot["/"] = 40

    def test_snapshot_unaffected_by_install(self):
        table = PrecedenceTable.default()
        snapshot = table.snapshot()
        table.install("/", 40)
        assert "/" not in snapshot
        assert "/" in table.operators
