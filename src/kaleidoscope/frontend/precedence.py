"""
Binary Operator Precedence Table
================================

Maps single operator characters to their binding strength for the
precedence-climbing expression parser. Higher numbers bind tighter.

Default Operators
-----------------
| Operator | Precedence |
|----------|------------|
| <        | 10         |
| + -      | 20         |
| *        | 40         |

Characters missing from the table are not binary operators: the parser
sees precedence -1 for them and stops extending the expression there.

New operators may be installed before a parser is created. A Parser takes
a read-only snapshot of the table when it is constructed, so installing
operators never changes a parse in progress.
"""

from types import MappingProxyType
from typing import Iterator, Mapping, Optional
import string

from kaleidoscope.frontend.errors import OperatorDefinitionError
from kaleidoscope.frontend.lexer import Token, TokenKind


# Precedence reported for anything that is not a binary operator
NOT_AN_OPERATOR = -1

DEFAULT_PRECEDENCE: Mapping[str, int] = MappingProxyType({
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
})

# Characters the grammar already uses for something else
RESERVED_CHARACTERS = frozenset("(),;#.")


class PrecedenceTable:
    """
    Mutable operator precedence table.

    Usage:
        table = PrecedenceTable.default()
        table.install("/", 40)
        parser = Parser(lexer, precedence=table)

    Attributes:
        operators: Read-only view of the operator -> precedence mapping
    """

    def __init__(self, operators: Optional[Mapping[str, int]] = None):
        self._operators: dict[str, int] = {}
        for op, precedence in (operators or {}).items():
            self.install(op, precedence)

    @classmethod
    def default(cls) -> "PrecedenceTable":
        """Create a table holding the standard operators."""
        return cls(DEFAULT_PRECEDENCE)

    @property
    def operators(self) -> Mapping[str, int]:
        return MappingProxyType(self._operators)

    def install(self, op: str, precedence: int) -> None:
        """
        Register (or re-register) a binary operator.

        Args:
            op: A single printable ASCII punctuation character
            precedence: Positive binding strength; higher binds tighter

        Raises:
            OperatorDefinitionError: If the character or precedence is invalid
        """
        if not isinstance(op, str) or len(op) != 1:
            raise OperatorDefinitionError(str(op), "operators are single characters")
        if op not in string.punctuation:
            raise OperatorDefinitionError(op, "operators must be ASCII punctuation")
        if op in RESERVED_CHARACTERS:
            raise OperatorDefinitionError(op, "character is reserved by the grammar")
        if isinstance(precedence, bool) or not isinstance(precedence, int) or precedence < 1:
            raise OperatorDefinitionError(op, "precedence must be a positive integer")
        self._operators[op] = precedence

    def remove(self, op: str) -> None:
        """Unregister an operator; unknown operators are ignored."""
        self._operators.pop(op, None)

    def snapshot(self) -> Mapping[str, int]:
        """Return a read-only copy that later installs do not affect."""
        return MappingProxyType(dict(self._operators))

    def __contains__(self, op: object) -> bool:
        return op in self._operators

    def __iter__(self) -> Iterator[str]:
        return iter(self._operators)

    def __len__(self) -> int:
        return len(self._operators)

    def __getitem__(self, op: str) -> int:
        return self._operators[op]


def token_precedence(token: Token, operators: Mapping[str, int]) -> int:
    """
    Precedence of ``token`` as a binary operator.

    Returns:
        The table entry for symbol tokens that are operators, otherwise
        NOT_AN_OPERATOR
    """
    if token.kind != TokenKind.SYMBOL or not token.value.isascii():
        return NOT_AN_OPERATOR
    precedence = operators.get(token.value, NOT_AN_OPERATOR)
    if precedence <= 0:
        return NOT_AN_OPERATOR
    return precedence
