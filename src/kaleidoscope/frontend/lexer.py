"""
Kaleidoscope Lexer (Tokenizer)
==============================

This module implements the streaming lexer for the Kaleidoscope
expression language. Characters are pulled from a text stream one at a
time and a single token is produced per call to ``next_token()``.

Token Categories
----------------
- Keywords: def, extern
- Identifiers: an ASCII letter followed by ASCII letters and digits
- Numbers: runs of digits and '.', converted like C's strtod
- Symbols: any other single character (operators, parentheses, ',', ';')
- End of input: returned on every call once the stream is exhausted

Comments
--------
- '#' to the end of the line

Number Conversion
-----------------
Numerals are never rejected. The longest valid decimal prefix is used:

| Numeral | Value |
|---------|-------|
| 42      | 42.0  |
| 4.5     | 4.5   |
| .5      | 0.5   |
| 1.2.3   | 1.2   |
| .       | 0.0   |

Example Usage
-------------
>>> from kaleidoscope.frontend.lexer import Lexer
>>> lexer = Lexer("def foo(x) x*2", "test.ks")
>>> for token in lexer.tokenize():
...     print(token)
Token(DEF, 1:1)
Token(IDENTIFIER, 'foo', 1:5)
Token(SYMBOL, '(', 1:8)
Token(IDENTIFIER, 'x', 1:9)
Token(SYMBOL, ')', 1:10)
Token(IDENTIFIER, 'x', 1:12)
Token(SYMBOL, '*', 1:13)
Token(NUMBER, 2.0, 1:14)
Token(EOF, 1:15)

Threading
---------
A Lexer holds one buffered character and its position between calls. It
is not reentrant; use one Lexer per stream.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, TextIO, Union
import io
import logging
import re
import string

from kaleidoscope.errors import SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds for the Kaleidoscope language.

    Single-character operators and punctuation share the SYMBOL kind and
    carry the character as their value, so no character code can be
    confused with a keyword or token class.
    """

    EOF = auto()            # End of input
    DEF = auto()            # def
    EXTERN = auto()         # extern
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Numeric literals
    SYMBOL = auto()         # Any other single character


# Map keyword strings to their token kinds
KEYWORDS: dict[str, TokenKind] = {
    "def": TokenKind.DEF,
    "extern": TokenKind.EXTERN,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token produced by the lexer.

    Attributes:
        kind: The TokenKind classification
        value: Identifier text, symbol character, number value, or None
        line: Line of the token's first character (1-indexed)
        column: Column of the token's first character (1-indexed)
        filename: Name of the source
    """
    kind: TokenKind
    value: str | float | None
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            return f"Token({self.kind.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_symbol(self, char: str) -> bool:
        """Return True if this token is the given single-character symbol."""
        return self.kind == TokenKind.SYMBOL and self.value == char

    def describe(self) -> str:
        """Short human-readable description used in error hints."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind in (TokenKind.DEF, TokenKind.EXTERN):
            return f"keyword '{self.kind.name.lower()}'"
        if self.kind == TokenKind.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.kind == TokenKind.NUMBER:
            return f"number {self.value:g}"
        return f"'{self.value}'"


# =============================================================================
# Numeral Conversion
# =============================================================================

# Longest decimal prefix strtod would accept from a run of digits and dots
_DECIMAL_PREFIX = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_numeral(text: str) -> float:
    """
    Convert a numeral the way C's strtod does.

    Malformed numerals are not rejected: the longest valid prefix is
    converted, and a numeral with no valid prefix (such as '.') is 0.0.
    """
    match = _DECIMAL_PREFIX.match(text)
    if match is None:
        return 0.0
    return float(match.group())


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Pull-based tokenizer for Kaleidoscope source.

    The lexer reads from any text stream with a ``read(n)`` method that
    returns an empty string at end of stream (files, io.StringIO,
    sys.stdin). A plain string is wrapped in io.StringIO.

    Usage:
        lexer = Lexer(sys.stdin, "<stdin>")
        token = lexer.next_token()

    Attributes:
        stream: The character stream being tokenized
        filename: Name of the source (for error reporting)
    """

    # ASCII classifications (C isspace/isalpha/isalnum/isdigit)
    WHITESPACE = frozenset(" \t\n\r\v\f")
    IDENT_START = frozenset(string.ascii_letters)
    IDENT_CHARS = frozenset(string.ascii_letters + string.digits)
    NUMBER_CHARS = frozenset(string.digits + ".")

    # End of stream sentinel; never equal to a real character
    END = ""

    def __init__(
        self,
        source: Union[str, TextIO],
        filename: str = "<input>",
        line_number: int = 1,
    ):
        """
        Initialize the lexer.

        Args:
            source: Source text, or a text stream to pull characters from
            filename: Name of the source (for error messages)
            line_number: Line number of the first character
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self.stream = source
        self.filename = filename

        # Buffered character; starts as whitespace so the first call reads
        self._last_char = " "
        self._line = line_number
        self._column = 0

    # =========================================================================
    # Character Access
    # =========================================================================

    def _read_char(self) -> str:
        """
        Replace the buffered character with the next one from the stream.

        Once the stream has reported its end, it is not read again; an
        interactive stream would otherwise block for more input.
        """
        if self._last_char == self.END:
            return self.END

        if self._last_char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        self._last_char = self.stream.read(1)
        return self._last_char

    def _make_token(
        self,
        kind: TokenKind,
        value: str | float | None,
        line: int,
        column: int,
    ) -> Token:
        token = Token(kind=kind, value=value, line=line, column=column, filename=self.filename)
        logger.debug(f"token {token!r}")
        return token

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self) -> Token:
        """
        Return the next token from the stream.

        Returns:
            The next Token; a Token of kind EOF on every call once the
            stream is exhausted
        """
        while True:
            while self._last_char in self.WHITESPACE:
                self._read_char()

            line, column = self._line, self._column

            if self._last_char in self.IDENT_START:
                return self._scan_identifier(line, column)

            if self._last_char in self.NUMBER_CHARS:
                return self._scan_number(line, column)

            if self._last_char == "#":
                self._skip_comment()
                if self._last_char != self.END:
                    continue

            if self._last_char == self.END:
                return self._make_token(TokenKind.EOF, None, self._line, self._column)

            char = self._last_char
            self._read_char()
            return self._make_token(TokenKind.SYMBOL, char, line, column)

    def _scan_identifier(self, line: int, column: int) -> Token:
        """
        Scan an identifier or keyword.

        The character that ends the identifier stays buffered for the next
        call.
        """
        chars = [self._last_char]
        while self._read_char() in self.IDENT_CHARS:
            chars.append(self._last_char)

        name = "".join(chars)

        if name in KEYWORDS:
            return self._make_token(KEYWORDS[name], None, line, column)

        return self._make_token(TokenKind.IDENTIFIER, name, line, column)

    def _scan_number(self, line: int, column: int) -> Token:
        """Scan a run of digits and dots as a number."""
        chars = [self._last_char]
        while self._read_char() in self.NUMBER_CHARS:
            chars.append(self._last_char)

        value = parse_numeral("".join(chars))
        return self._make_token(TokenKind.NUMBER, value, line, column)

    def _skip_comment(self) -> None:
        """Skip a '#' comment up to (not past) the line end or end of input."""
        while True:
            char = self._read_char()
            if char in (self.END, "\n", "\r"):
                return

    # =========================================================================
    # Convenience
    # =========================================================================

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the first EOF token.

        Yields:
            Token objects in source order
        """
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return
