"""
Lexer (Tokenizer)
=================

This module converts source text into the flat token list consumed by
the parser.

Token Kinds
-----------
| Kind        | Examples                         | Value            |
|-------------|----------------------------------|------------------|
| KEYWORD     | int double return include main   | the keyword text |
|             | print                            |                  |
| ID          | total, _tmp, x1                  | the name         |
| INT         | 0, 42                            | int              |
| STRING      | "hello\\n"                       | decoded text     |
| OPERATOR    | + - * / =                        | the character    |
| PUNCTUATION | ; ( ) { } < > , . & % :          | the character    |
| HASH        | #                                | "#"              |
| ERROR       | any other character              | diagnostic text  |

Scanning Rules
--------------
At each cursor position, in priority order: skip whitespace, skip a
``//`` comment through end of line, scan a string literal, an
identifier or keyword, a decimal integer, the ``#`` symbol, an operator,
or a punctuation character. A character matching none of these becomes
an ERROR token and scanning continues, so the lexer is total over any
input except an unterminated string literal, which raises
UnterminatedStringError.

Unlike the parser-facing lexers of larger compilers, no EOF sentinel is
appended: the parser treats the end of the list as end of input.

Example Usage
-------------
>>> from minicc.compiler.lexer import lex
>>> for token in lex("int a;"):
...     print(token)
Token(KEYWORD, 'int', 1:1)
Token(ID, 'a', 1:5)
Token(PUNCTUATION, ';', 1:6)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from minicc.errors import SourceLocation
from minicc.compiler.errors import UnterminatedStringError

logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Lexical categories produced by the scanner."""
    KEYWORD = "KEYWORD"
    ID = "ID"
    INT = "INT"
    STRING = "STRING"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    HASH = "HASH"
    ERROR = "ERROR"


# =============================================================================
# Fixed Character Classes
# =============================================================================

KEYWORDS = frozenset({"int", "double", "return", "include", "main", "print"})

OPERATORS = frozenset("+-*/=")

PUNCTUATION = frozenset(";(){}<>,.&%:")

SPECIAL_SYMBOLS = frozenset("#")

# Only these escapes are decoded; any other backslash pair is kept verbatim
ESCAPE_SEQUENCES = {
    "n": "\n",
    "t": "\t",
    '"': '"',
    "\\": "\\",
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single lexical element.

    Attributes:
        kind: The TokenKind classification
        value: Token payload (str for most kinds, int for INT)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    kind: TokenKind
    value: str | int
    line: int = 1
    column: int = 1
    filename: str = "<input>"

    def __repr__(self) -> str:
        if isinstance(self.value, int):
            return f"Token({self.kind.name}, {self.value}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.value!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_(self, kind: TokenKind, value: Optional[str] = None) -> bool:
        """Return True if this token has the given kind (and value, if given)."""
        if self.kind is not kind:
            return False
        return value is None or self.value == value

    def describe(self) -> str:
        """Short human-readable form used in syntax error messages."""
        return f"{self.kind.name} ('{self.value}')"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes source text.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects for each lexical element, in source order

        Raises:
            UnterminatedStringError: If a string literal is never closed
        """
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                return
            yield self._scan_token()

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at cursor + offset, or empty string past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character, keeping line/column tracking current."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _make_token(
        self,
        kind: TokenKind,
        value: str | int,
        start_line: int,
        start_column: int,
    ) -> Token:
        return Token(
            kind=kind,
            value=value,
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    def _line_text(self, line_start: int) -> str:
        """Return the source line beginning at line_start."""
        line_end = self.source.find("\n", line_start)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[line_start:line_end]

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char.isspace():
                self._advance()
                continue

            # Single-line comment: //
            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            break

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if char == '"':
            return self._scan_string(start_line, start_column)

        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char in string.digits:
            return self._scan_integer(start_line, start_column)

        self._advance()

        if char in SPECIAL_SYMBOLS:
            return self._make_token(TokenKind.HASH, char, start_line, start_column)

        if char in OPERATORS:
            return self._make_token(TokenKind.OPERATOR, char, start_line, start_column)

        if char in PUNCTUATION:
            return self._make_token(TokenKind.PUNCTUATION, char, start_line, start_column)

        logger.debug(f"Unknown character {char!r} at {start_line}:{start_column}")
        return self._make_token(
            TokenKind.ERROR,
            f"unknown character '{char}'",
            start_line,
            start_column,
        )

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """Scan an identifier and classify it against the keyword set."""
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)
        kind = TokenKind.KEYWORD if name in KEYWORDS else TokenKind.ID
        return self._make_token(kind, name, start_line, start_column)

    def _scan_integer(self, start_line: int, start_column: int) -> Token:
        chars = []
        while self._peek() and self._peek() in string.digits:
            chars.append(self._advance())

        return self._make_token(TokenKind.INT, int("".join(chars)), start_line, start_column)

    def _scan_string(self, start_line: int, start_column: int) -> Token:
        """
        Scan a double-quoted string literal.

        Decodes \\n, \\t, \\" and \\\\. Literal newlines are allowed inside
        the string; only running out of input is an error.
        """
        line_start = self._line_start_pos
        self._advance()  # consume opening "

        chars = []
        while not self._at_end():
            char = self._peek()

            if char == '"':
                self._advance()
                return self._make_token(
                    TokenKind.STRING,
                    "".join(chars),
                    start_line,
                    start_column,
                )

            if char == "\\" and self._peek(1) in ESCAPE_SEQUENCES:
                self._advance()
                chars.append(ESCAPE_SEQUENCES[self._advance()])
            else:
                chars.append(self._advance())

        raise UnterminatedStringError(
            SourceLocation(self.filename, start_line, start_column),
            self._line_text(line_start),
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def lex(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize source text into a list of tokens.

    Args:
        source: Source code string
        filename: Source filename for error messages

    Returns:
        Tokens in source order (no EOF sentinel)

    Raises:
        UnterminatedStringError: If a string literal is never closed
    """
    tokens = list(Lexer(source, filename).tokenize())
    logger.debug(f"Lexed {len(tokens)} tokens from {filename}")
    return tokens
