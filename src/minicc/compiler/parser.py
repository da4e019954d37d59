"""
Recursive Descent Parser
========================

This module builds the AST from the token list produced by the lexer.

Grammar (EBNF)
--------------
program         ::= statement*
statement       ::= include | main_def | var_decl | assignment
                  | call | return_stmt | block
include         ::= '#' 'include' '<' ID '.' ID '>'
main_def        ::= 'int' 'main' '(' ')' block
var_decl        ::= ('int' | 'double') ID (',' ID)* ';'
assignment      ::= ID '=' expression ';'
call            ::= ID '(' (expression (',' expression)*)? ')' ';'
return_stmt     ::= 'return' expression ';'
block           ::= '{' statement* '}'

expression      ::= term (('+' | '-') term)*
term            ::= factor (('*' | '/') factor)*
factor          ::= '&' ID | ID | INT | STRING | '(' expression ')'

Statement Dispatch
------------------
One token of lookahead selects the rule, with an explicit peek at the
second token where the first is ambiguous: ``int main`` versus
``int name``, and ``ID =`` versus ``ID (``.

Error Handling
--------------
There is no error recovery. The first mismatch raises
UnexpectedTokenError (expected vs. found, token index and location) or
UnexpectedEndOfInputError, and no partial tree is returned.

Example Usage
-------------
>>> from minicc.compiler.lexer import lex
>>> from minicc.compiler.parser import parse
>>> program = parse(lex("int a; a = 1 + 2;"))
>>> [type(s).__name__ for s in program.body]
['VariableDeclaration', 'AssignmentStatement']
"""

import logging
from typing import Callable, Optional

from minicc.errors import SourceLocation
from minicc.compiler.lexer import Token, TokenKind
from minicc.compiler.ast import (
    Program,
    Statement,
    FunctionDefinition,
    BlockStatement,
    IncludeDirective,
    VariableDeclaration,
    AssignmentStatement,
    FunctionCall,
    ReturnStatement,
    Expression,
    BinaryExpression,
    AddressOf,
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BinaryOperator,
    DataType,
)
from minicc.compiler.errors import (
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
)

logger = logging.getLogger(__name__)


# Operator tables for the two precedence levels
ADDITIVE_OPERATORS = {
    "+": BinaryOperator.ADD,
    "-": BinaryOperator.SUBTRACT,
}

MULTIPLICATIVE_OPERATORS = {
    "*": BinaryOperator.MULTIPLY,
    "/": BinaryOperator.DIVIDE,
}

TYPE_KEYWORDS = {
    "int": DataType.INT,
    "double": DataType.DOUBLE,
}


class Parser:
    """
    Recursive descent parser.

    Attributes:
        tokens: List of tokens to parse
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Tokens from the lexer
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []
        self._pos = 0

    def parse(self) -> Program:
        """
        Parse the whole token list.

        Returns:
            Program node holding every top-level statement

        Raises:
            ParseError: On the first token that does not fit the grammar
        """
        body = []
        while not self._at_end():
            body.append(self._parse_statement())

        logger.debug(f"Parsed {len(body)} top-level statements")
        return Program(location=SourceLocation(self.filename, 1, 1), body=body)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    def _peek(self, offset: int = 0) -> Optional[Token]:
        """Token at cursor + offset, or None past the end."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return None
        return self.tokens[pos]

    def _check(self, kind: TokenKind, value: Optional[str] = None, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token is not None and token.is_(kind, value)

    def _match(self, kind: TokenKind, value: Optional[str] = None) -> Optional[Token]:
        """Consume the current token if it matches, else return None."""
        if self._check(kind, value):
            return self._advance()
        return None

    def _advance(self) -> Token:
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _expect(self, kind: TokenKind, value: Optional[str] = None) -> Token:
        """
        Consume a token of the given kind (and value, if given).

        Raises:
            UnexpectedEndOfInputError: If no tokens are left
            UnexpectedTokenError: If the current token does not match
        """
        expected = f"{kind.name} ('{value if value is not None else 'any'}')"
        token = self._peek()

        if token is None:
            raise UnexpectedEndOfInputError(expected, self._pos, self._end_location())

        if not token.is_(kind, value):
            raise self._unexpected(expected, token)

        return self._advance()

    def _unexpected(self, expected: str, token: Token) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            expected,
            token.describe(),
            self._pos,
            token.location,
            self._get_source_line(token.line),
        )

    def _end_location(self) -> Optional[SourceLocation]:
        if not self.tokens:
            return None
        return self.tokens[-1].location

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Dispatch on the current token (and the next one where needed)."""
        token = self._peek()

        if token.is_(TokenKind.HASH):
            return self._parse_include()

        if token.kind is TokenKind.KEYWORD:
            if token.value == "int" and self._check(TokenKind.KEYWORD, "main", offset=1):
                return self._parse_main_function()
            if token.value in TYPE_KEYWORDS:
                return self._parse_declaration()
            if token.value == "return":
                return self._parse_return()

        if token.kind is TokenKind.ID:
            if self._check(TokenKind.OPERATOR, "=", offset=1):
                return self._parse_assignment()
            if self._check(TokenKind.PUNCTUATION, "(", offset=1):
                return self._parse_function_call()

        if token.is_(TokenKind.PUNCTUATION, "{"):
            return self._parse_block()

        raise self._unexpected("a statement", token)

    def _parse_include(self) -> IncludeDirective:
        location = self._expect(TokenKind.HASH, "#").location
        self._expect(TokenKind.KEYWORD, "include")
        self._expect(TokenKind.PUNCTUATION, "<")
        name = self._expect(TokenKind.ID).value
        self._expect(TokenKind.PUNCTUATION, ".")
        extension = self._expect(TokenKind.ID).value
        self._expect(TokenKind.PUNCTUATION, ">")
        return IncludeDirective(location=location, library=f"{name}.{extension}")

    def _parse_main_function(self) -> FunctionDefinition:
        location = self._expect(TokenKind.KEYWORD, "int").location
        self._expect(TokenKind.KEYWORD, "main")
        self._expect(TokenKind.PUNCTUATION, "(")
        self._expect(TokenKind.PUNCTUATION, ")")
        body = self._parse_block()
        return FunctionDefinition(
            location=location,
            name="main",
            return_type=DataType.INT,
            body=body,
        )

    def _parse_declaration(self) -> VariableDeclaration:
        """Parse `type a, b, c;` into a single declaration node."""
        type_token = self._expect(TokenKind.KEYWORD)
        name_tokens = [self._expect(TokenKind.ID)]
        while self._match(TokenKind.PUNCTUATION, ","):
            name_tokens.append(self._expect(TokenKind.ID))
        self._expect(TokenKind.PUNCTUATION, ";")
        return VariableDeclaration(
            location=type_token.location,
            data_type=TYPE_KEYWORDS[type_token.value],
            names=[t.value for t in name_tokens],
            name_locations=[t.location for t in name_tokens],
        )

    def _parse_assignment(self) -> AssignmentStatement:
        target = self._expect(TokenKind.ID)
        self._expect(TokenKind.OPERATOR, "=")
        value = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ";")
        return AssignmentStatement(location=target.location, target=target.value, value=value)

    def _parse_function_call(self) -> FunctionCall:
        name = self._expect(TokenKind.ID)
        self._expect(TokenKind.PUNCTUATION, "(")

        arguments = []
        if not self._check(TokenKind.PUNCTUATION, ")"):
            arguments.append(self._parse_expression())
            while self._match(TokenKind.PUNCTUATION, ","):
                arguments.append(self._parse_expression())

        self._expect(TokenKind.PUNCTUATION, ")")
        self._expect(TokenKind.PUNCTUATION, ";")
        return FunctionCall(location=name.location, name=name.value, arguments=arguments)

    def _parse_return(self) -> ReturnStatement:
        location = self._expect(TokenKind.KEYWORD, "return").location
        value = self._parse_expression()
        self._expect(TokenKind.PUNCTUATION, ";")
        return ReturnStatement(location=location, value=value)

    def _parse_block(self) -> BlockStatement:
        """Parse a block statement { ... }."""
        location = self._expect(TokenKind.PUNCTUATION, "{").location

        body = []
        while not self._at_end() and not self._check(TokenKind.PUNCTUATION, "}"):
            body.append(self._parse_statement())

        self._expect(TokenKind.PUNCTUATION, "}")
        return BlockStatement(location=location, body=body)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(self._parse_term, ADDITIVE_OPERATORS)

    def _parse_term(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(self._parse_factor, MULTIPLICATIVE_OPERATORS)

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[str, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of operator spelling to BinaryOperator
        """
        expr = operand_parser()

        while True:
            token = self._peek()
            if token is None or token.kind is not TokenKind.OPERATOR or token.value not in operators:
                return expr
            self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                location=expr.location,
                operator=operators[token.value],
                left=expr,
                right=right,
            )

    def _parse_factor(self) -> Expression:
        token = self._peek()
        if token is None:
            raise UnexpectedEndOfInputError("a factor", self._pos, self._end_location())

        if token.is_(TokenKind.PUNCTUATION, "&"):
            self._advance()
            name = self._expect(TokenKind.ID)
            return AddressOf(location=token.location, name=name.value)

        if token.kind is TokenKind.ID:
            self._advance()
            return Identifier(location=token.location, name=token.value)

        if token.kind is TokenKind.INT:
            self._advance()
            return IntegerLiteral(location=token.location, value=token.value)

        if token.kind is TokenKind.STRING:
            self._advance()
            return StringLiteral(location=token.location, value=token.value)

        if token.is_(TokenKind.PUNCTUATION, "("):
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenKind.PUNCTUATION, ")")
            return expr

        raise self._unexpected("a factor", token)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    tokens: list[Token],
    filename: str = "<input>",
    source_lines: Optional[list[str]] = None,
) -> Program:
    """
    Parse a token list into an AST.

    Args:
        tokens: Tokens from lex()
        filename: Source filename for error messages
        source_lines: Original source lines for error context

    Returns:
        The Program root node
    """
    return Parser(tokens, filename, source_lines).parse()
