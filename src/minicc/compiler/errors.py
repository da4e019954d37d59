"""
Compiler Error Hierarchy
========================

This module defines the exception hierarchy for the compiler pipeline.
Every exception is tagged with the phase that raised it so the driver
can report a single, phase-tagged failure.

Exception Hierarchy
-------------------
CompilerError (base for all pipeline errors, carries .phase)
├── LexicalError - scanner failures
│   └── UnterminatedStringError - missing closing quote
├── ParseError - syntax failures
│   ├── UnexpectedTokenError - token does not match the grammar
│   └── UnexpectedEndOfInputError - token stream ran out
├── SemanticError - declaration checking failures
│   ├── RedeclarationError - identifier declared twice
│   └── UndeclaredIdentifierError - identifier used before declaration
├── FoldError - constant folding failure (recovered inside the optimizer)
└── CodeGenError - emitter met an instruction it cannot lower

Propagation
-----------
Lexical, parse and semantic errors abort the compilation run at their
first occurrence. FoldError never leaves the optimizer: the folder
catches it and keeps the instruction unfolded.
"""

from enum import Enum
from typing import Optional, List

from minicc.errors import MiniCError, SourceLocation


# =============================================================================
# Phase Tags
# =============================================================================

class Phase(Enum):
    """Pipeline phase that produced an error."""
    LEXICAL = "lexical"
    SYNTAX = "syntax"
    SEMANTIC = "semantic"
    IR = "ir"
    OPTIMIZATION = "optimization"
    CODEGEN = "codegen"


class UsageContext(Enum):
    """Where an undeclared identifier was referenced."""
    ASSIGNMENT_TARGET = "assignment target"
    EXPRESSION = "expression usage"
    ADDRESS_OF = "address-of operator"


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompilerError(MiniCError):
    """
    Base exception for all compiler pipeline errors.

    Subclasses set ``phase`` so that callers can tell which stage of the
    pipeline failed without inspecting the concrete type.
    """
    phase: Optional[Phase] = None


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(CompilerError):
    """Scanner failure that aborts lexical analysis."""
    phase = Phase.LEXICAL


class UnterminatedStringError(LexicalError):
    """
    Unterminated string literal.

    Raised when the end of the input is reached before the closing
    double quote of a string literal.

    Example:
        greet("hello);
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unclosed string literal",
            location=location,
            hint="add closing '\"' to complete the string",
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class ParseError(CompilerError):
    """Syntax failure that aborts parsing."""
    phase = Phase.SYNTAX


class UnexpectedTokenError(ParseError):
    """
    Token does not match the grammar.

    Attributes:
        expected: Description of what the grammar required
        found: Description of the token actually present
        index: Position of the offending token in the token list
    """

    def __init__(
        self,
        expected: str,
        found: str,
        index: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        self.index = index
        super().__init__(
            f"expected {expected}, but found {found} at token {index}",
            location=location,
            source_line=source_line,
        )


class UnexpectedEndOfInputError(ParseError):
    """
    Token stream ended while the grammar still required a token.

    Attributes:
        expected: Description of what the grammar required
        index: Cursor position (equal to the number of tokens)
    """

    def __init__(
        self,
        expected: str,
        index: int,
        location: Optional[SourceLocation] = None,
    ):
        self.expected = expected
        self.index = index
        super().__init__(
            f"unexpected end of input, expected {expected}",
            location=location,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class SemanticError(CompilerError):
    """Declaration checking failure that aborts semantic analysis."""
    phase = Phase.SEMANTIC


class RedeclarationError(SemanticError):
    """
    Identifier declared more than once.

    The language has a single flat scope, so any second declaration of a
    name is an error regardless of the block it appears in.
    """

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{identifier}' was first declared at {original_location}"

        super().__init__(
            f"variable '{identifier}' re-declared",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndeclaredIdentifierError(SemanticError):
    """
    Identifier referenced before its declaration.

    The message names the usage context (assignment target, expression
    usage or address-of operand). When similarly-named identifiers are
    already declared they are offered as a hint.
    """

    def __init__(
        self,
        identifier: str,
        usage: UsageContext,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_identifiers: Optional[List[str]] = None,
    ):
        self.identifier = identifier
        self.usage = usage
        self.similar_identifiers = similar_identifiers or []

        hint = None
        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"variable '{identifier}' used before declaration ({usage.value})",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Optimizer and Code Generation Errors
# =============================================================================

class FoldError(CompilerError):
    """
    Constant folding could not evaluate an instruction.

    Only raised for division by a literal zero. The optimizer recovers
    from it locally by leaving the instruction unfolded.
    """
    phase = Phase.OPTIMIZATION


class CodeGenError(CompilerError):
    """Code emitter received an instruction it does not know how to lower."""
    phase = Phase.CODEGEN
