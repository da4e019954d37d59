"""
Semantic Analyzer
=================

Walks the AST depth-first, pre-order, in statement order and fills the
symbol table. Order matters: a declaration must textually precede every
use of its name.

Rules
-----
- VariableDeclaration inserts each name; a second declaration of any
  name is a RedeclarationError.
- AssignmentStatement requires its target to be declared, then checks
  the right-hand side.
- Identifier and AddressOf operands must be declared.
- FunctionCall arguments and Return values are checked as expressions.
  Callee names are not checked.
- No type compatibility checks are made between int and double.
"""

import logging
from typing import Optional

from minicc.compiler.ast import (
    ASTVisitor,
    Program,
    FunctionDefinition,
    BlockStatement,
    IncludeDirective,
    VariableDeclaration,
    AssignmentStatement,
    FunctionCall,
    ReturnStatement,
    BinaryExpression,
    AddressOf,
    Identifier,
    IntegerLiteral,
    StringLiteral,
)
from minicc.compiler.context import CompilationContext
from minicc.compiler.errors import (
    RedeclarationError,
    UndeclaredIdentifierError,
    UsageContext,
)
from minicc.compiler.symbols import SymbolTable
from minicc.errors import SourceLocation

logger = logging.getLogger(__name__)


class SemanticAnalyzer(ASTVisitor):
    """
    Declaration-before-use and redeclaration checker.

    Usage:
        context = CompilationContext()
        table = SemanticAnalyzer(context).analyze(program)
    """

    def __init__(self, context: Optional[CompilationContext] = None):
        self.context = context or CompilationContext()

    @property
    def symbols(self) -> SymbolTable:
        return self.context.symbols

    def analyze(self, program: Program) -> SymbolTable:
        """
        Check the program and return the populated symbol table.

        The context's table is reset first, so re-running on the same
        context starts from scratch.

        Raises:
            SemanticError: On the first redeclaration or undeclared use
        """
        self.context.reset_symbols()
        self.visit(program)
        logger.debug(f"Semantic analysis declared {len(self.symbols)} symbols")
        return self.symbols

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Program(self, node: Program):
        for stmt in node.body:
            self.visit(stmt)

    def visit_FunctionDefinition(self, node: FunctionDefinition):
        self.visit(node.body)

    def visit_BlockStatement(self, node: BlockStatement):
        for stmt in node.body:
            self.visit(stmt)

    def visit_IncludeDirective(self, node: IncludeDirective):
        pass

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        for index, name in enumerate(node.names):
            location = node.name_location(index)
            existing = self.symbols.lookup(name)
            if existing is not None:
                raise RedeclarationError(
                    name,
                    location=location,
                    original_location=existing.location,
                    source_line=self.context.source_line(location.line),
                )
            self.symbols.declare(name, node.data_type, location)

    def visit_AssignmentStatement(self, node: AssignmentStatement):
        self._require(node.target, UsageContext.ASSIGNMENT_TARGET, node.location)
        self.visit(node.value)

    def visit_FunctionCall(self, node: FunctionCall):
        for argument in node.arguments:
            self.visit(argument)

    def visit_ReturnStatement(self, node: ReturnStatement):
        self.visit(node.value)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_BinaryExpression(self, node: BinaryExpression):
        self.visit(node.left)
        self.visit(node.right)

    def visit_Identifier(self, node: Identifier):
        self._require(node.name, UsageContext.EXPRESSION, node.location)

    def visit_AddressOf(self, node: AddressOf):
        self._require(node.name, UsageContext.ADDRESS_OF, node.location)

    def visit_IntegerLiteral(self, node: IntegerLiteral):
        pass

    def visit_StringLiteral(self, node: StringLiteral):
        pass

    def _require(self, name: str, usage: UsageContext, location: SourceLocation) -> None:
        if name not in self.symbols:
            raise UndeclaredIdentifierError(
                name,
                usage,
                location=location,
                source_line=self.context.source_line(location.line),
                similar_identifiers=self.symbols.similar(name),
            )


def analyze(program: Program, context: Optional[CompilationContext] = None) -> SymbolTable:
    """
    Run semantic analysis on a parsed program.

    Args:
        program: The AST root
        context: Run context whose table is (re)filled; a fresh one if None

    Returns:
        The populated SymbolTable
    """
    return SemanticAnalyzer(context).analyze(program)
