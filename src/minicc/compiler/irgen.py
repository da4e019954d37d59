"""
Intermediate Code Generator
===========================

Lowers a checked AST into a flat list of three-address instructions.

Expression Lowering
-------------------
Expressions lower to an Operand. Literals, identifiers and address-of
produce no instruction; a binary expression lowers its left side, then
its right side, then emits one BinaryOp into a fresh temporary and
returns that temporary. For ``2 + 3 * 4``:

    t1 = 3 * 4
    t2 = 2 + t1

Statement Lowering
------------------
| Statement           | Instructions                                 |
|---------------------|----------------------------------------------|
| FunctionDefinition  | Label(NAME), then the body                   |
| VariableDeclaration | one Alloc per name                           |
| AssignmentStatement | expression code, Assign                      |
| FunctionCall        | argument code, one Param per argument, Call  |
| ReturnStatement     | expression code, Return                      |
| IncludeDirective    | Comment("Preprocessor: Include <library>")   |
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
from minicc.compiler.tac import (
    Instruction,
    Operand,
    IntConstant,
    StringConstant,
    Variable,
    Address,
    Temporary,
    Label,
    Comment,
    Alloc,
    Assign,
    BinaryOp,
    Param,
    Call,
    Return,
)

logger = logging.getLogger(__name__)


class IRGenerator(ASTVisitor):
    """
    AST to TAC lowering.

    Statement visitors append to ``instructions`` and return None;
    expression visitors return the Operand holding their value.

    Usage:
        generator = IRGenerator(context)
        instructions = generator.generate(program)
    """

    def __init__(self, context: Optional[CompilationContext] = None):
        self.context = context or CompilationContext()
        self.instructions: list[Instruction] = []

    def generate(self, program: Program) -> list[Instruction]:
        """
        Lower a whole program.

        The context's temporary counter is reset, so temporaries are
        numbered from t1 in every run.
        """
        self.context.reset_temps()
        self.instructions = []
        self.visit(program)
        logger.debug(
            f"Generated {len(self.instructions)} TAC instructions, "
            f"{self.context.temp_counter} temporaries"
        )
        return self.instructions

    def _emit(self, instruction: Instruction) -> None:
        self.instructions.append(instruction)

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Program(self, node: Program):
        for stmt in node.body:
            self.visit(stmt)

    def visit_FunctionDefinition(self, node: FunctionDefinition):
        self._emit(Label(node.name.upper()))
        self.visit(node.body)

    def visit_BlockStatement(self, node: BlockStatement):
        for stmt in node.body:
            self.visit(stmt)

    def visit_IncludeDirective(self, node: IncludeDirective):
        self._emit(Comment(f"Preprocessor: Include {node.library}"))

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        for name in node.names:
            self._emit(Alloc(node.data_type, name))

    def visit_AssignmentStatement(self, node: AssignmentStatement):
        value = self.visit(node.value)
        self._emit(Assign(Variable(node.target), value))

    def visit_FunctionCall(self, node: FunctionCall):
        # All argument code first, so PARAMs are contiguous before the CALL
        values = [self.visit(argument) for argument in node.arguments]
        for value in values:
            self._emit(Param(value))
        self._emit(Call(node.name, len(values)))

    def visit_ReturnStatement(self, node: ReturnStatement):
        self._emit(Return(self.visit(node.value)))

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_BinaryExpression(self, node: BinaryExpression) -> Operand:
        left = self.visit(node.left)
        right = self.visit(node.right)
        dest = Temporary(self.context.new_temp())
        self._emit(BinaryOp(node.operator, dest, left, right))
        return dest

    def visit_AddressOf(self, node: AddressOf) -> Operand:
        return Address(node.name)

    def visit_Identifier(self, node: Identifier) -> Operand:
        return Variable(node.name)

    def visit_IntegerLiteral(self, node: IntegerLiteral) -> Operand:
        return IntConstant(node.value)

    def visit_StringLiteral(self, node: StringLiteral) -> Operand:
        return StringConstant(node.value)


def lower(program: Program, context: Optional[CompilationContext] = None) -> list[Instruction]:
    """
    Generate TAC for a checked program.

    Args:
        program: The AST root, already passed through semantic analysis
        context: Run context holding the temporary counter

    Returns:
        Instructions in execution order
    """
    return IRGenerator(context).generate(program)
