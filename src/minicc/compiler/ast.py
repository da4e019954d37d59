"""
Abstract Syntax Tree (AST) Definitions
======================================

This module defines the AST node types built by the parser and read by
the semantic analyzer and the IR generator.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node, the top-level statement list
├── Statements
│   ├── FunctionDefinition - the single entry function `int main()`
│   ├── BlockStatement - compound statement { ... }
│   ├── IncludeDirective - #include <name.ext>
│   ├── VariableDeclaration - one type, one or more names
│   ├── AssignmentStatement - name = expression;
│   ├── FunctionCall - statement-level call name(args);
│   └── ReturnStatement - return expression;
└── Expressions
    ├── BinaryExpression - + - * /
    ├── AddressOf - &name
    ├── Identifier - variable reference
    ├── IntegerLiteral - decimal integer constant
    └── StringLiteral - string constant

Design Notes
------------
- All nodes are dataclasses, so structurally identical trees compare equal
- Each node stores its source location for error reporting
- The tree is built once by the parser and never mutated afterwards
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional

from minicc.errors import SourceLocation


# =============================================================================
# Type Tags and Operators
# =============================================================================

class DataType(Enum):
    """The two declarable scalar types."""
    INT = "int"
    DOUBLE = "double"

    def __str__(self) -> str:
        return self.value


class BinaryOperator(Enum):
    """Arithmetic operators, valued by their source spelling."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.location.line}:{self.location.column}"

    def to_dict(self) -> dict:
        """
        Plain-data form of this subtree.

        Each node becomes {"node": class name, "line", "column", <fields>};
        enums become their source spelling and child nodes nest.
        """
        data = {
            "node": self.__class__.__name__,
            "line": self.location.line,
            "column": self.location.column,
        }
        for f in fields(self):
            if f.name != "location":
                data[f.name] = _plain(getattr(self, f.name))
        return data


def _plain(value: Any) -> Any:
    if isinstance(value, ASTNode):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, SourceLocation):
        return {"line": value.line, "column": value.column}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


@dataclass
class Expression(ASTNode):
    """Base class for nodes that evaluate to a value."""
    pass


@dataclass
class Statement(ASTNode):
    """Base class for nodes that appear in a statement list."""
    pass


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass
class Program(ASTNode):
    """
    Root node of the AST.

    Attributes:
        body: Top-level statements in source order
    """
    body: list[Statement] = field(default_factory=list)


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class BlockStatement(Statement):
    """
    Compound statement enclosed in braces.

    Blocks do not open a new scope; every declaration shares one table.

    Attributes:
        body: Statements in the block
    """
    body: list[Statement] = field(default_factory=list)


@dataclass
class FunctionDefinition(Statement):
    """
    The entry function definition `int main() { ... }`.

    Attributes:
        name: Function name (always "main")
        return_type: Declared return type
        body: The function body
    """
    name: str = "main"
    return_type: DataType = DataType.INT
    body: BlockStatement = None


@dataclass
class IncludeDirective(Statement):
    """
    Preprocessor include, `#include <stdio.h>`.

    Attributes:
        library: Library name in `name.ext` form
    """
    library: str = ""


@dataclass
class VariableDeclaration(Statement):
    """
    Variable declaration sharing one type, `int a, b, c;`.

    Attributes:
        data_type: The declared type
        names: Declared identifiers in source order
        name_locations: Location of each identifier, parallel to names
    """
    data_type: DataType = DataType.INT
    names: list[str] = field(default_factory=list)
    name_locations: list[SourceLocation] = field(default_factory=list)

    def name_location(self, index: int) -> SourceLocation:
        """Location of names[index], falling back to the declaration."""
        if index < len(self.name_locations):
            return self.name_locations[index]
        return self.location


@dataclass
class AssignmentStatement(Statement):
    """
    Assignment, `target = value;`.

    Attributes:
        target: Name of the assigned variable
        value: Right-hand side expression
    """
    target: str = ""
    value: Expression = None


@dataclass
class FunctionCall(Statement):
    """
    Statement-level call, `name(arg, ...);`.

    Attributes:
        name: Callee name
        arguments: Positional argument expressions
    """
    name: str = ""
    arguments: list[Expression] = field(default_factory=list)


@dataclass
class ReturnStatement(Statement):
    """
    Return statement.

    Attributes:
        value: Returned expression
    """
    value: Expression = None


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class BinaryExpression(Expression):
    """
    Binary arithmetic (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None


@dataclass
class AddressOf(Expression):
    """
    Address-of a variable, `&name`.

    Attributes:
        name: The referenced variable
    """
    name: str = ""


@dataclass
class Identifier(Expression):
    """
    Variable reference.

    Attributes:
        name: The variable name
    """
    name: str = ""


@dataclass
class IntegerLiteral(Expression):
    """
    Integer constant.

    Attributes:
        value: The integer value
    """
    value: int = 0


@dataclass
class StringLiteral(Expression):
    """
    String constant.

    Attributes:
        value: The decoded string value
    """
    value: str = ""


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches ``visit(node)`` to ``visit_<ClassName>``. Node kinds a
    subclass does not handle fall through to ``generic_visit``, which
    raises so that a missing case is caught immediately instead of being
    silently skipped.

    Usage:
        class MyVisitor(ASTVisitor):
            def visit_Identifier(self, node):
                ...

        MyVisitor().visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> Any:
        raise NotImplementedError(
            f"{self.__class__.__name__} does not handle {node.__class__.__name__}"
        )


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _children(self, statements: list[Statement]) -> None:
        self.indent_level += 1
        for stmt in statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._children(node.body)

    def visit_FunctionDefinition(self, node: FunctionDefinition):
        self._emit(f"FunctionDef: {node.return_type} {node.name}()")
        self._children([node.body])

    def visit_BlockStatement(self, node: BlockStatement):
        self._emit("Block")
        self._children(node.body)

    def visit_IncludeDirective(self, node: IncludeDirective):
        self._emit(f"Directive: #include <{node.library}>")

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        self._emit(f"Declaration: {node.data_type} {', '.join(node.names)}")

    def visit_AssignmentStatement(self, node: AssignmentStatement):
        self._emit(f"Assignment: {node.target} = {self._expr_str(node.value)}")

    def visit_FunctionCall(self, node: FunctionCall):
        args = ", ".join(self._expr_str(a) for a in node.arguments)
        self._emit(f"Call: {node.name}({args})")

    def visit_ReturnStatement(self, node: ReturnStatement):
        self._emit(f"Return {self._expr_str(node.value)}")

    def _expr_str(self, expr: Optional[Expression]) -> str:
        """Convert an expression to a fully parenthesized string."""
        if expr is None:
            return ""
        if isinstance(expr, IntegerLiteral):
            return str(expr.value)
        if isinstance(expr, StringLiteral):
            return quote_string(expr.value)
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, AddressOf):
            return f"&{expr.name}"
        if isinstance(expr, BinaryExpression):
            return f"({self._expr_str(expr.left)} {expr.operator} {self._expr_str(expr.right)})"
        return f"<{type(expr).__name__}>"


def quote_string(value: str) -> str:
    """Render a decoded string back to its quoted, escaped source form."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'
