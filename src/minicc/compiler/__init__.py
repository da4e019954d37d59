"""
minicc Compiler Pipeline
========================

Pipeline
--------
    Source → Lexer → Parser → Semantic Analyzer → IR Generator
           → Constant Folder → Code Emitter → Virtual Assembly

Each phase is a class with a module-level convenience function:

| Module    | Class            | Function                       |
|-----------|------------------|--------------------------------|
| lexer     | Lexer            | lex(source)                    |
| parser    | Parser           | parse(tokens)                  |
| semantic  | SemanticAnalyzer | analyze(program, context)      |
| irgen     | IRGenerator      | lower(program, context)        |
| optimizer | ConstantFolder   | fold(instructions)             |
| codegen   | CodeEmitter      | emit(instructions, context)    |

Per-run state (symbol table, temporary counter, register map) lives on a
CompilationContext passed between phases; nothing is kept at module
level.

Language Subset
---------------
- Types: int, double (declared only; no floating-point arithmetic)
- Statements: declarations, assignment, calls, return, blocks,
  ``#include <name.ext>`` and a single ``int main()``
- Expressions: + - * / with parentheses, identifiers, integer and string
  literals, address-of

Not supported:
- Control flow (if, loops)
- User-defined functions or parameters
- Scopes: every declaration shares one table
"""

from minicc.compiler.compiler import (
    Compiler,
    CompilerOptions,
    CompilationResult,
    compile_source,
)
from minicc.compiler.context import CompilationContext
from minicc.compiler.errors import (
    Phase,
    UsageContext,
    CompilerError,
    LexicalError,
    UnterminatedStringError,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
    SemanticError,
    RedeclarationError,
    UndeclaredIdentifierError,
    FoldError,
    CodeGenError,
)
from minicc.compiler.lexer import Lexer, Token, TokenKind, lex
from minicc.compiler.parser import Parser, parse
from minicc.compiler.semantic import SemanticAnalyzer, analyze
from minicc.compiler.symbols import Symbol, SymbolTable
from minicc.compiler.irgen import IRGenerator, lower
from minicc.compiler.optimizer import ConstantFolder, FoldStats, fold
from minicc.compiler.codegen import CodeEmitter, emit
from minicc.compiler.ast import ASTPrinter, DataType, BinaryOperator

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilationResult",
    "CompilationContext",
    "compile_source",
    # Errors
    "Phase",
    "UsageContext",
    "CompilerError",
    "LexicalError",
    "UnterminatedStringError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "SemanticError",
    "RedeclarationError",
    "UndeclaredIdentifierError",
    "FoldError",
    "CodeGenError",
    # Phases
    "Lexer",
    "Token",
    "TokenKind",
    "lex",
    "Parser",
    "parse",
    "SemanticAnalyzer",
    "analyze",
    "Symbol",
    "SymbolTable",
    "IRGenerator",
    "lower",
    "ConstantFolder",
    "FoldStats",
    "fold",
    "CodeEmitter",
    "emit",
    # AST helpers
    "ASTPrinter",
    "DataType",
    "BinaryOperator",
]
