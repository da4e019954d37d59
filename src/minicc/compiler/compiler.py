"""
Compiler Driver
===============

This module provides the main compiler interface. It runs the complete
pipeline over a fresh CompilationContext:

    Source → Lex → Parse → Analyze → Lower → Fold → Emit → Assembly

Usage
-----
Programmatic:
    >>> from minicc.compiler import Compiler
    >>> result = Compiler().compile("int main() { return 5; }")
    >>> result.success
    True
    >>> result.assembly[1:4]
    ['MAIN:', 'LOAD 5, RET_REG', 'JUMP EXIT_MAIN']

Command line:
    $ mcc hello.c -o hello.vasm

Error Handling
--------------
Every phase fails fast. ``Compiler.compile()`` never raises for a
source error: it stops at the first CompilerError and returns a
CompilationResult carrying the outputs of the phases that completed plus
the error. ``Compiler.compile_source()`` and the module-level
``compile_source()`` raise the error instead, for callers that prefer
exceptions.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from minicc.compiler.ast import Program
from minicc.compiler.codegen import CodeEmitter
from minicc.compiler.context import CompilationContext
from minicc.compiler.errors import CompilerError
from minicc.compiler.irgen import IRGenerator
from minicc.compiler.lexer import Lexer, Token
from minicc.compiler.optimizer import ConstantFolder, FoldStats
from minicc.compiler.parser import Parser
from minicc.compiler.semantic import SemanticAnalyzer
from minicc.compiler.symbols import SymbolTable
from minicc.compiler.tac import Instruction

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        filename: Source name used in diagnostics
        optimize: Run the constant folding pass. When False the
                  optimized TAC is the unoptimized TAC, unchanged.
        emit_banner: Surround the assembly listing with start/end banner
                     comments
    """
    filename: str = "<input>"
    optimize: bool = True
    emit_banner: bool = True


@dataclass
class CompilationResult:
    """
    Outputs of one compilation run.

    Fields of phases that did not run are left at their defaults. On
    failure ``error`` holds the single phase-tagged error and
    ``success`` is False.

    Attributes:
        filename: Source filename
        tokens: Lexer output
        ast: Parser output
        symbols: Symbol table from semantic analysis
        tac: Instructions from the IR generator
        optimized_tac: Instructions after constant folding
        changed: True if folding changed anything
        fold_stats: Folding counters
        assembly: Virtual assembly lines
        error: The error that stopped the run, if any
    """
    filename: str = "<input>"
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Program] = None
    symbols: Optional[SymbolTable] = None
    tac: list[Instruction] = field(default_factory=list)
    optimized_tac: list[Instruction] = field(default_factory=list)
    changed: bool = False
    fold_stats: Optional[FoldStats] = None
    assembly: list[str] = field(default_factory=list)
    error: Optional[CompilerError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def assembly_text(self) -> str:
        """The listing as a single newline-terminated string."""
        if not self.assembly:
            return ""
        return "\n".join(self.assembly) + "\n"

    def to_dict(self) -> dict:
        """
        Render the result as JSON-compatible plain data.

        Tokens, the AST, instructions and the symbol table all become
        nested lists and dicts; see ASTNode.to_dict and Instruction.to_dict.
        """
        return {
            "filename": self.filename,
            "success": self.success,
            "tokens": [
                {
                    "type": token.kind.value,
                    "value": token.value,
                    "line": token.line,
                    "column": token.column,
                }
                for token in self.tokens
            ],
            "ast": self.ast.to_dict() if self.ast is not None else None,
            "symbols": self.symbols.to_dict() if self.symbols is not None else None,
            "tac": [instr.to_dict() for instr in self.tac],
            "optimized_tac": [instr.to_dict() for instr in self.optimized_tac],
            "changed": self.changed,
            "assembly": list(self.assembly),
            "error": self._error_dict(),
        }

    def _error_dict(self) -> Optional[dict]:
        if self.error is None:
            return None
        location = self.error.location
        return {
            "phase": self.error.phase.value if self.error.phase else None,
            "type": type(self.error).__name__,
            "message": self.error.message,
            "line": location.line if location else None,
            "column": location.column if location else None,
            "hint": self.error.hint,
        }


class Compiler:
    """
    Pipeline driver.

    Each call to compile() builds a new CompilationContext, so one
    Compiler can be reused for any number of independent runs.

    Example:
        compiler = Compiler(CompilerOptions(optimize=False))
        result = compiler.compile(source)
        print("\\n".join(result.assembly))

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile(self, source: str, filename: Optional[str] = None) -> CompilationResult:
        """
        Run every phase over source.

        Args:
            source: Source code string
            filename: Overrides options.filename for this run

        Returns:
            CompilationResult; check ``success`` / ``error``
        """
        filename = filename or self.options.filename
        context = CompilationContext(filename=filename, source_lines=source.splitlines())
        result = CompilationResult(filename=filename)

        try:
            self._run(source, context, result)
        except CompilerError as e:
            logger.debug(f"Compilation of {filename} stopped: {e.message}")
            result.error = e

        return result

    def compile_source(self, source: str, filename: Optional[str] = None) -> CompilationResult:
        """
        Like compile(), but raise the first error instead of returning it.

        Raises:
            CompilerError: If any phase fails
        """
        result = self.compile(source, filename)
        if result.error is not None:
            raise result.error
        return result

    def compile_file(self, filepath: str) -> CompilationResult:
        """
        Compile a source file.

        Raises:
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile(source, str(path))

    def _run(self, source: str, context: CompilationContext, result: CompilationResult) -> None:
        """Run the phases in order, filling result as each one completes."""
        # Stage 1: Lexical analysis
        result.tokens = list(Lexer(source, context.filename).tokenize())

        # Stage 2: Parsing
        result.ast = Parser(result.tokens, context.filename, context.source_lines).parse()

        # Stage 3: Semantic analysis
        result.symbols = SemanticAnalyzer(context).analyze(result.ast)

        # Stage 4: Intermediate code
        result.tac = IRGenerator(context).generate(result.ast)

        # Stage 5: Constant folding
        if self.options.optimize:
            folder = ConstantFolder()
            result.optimized_tac, result.changed = folder.fold(result.tac)
            result.fold_stats = folder.stats
        else:
            result.optimized_tac = list(result.tac)

        # Stage 6: Virtual assembly
        emitter = CodeEmitter(context, emit_banner=self.options.emit_banner)
        result.assembly = emitter.generate(result.optimized_tac)

        logger.debug(
            f"Compiled {context.filename}: {len(result.tokens)} tokens, "
            f"{len(result.tac)} TAC instructions, {len(result.assembly)} assembly lines"
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> CompilationResult:
    """
    Compile source text, raising on the first error.

    Args:
        source: Source code string
        filename: Source filename for error messages
        options: Compiler configuration (defaults if None)

    Returns:
        CompilationResult of a successful run

    Raises:
        CompilerError: If any phase fails
    """
    return Compiler(options).compile_source(source, filename)
