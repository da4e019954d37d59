"""
minicc - Teaching Compiler for a Minimal C-like Language
========================================================

This package translates a small C-like language into a listing for a
virtual register machine, keeping every intermediate result available
for inspection.

Main Components
---------------
- **compiler**: the six-phase pipeline
    lexer, parser, semantic analyzer, TAC generator, constant folder and
    virtual assembly emitter, driven by ``Compiler``

- **cli**: command-line front end (mcc)
    Compiles a source file and dumps any phase's output

Quick Start
-----------
    >>> from minicc import Compiler
    >>> result = Compiler().compile("int a; a = 2 + 3 * 4;")
    >>> [str(i) for i in result.optimized_tac]
    ['ALLOC int a', 't1 = 12', 't2 = 2 + t1', 'a = t2']

Or use the command-line tool:
    $ mcc demo.c --tac
    $ mcc demo.c -o demo.vasm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from minicc.errors import MiniCError, SourceLocation
from minicc.compiler import (
    Compiler,
    CompilerOptions,
    CompilationResult,
    compile_source,
)

__all__ = [
    # Version info
    "__version__",
    # Errors
    "MiniCError",
    "SourceLocation",
    # Compiler
    "Compiler",
    "CompilerOptions",
    "CompilationResult",
    "compile_source",
]
