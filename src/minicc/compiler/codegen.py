"""
Virtual Assembly Emitter
========================

Lowers TAC into a listing for an abstract register machine. The target
has unlimited virtual registers R1, R2, ... and a dedicated return
register RET_REG; declared variables live in memory under their own
names.

Register Assignment
-------------------
Only temporaries get registers. A temporary's register is assigned the
first time the emitter meets it (destination first, then left operand,
then right operand of a BinaryOp) and never changes for the rest of the
run. There is no allocation or spilling; the numbering simply follows
first appearance.

Instruction Lowering
--------------------
| TAC                | Assembly                                  |
|--------------------|-------------------------------------------|
| L:                 | L:                                        |
| // text            | ; text                                    |
| ALLOC type x       | M_ALLOC x, SIZE(type)                     |
| d = s              | LOAD s, loc(d)  (+ STORE loc(d), d)       |
| d = a op b         | LOAD a, W / OP_op W, b / MOV W, reg(d)    |
| PARAM s            | PUSH_ARG s                                |
| CALL f, n          | CALL f, n                                 |
| RETURN s           | LOAD s, RET_REG / JUMP EXIT_MAIN          |

``loc(d)`` is the register of a temporary or the name of a variable;
the STORE is only emitted for declared variables. ``W``, the working
register of a BinaryOp, is the left operand's register when the left
operand is a temporary, otherwise the destination's register.

The listing always ends with a single ``EXIT_MAIN:`` label, the target
of every RETURN jump, followed by the end banner when banners are on.

Example
-------
    ; --- VIRTUAL ASSEMBLY CODE START ---
    MAIN:
    LOAD 5, RET_REG
    JUMP EXIT_MAIN
    EXIT_MAIN:
    ; --- VIRTUAL ASSEMBLY CODE END ---
"""

import logging
from typing import Optional

from minicc.compiler.context import CompilationContext
from minicc.compiler.errors import CodeGenError
from minicc.compiler.tac import (
    Instruction,
    Operand,
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


BANNER_START = "; --- VIRTUAL ASSEMBLY CODE START ---"
BANNER_END = "; --- VIRTUAL ASSEMBLY CODE END ---"

EXIT_LABEL = "EXIT_MAIN"
RETURN_REGISTER = "RET_REG"


class CodeEmitter:
    """
    TAC to virtual assembly emitter.

    Usage:
        emitter = CodeEmitter(context)
        lines = emitter.generate(instructions)
    """

    def __init__(self, context: Optional[CompilationContext] = None, emit_banner: bool = True):
        self.context = context or CompilationContext()
        self.emit_banner = emit_banner
        self._output: list[str] = []

        self._handlers = {
            Label: self._emit_label,
            Comment: self._emit_comment,
            Alloc: self._emit_alloc,
            Assign: self._emit_assign,
            BinaryOp: self._emit_binary,
            Param: self._emit_param,
            Call: self._emit_call,
            Return: self._emit_return,
        }

    def generate(self, instructions: list[Instruction]) -> list[str]:
        """
        Emit the listing for an instruction list.

        The context's register map is reset first, so numbering starts at
        R1 for every run.

        Raises:
            CodeGenError: If an instruction kind has no lowering
        """
        self.context.reset_registers()
        self._output = []

        if self.emit_banner:
            self._emit(BANNER_START)

        for instruction in instructions:
            handler = self._handlers.get(type(instruction))
            if handler is None:
                raise CodeGenError(
                    f"cannot emit instruction of type {type(instruction).__name__}"
                )
            handler(instruction)

        self._emit(f"{EXIT_LABEL}:")
        if self.emit_banner:
            self._emit(BANNER_END)

        logger.debug(
            f"Emitted {len(self._output)} assembly lines using "
            f"{len(self.context.registers)} virtual registers"
        )
        return self._output

    # =========================================================================
    # Output Helpers
    # =========================================================================

    def _emit(self, line: str) -> None:
        self._output.append(line)

    def _location(self, operand: Operand) -> str:
        """Register for a temporary, otherwise the operand's own text."""
        if isinstance(operand, Temporary):
            return self.context.register_for(operand.name)
        return str(operand)

    # =========================================================================
    # Instruction Handlers
    # =========================================================================

    def _emit_label(self, instr: Label) -> None:
        self._emit(f"{instr.name}:")

    def _emit_comment(self, instr: Comment) -> None:
        self._emit(f"; {instr.text}")

    def _emit_alloc(self, instr: Alloc) -> None:
        self._emit(f"M_ALLOC {instr.dest}, SIZE({instr.data_type})")

    def _emit_assign(self, instr: Assign) -> None:
        dest = self._location(instr.dest)
        source = self._location(instr.source)
        self._emit(f"LOAD {source}, {dest}")
        if not isinstance(instr.dest, Temporary):
            self._emit(f"STORE {dest}, {instr.dest.name}")

    def _emit_binary(self, instr: BinaryOp) -> None:
        dest = self._location(instr.dest)
        left = self._location(instr.left)
        right = self._location(instr.right)

        working = left if isinstance(instr.left, Temporary) else dest

        self._emit(f"LOAD {left}, {working}")
        self._emit(f"OP_{instr.operator} {working}, {right}")
        self._emit(f"MOV {working}, {dest}")

    def _emit_param(self, instr: Param) -> None:
        self._emit(f"PUSH_ARG {self._location(instr.source)}")

    def _emit_call(self, instr: Call) -> None:
        self._emit(f"CALL {instr.name}, {instr.arg_count}")

    def _emit_return(self, instr: Return) -> None:
        self._emit(f"LOAD {self._location(instr.source)}, {RETURN_REGISTER}")
        self._emit(f"JUMP {EXIT_LABEL}")


def emit(
    instructions: list[Instruction],
    context: Optional[CompilationContext] = None,
    emit_banner: bool = True,
) -> list[str]:
    """
    Lower TAC to virtual assembly lines.

    Args:
        instructions: TAC list, optimized or not
        context: Run context holding the register map
        emit_banner: Surround the listing with start/end banner comments

    Returns:
        Assembly lines, one instruction per line
    """
    return CodeEmitter(context, emit_banner).generate(instructions)
