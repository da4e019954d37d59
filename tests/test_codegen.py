# =============================================================================
# test_codegen.py - Virtual Assembly Emitter Tests
# =============================================================================
# Tests for lowering TAC to the virtual assembly listing.
#
# Test coverage includes:
#   - Banner and EXIT_MAIN framing
#   - Lowering of every instruction kind
#   - Virtual register assignment order
#   - Unknown instruction handling
# =============================================================================

from dataclasses import dataclass

import pytest
from minicc.compiler.codegen import CodeEmitter, emit, BANNER_START, BANNER_END
from minicc.compiler.context import CompilationContext
from minicc.compiler.errors import CodeGenError, Phase
from minicc.compiler.ast import BinaryOperator, DataType
from minicc.compiler.tac import (
    Instruction,
    Label,
    Comment,
    Alloc,
    Assign,
    BinaryOp,
    Param,
    Call,
    Return,
    IntConstant,
    StringConstant,
    Variable,
    Address,
    Temporary,
)


def body(instructions: list[Instruction]) -> list[str]:
    """Helper emitting without banners or the trailing EXIT_MAIN label."""
    lines = emit(instructions, emit_banner=False)
    assert lines[-1] == "EXIT_MAIN:"
    return lines[:-1]


# =============================================================================
# Listing Framing
# =============================================================================

class TestFraming:
    """Tests for banners and the exit label."""

    def test_empty_listing(self):
        assert emit([]) == [BANNER_START, "EXIT_MAIN:", BANNER_END]

    def test_no_banner(self):
        assert emit([], emit_banner=False) == ["EXIT_MAIN:"]

    def test_exit_label_emitted_once(self):
        lines = emit([Return(IntConstant(1)), Return(IntConstant(2))])
        assert lines.count("EXIT_MAIN:") == 1
        assert lines.count("JUMP EXIT_MAIN") == 2

    def test_banner_text(self):
        assert BANNER_START == "; --- VIRTUAL ASSEMBLY CODE START ---"
        assert BANNER_END == "; --- VIRTUAL ASSEMBLY CODE END ---"


# =============================================================================
# Instruction Lowering
# =============================================================================

class TestInstructions:
    """Tests for each instruction kind."""

    def test_label(self):
        assert body([Label("MAIN")]) == ["MAIN:"]

    def test_comment(self):
        assert body([Comment("Preprocessor: Include stdio.h")]) == [
            "; Preprocessor: Include stdio.h",
        ]

    def test_alloc(self):
        assert body([Alloc(DataType.DOUBLE, "x")]) == ["M_ALLOC x, SIZE(double)"]

    def test_assign_to_variable_stores(self):
        assert body([Assign(Variable("a"), IntConstant(7))]) == [
            "LOAD 7, a",
            "STORE a, a",
        ]

    def test_assign_to_temporary_loads_register(self):
        assert body([Assign(Temporary("t1"), IntConstant(12))]) == ["LOAD 12, R1"]

    def test_binary_with_constant_left(self):
        """The destination register is the working register."""
        instr = BinaryOp(BinaryOperator.MULTIPLY, Temporary("t1"), IntConstant(3), IntConstant(4))
        assert body([instr]) == [
            "LOAD 3, R1",
            "OP_* R1, 4",
            "MOV R1, R1",
        ]

    def test_binary_with_temporary_left(self):
        """A temporary left operand's register is the working register."""
        instructions = [
            Assign(Temporary("t1"), IntConstant(12)),
            BinaryOp(BinaryOperator.ADD, Temporary("t2"), Temporary("t1"), Variable("b")),
        ]
        assert body(instructions) == [
            "LOAD 12, R1",
            "LOAD R1, R1",
            "OP_+ R1, b",
            "MOV R1, R2",
        ]

    def test_param_and_call(self):
        instructions = [
            Param(StringConstant("%d\n")),
            Param(Address("a")),
            Call("printf", 2),
        ]
        assert body(instructions) == [
            'PUSH_ARG "%d\\n"',
            "PUSH_ARG &a",
            "CALL printf, 2",
        ]

    def test_return(self):
        assert body([Return(Variable("a"))]) == ["LOAD a, RET_REG", "JUMP EXIT_MAIN"]

    def test_unknown_instruction(self):
        @dataclass(frozen=True)
        class Nop(Instruction):
            pass

        with pytest.raises(CodeGenError) as exc_info:
            emit([Nop()])
        assert exc_info.value.phase is Phase.CODEGEN
        assert "Nop" in str(exc_info.value)


# =============================================================================
# Register Assignment
# =============================================================================

class TestRegisters:
    """Registers go to temporaries only, in first-encountered order."""

    def test_order_is_dest_left_right(self):
        context = CompilationContext()
        emit(
            [BinaryOp(BinaryOperator.SUBTRACT, Temporary("t3"), Temporary("t1"), Temporary("t2"))],
            context,
        )
        assert context.registers == {"t3": "R1", "t1": "R2", "t2": "R3"}

    def test_variables_never_get_registers(self):
        context = CompilationContext()
        emit([Assign(Variable("a"), Variable("b"))], context)
        assert context.registers == {}

    def test_register_stable_across_uses(self):
        instructions = [
            BinaryOp(BinaryOperator.ADD, Temporary("t1"), Variable("a"), IntConstant(1)),
            Param(Temporary("t1")),
            Return(Temporary("t1")),
        ]
        lines = body(instructions)
        assert lines[3] == "PUSH_ARG R1"
        assert lines[4] == "LOAD R1, RET_REG"

    def test_each_run_restarts_at_r1(self):
        context = CompilationContext()
        emitter = CodeEmitter(context, emit_banner=False)
        instructions = [Assign(Temporary("t9"), IntConstant(0))]
        assert emitter.generate(instructions) == emitter.generate(instructions)
        assert context.registers == {"t9": "R1"}
