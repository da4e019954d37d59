# =============================================================================
# test_optimizer.py - Constant Folding Tests
# =============================================================================
# Tests for the single-pass constant folder.
#
# These tests verify:
#   - Integer arithmetic is folded, division floors
#   - Division by zero is left alone and does not raise
#   - No propagation through folded temporaries
#   - The input list is never modified
#   - Statistics and the changed flag are tracked correctly
# =============================================================================

import logging

import pytest
from minicc.compiler.lexer import lex
from minicc.compiler.parser import parse
from minicc.compiler.irgen import lower
from minicc.compiler.optimizer import ConstantFolder, FoldStats, fold
from minicc.compiler.ast import BinaryOperator
from minicc.compiler.tac import (
    Assign,
    BinaryOp,
    Call,
    IntConstant,
    Temporary,
    Variable,
    format_tac,
)


def binary(op: BinaryOperator, left, right, dest: str = "t1") -> BinaryOp:
    """Helper building a BinaryOp on integer constants or operands."""
    if isinstance(left, int):
        left = IntConstant(left)
    if isinstance(right, int):
        right = IntConstant(right)
    return BinaryOp(op, Temporary(dest), left, right)


# =============================================================================
# Folding Rules
# =============================================================================

class TestFolding:
    """Tests for individual folds."""

    @pytest.mark.parametrize("op, left, right, expected", [
        (BinaryOperator.ADD, 2, 3, 5),
        (BinaryOperator.SUBTRACT, 2, 5, -3),
        (BinaryOperator.MULTIPLY, 6, 7, 42),
        (BinaryOperator.DIVIDE, 7, 2, 3),
        (BinaryOperator.DIVIDE, -7, 2, -4),
    ])
    def test_arithmetic(self, op, left, right, expected):
        optimized, changed = fold([binary(op, left, right)])
        assert changed
        assert optimized == [Assign(Temporary("t1"), IntConstant(expected))]

    def test_division_rounds_down(self):
        """Division floors toward negative infinity."""
        optimized, _ = fold([binary(BinaryOperator.DIVIDE, -1, 3)])
        assert optimized[0].source == IntConstant(-1)

    def test_variable_operand_not_folded(self):
        instr = binary(BinaryOperator.ADD, Variable("a"), 1)
        optimized, changed = fold([instr])
        assert optimized == [instr]
        assert not changed

    def test_other_instructions_pass_through(self):
        instructions = [Call("f", 0), Assign(Variable("a"), IntConstant(1))]
        optimized, changed = fold(instructions)
        assert optimized == instructions
        assert not changed

    def test_empty_list(self):
        assert fold([]) == ([], False)


# =============================================================================
# Division by Zero
# =============================================================================

class TestDivisionByZero:
    """Division by a literal zero is reported and left unfolded."""

    def test_left_unfolded(self):
        instr = binary(BinaryOperator.DIVIDE, 5, 0)
        optimized, changed = fold([instr])
        assert optimized == [instr]
        assert not changed

    def test_pass_continues(self):
        instructions = [
            binary(BinaryOperator.DIVIDE, 5, 0, "t1"),
            binary(BinaryOperator.ADD, 1, 1, "t2"),
        ]
        optimized, changed = fold(instructions)
        assert optimized[0] == instructions[0]
        assert optimized[1] == Assign(Temporary("t2"), IntConstant(2))
        assert changed

    def test_counted_and_logged(self, caplog):
        folder = ConstantFolder()
        with caplog.at_level(logging.WARNING, logger="minicc.compiler.optimizer"):
            folder.fold([binary(BinaryOperator.DIVIDE, 1, 0)])
        assert folder.stats.division_by_zero == 1
        assert folder.stats.folded == 0
        assert "division by zero" in caplog.text


# =============================================================================
# Whole-Program Folding
# =============================================================================

class TestPipelineFolding:
    """Tests on TAC produced from source."""

    def test_single_pass_does_not_propagate(self):
        tac = lower(parse(lex("int a; a = 2 + 3 * 4;")))
        optimized, changed = fold(tac)
        assert changed
        assert format_tac(optimized) == [
            "ALLOC int a",
            "t1 = 12",
            "t2 = 2 + t1",
            "a = t2",
        ]

    def test_fold_is_idempotent(self):
        tac = lower(parse(lex("int a; a = (1 + 2) * (3 + 4);")))
        once, _ = fold(tac)
        twice, changed = fold(once)
        assert twice == once
        assert not changed

    def test_input_not_mutated(self):
        tac = lower(parse(lex("int a; a = 6 / 3;")))
        snapshot = list(tac)
        optimized, _ = fold(tac)
        assert tac == snapshot
        assert optimized is not tac


# =============================================================================
# Statistics
# =============================================================================

class TestFoldStats:
    """Tests for FoldStats tracking."""

    def test_counts(self):
        folder = ConstantFolder()
        folder.fold([
            binary(BinaryOperator.ADD, 1, 2, "t1"),
            binary(BinaryOperator.MULTIPLY, 3, 4, "t2"),
            binary(BinaryOperator.DIVIDE, 1, 0, "t3"),
        ])
        assert folder.stats == FoldStats(folded=2, division_by_zero=1)

    def test_reset_between_runs(self):
        folder = ConstantFolder()
        folder.fold([binary(BinaryOperator.ADD, 1, 2)])
        folder.fold([])
        assert folder.stats.folded == 0
