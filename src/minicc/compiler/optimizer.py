"""
Constant Folding Optimizer
==========================

Single forward pass over a TAC list that replaces arithmetic on two
integer constants with a plain assignment of the result:

    t1 = 3 * 4      →      t1 = 12

Rules
-----
- Only BinaryOp instructions whose left and right operands are both
  IntConstant are candidates. Every other instruction passes through
  unchanged.
- ``+ - *`` are exact; ``/`` is floor division.
- Division by a literal zero is not folded. The instruction is kept as
  written, a warning is logged and the pass continues.
- There is no constant propagation. A temporary that was just folded to
  a constant is still a temporary when a later instruction reads it, so
  ``t2 = 2 + t1`` survives the pass that folds ``t1``.

The input list is never mutated; a new list is returned together with
a ``changed`` flag that is True when at least one instruction was folded.
Folding an already folded list returns an equal list and ``changed=False``.

Usage
-----
>>> from minicc.compiler.optimizer import fold
>>> optimized, changed = fold(instructions)
"""

import logging
import operator
from dataclasses import dataclass
from typing import Callable

from minicc.compiler.ast import BinaryOperator
from minicc.compiler.errors import FoldError
from minicc.compiler.tac import Instruction, BinaryOp, Assign, IntConstant

logger = logging.getLogger(__name__)


def _floor_divide(left: int, right: int) -> int:
    if right == 0:
        raise FoldError(f"division by zero in {left} / {right}")
    return left // right


EVALUATORS: dict[BinaryOperator, Callable[[int, int], int]] = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUBTRACT: operator.sub,
    BinaryOperator.MULTIPLY: operator.mul,
    BinaryOperator.DIVIDE: _floor_divide,
}


# =============================================================================
# Folding Statistics
# =============================================================================

@dataclass
class FoldStats:
    """
    Statistics about one folding pass.

    Attributes:
        folded: Count of BinaryOp instructions replaced by an Assign
        division_by_zero: Count of divisions left unfolded because the
            divisor was a literal zero
    """
    folded: int = 0
    division_by_zero: int = 0

    def __str__(self) -> str:
        return f"folded={self.folded}, division_by_zero={self.division_by_zero}"


# =============================================================================
# Constant Folder
# =============================================================================

class ConstantFolder:
    """
    Peephole constant folder.

    Attributes:
        stats: Statistics for the most recent fold() call
    """

    def __init__(self):
        self.stats = FoldStats()

    def fold(self, instructions: list[Instruction]) -> tuple[list[Instruction], bool]:
        """
        Run one folding pass.

        Args:
            instructions: TAC list (left untouched)

        Returns:
            (optimized list, whether anything was folded)
        """
        self.stats = FoldStats()
        optimized = [self._fold_instruction(instr) for instr in instructions]

        logger.debug(f"Constant folding: {self.stats}")
        return optimized, self.stats.folded > 0

    def _fold_instruction(self, instr: Instruction) -> Instruction:
        if not isinstance(instr, BinaryOp):
            return instr
        if not (isinstance(instr.left, IntConstant) and isinstance(instr.right, IntConstant)):
            return instr

        evaluate = EVALUATORS[instr.operator]
        try:
            result = evaluate(instr.left.value, instr.right.value)
        except FoldError as e:
            self.stats.division_by_zero += 1
            logger.warning(f"Not folding '{instr}': {e.message}")
            return instr

        self.stats.folded += 1
        logger.debug(f"Folded '{instr}' to {result}")
        return Assign(instr.dest, IntConstant(result))


def fold(instructions: list[Instruction]) -> tuple[list[Instruction], bool]:
    """Fold constant arithmetic in one pass; returns (optimized, changed)."""
    return ConstantFolder().fold(instructions)
