"""
Three-Address Code (TAC) Model
==============================

Operands and instructions passed from the IR generator through the
optimizer to the code emitter. Instruction order is execution order;
the language has no control flow, so there are no jump edges.

Operands
--------
| Class          | Renders as | Meaning                        |
|----------------|------------|--------------------------------|
| IntConstant    | 42         | integer literal                |
| StringConstant | "hi\\n"    | string literal                 |
| Variable       | total      | declared variable              |
| Address        | &total     | address of a declared variable |
| Temporary      | t3         | compiler temporary             |

Instructions
------------
| Class    | Renders as                      |
|----------|---------------------------------|
| Label    | MAIN:                           |
| Comment  | // Preprocessor: Include stdio.h|
| Alloc    | ALLOC int a                     |
| Assign   | a = t2                          |
| BinaryOp | t1 = 3 * 4                      |
| Param    | PARAM a                         |
| Call     | CALL printf, 2                  |
| Return   | RETURN 5                        |
"""

from dataclasses import dataclass
from typing import Union

from minicc.compiler.ast import BinaryOperator, DataType, quote_string


# =============================================================================
# Operands
# =============================================================================

class Operand:
    """Base class for instruction operands."""

    def to_dict(self) -> dict:
        raise NotImplementedError


@dataclass(frozen=True)
class IntConstant(Operand):
    value: int

    def __str__(self) -> str:
        return str(self.value)

    def to_dict(self) -> dict:
        return {"kind": "int", "value": self.value}


@dataclass(frozen=True)
class StringConstant(Operand):
    value: str

    def __str__(self) -> str:
        return quote_string(self.value)

    def to_dict(self) -> dict:
        return {"kind": "string", "value": self.value}


@dataclass(frozen=True)
class Variable(Operand):
    """A declared variable; keeps its source name as its storage location."""
    name: str

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> dict:
        return {"kind": "variable", "value": self.name}


@dataclass(frozen=True)
class Address(Operand):
    """Address of a declared variable, `&name`."""
    name: str

    def __str__(self) -> str:
        return f"&{self.name}"

    def to_dict(self) -> dict:
        return {"kind": "address", "value": str(self)}


@dataclass(frozen=True)
class Temporary(Operand):
    """Compiler-generated temporary t<N>, written exactly once."""
    name: str

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> dict:
        return {"kind": "temporary", "value": self.name}


# Assignment and arithmetic destinations
Destination = Union[Variable, Temporary]


# =============================================================================
# Instructions
# =============================================================================

class Instruction:
    """Base class for TAC instructions."""

    op: str = ""

    def to_dict(self) -> dict:
        raise NotImplementedError


@dataclass(frozen=True)
class Label(Instruction):
    name: str
    op = "LABEL"

    def __str__(self) -> str:
        return f"{self.name}:"

    def to_dict(self) -> dict:
        return {"op": self.op, "name": self.name}


@dataclass(frozen=True)
class Comment(Instruction):
    text: str
    op = "COMMENT"

    def __str__(self) -> str:
        return f"// {self.text}"

    def to_dict(self) -> dict:
        return {"op": self.op, "text": self.text}


@dataclass(frozen=True)
class Alloc(Instruction):
    data_type: DataType
    dest: str
    op = "ALLOC"

    def __str__(self) -> str:
        return f"ALLOC {self.data_type} {self.dest}"

    def to_dict(self) -> dict:
        return {"op": self.op, "type": self.data_type.value, "dest": self.dest}


@dataclass(frozen=True)
class Assign(Instruction):
    dest: Destination
    source: Operand
    op = "ASSIGN"

    def __str__(self) -> str:
        return f"{self.dest} = {self.source}"

    def to_dict(self) -> dict:
        return {"op": self.op, "dest": self.dest.to_dict(), "source": self.source.to_dict()}


@dataclass(frozen=True)
class BinaryOp(Instruction):
    operator: BinaryOperator
    dest: Temporary
    left: Operand
    right: Operand
    op = "BINARY"

    def __str__(self) -> str:
        return f"{self.dest} = {self.left} {self.operator} {self.right}"

    def to_dict(self) -> dict:
        return {
            "op": self.operator.value,
            "dest": self.dest.to_dict(),
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class Param(Instruction):
    source: Operand
    op = "PARAM"

    def __str__(self) -> str:
        return f"PARAM {self.source}"

    def to_dict(self) -> dict:
        return {"op": self.op, "source": self.source.to_dict()}


@dataclass(frozen=True)
class Call(Instruction):
    name: str
    arg_count: int
    op = "CALL"

    def __str__(self) -> str:
        return f"CALL {self.name}, {self.arg_count}"

    def to_dict(self) -> dict:
        return {"op": self.op, "name": self.name, "arg_count": self.arg_count}


@dataclass(frozen=True)
class Return(Instruction):
    source: Operand
    op = "RETURN"

    def __str__(self) -> str:
        return f"RETURN {self.source}"

    def to_dict(self) -> dict:
        return {"op": self.op, "source": self.source.to_dict()}


def format_tac(instructions: list[Instruction]) -> list[str]:
    """Render an instruction list as one text line per instruction."""
    return [str(instruction) for instruction in instructions]
