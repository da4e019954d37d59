"""
Symbol Table
============

Flat, insertion-ordered table of declared variables. The language has
a single scope: blocks and the entry function share one table, and a
name may be declared only once per compilation run.
"""

import difflib
from dataclasses import dataclass
from typing import Iterator, Optional

from minicc.errors import SourceLocation
from minicc.compiler.ast import DataType


@dataclass
class Symbol:
    """
    Information about a declared variable.

    Attributes:
        name: Variable name
        data_type: Declared scalar type
        declared: Always True once the symbol is in a table
        location: Where the declaration appears
    """
    name: str
    data_type: DataType
    declared: bool = True
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Mapping from identifier name to its Symbol.

    The table only grows; entries are never removed or replaced. Callers
    check ``name in table`` before ``declare`` to report redeclarations.
    """

    def __init__(self):
        self._symbols: dict[str, Symbol] = {}

    def declare(
        self,
        name: str,
        data_type: DataType,
        location: Optional[SourceLocation] = None,
    ) -> Symbol:
        """
        Insert a new symbol.

        Raises:
            KeyError: If the name is already declared
        """
        if name in self._symbols:
            raise KeyError(name)
        symbol = Symbol(name=name, data_type=data_type, location=location)
        self._symbols[name] = symbol
        return symbol

    def lookup(self, name: str) -> Optional[Symbol]:
        """Return the symbol for name, or None if undeclared."""
        return self._symbols.get(name)

    def similar(self, name: str, limit: int = 3) -> list[str]:
        """Declared names close to name, best match first (for hints)."""
        return difflib.get_close_matches(name, list(self._symbols), n=limit)

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        names = ", ".join(f"{s.name}: {s.data_type}" for s in self)
        return f"SymbolTable({names})"

    def to_dict(self) -> dict[str, dict]:
        """Plain-data view: name -> {"type": ..., "declared": ...}."""
        return {
            s.name: {"type": s.data_type.value, "declared": s.declared}
            for s in self
        }
