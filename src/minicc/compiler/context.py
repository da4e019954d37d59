"""
Per-Run Compilation Context
===========================

All mutable state one compilation run needs lives here: the symbol
table, the temporary-name counter and the virtual register map. A fresh
context is created for every run and threaded through the phases, so
independent runs never share counters or tables.
"""

from dataclasses import dataclass, field
from typing import Optional

from minicc.compiler.symbols import SymbolTable


@dataclass
class CompilationContext:
    """
    State shared across the phases of a single compilation run.

    Attributes:
        filename: Source filename used in diagnostics
        source_lines: Source text split into lines, for error context
        symbols: Symbol table filled by semantic analysis
        temp_counter: Number of temporaries issued so far
        registers: Temporary name -> virtual register name
    """
    filename: str = "<input>"
    source_lines: list[str] = field(default_factory=list)
    symbols: SymbolTable = field(default_factory=SymbolTable)
    temp_counter: int = 0
    registers: dict[str, str] = field(default_factory=dict)

    def source_line(self, line: int) -> Optional[str]:
        """Return the text of a 1-indexed source line, if known."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def reset_symbols(self) -> SymbolTable:
        """Start semantic analysis over with an empty table."""
        self.symbols = SymbolTable()
        return self.symbols

    def reset_temps(self) -> None:
        self.temp_counter = 0

    def new_temp(self) -> str:
        """Return the next temporary name, t1, t2, ..."""
        self.temp_counter += 1
        return f"t{self.temp_counter}"

    def reset_registers(self) -> None:
        self.registers = {}

    def register_for(self, temp: str) -> str:
        """Return the register for temp, assigning the next R<N> on first use."""
        if temp not in self.registers:
            self.registers[temp] = f"R{len(self.registers) + 1}"
        return self.registers[temp]
