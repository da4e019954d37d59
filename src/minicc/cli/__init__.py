"""
minicc Command-Line Interface
=============================

This package provides the command-line tool for minicc:

- **mcc**: compile a source file to virtual assembly, or dump the
  output of any pipeline phase

The tool is implemented as a Click-based CLI application with help and
error reporting shared through ``minicc.cli.errors``.
"""

__all__ = ["mcc"]
