"""
mcc - minicc Compiler Command-Line Interface
============================================

This module implements the command-line interface for the compiler.
By default it writes the virtual assembly listing next to the source
file; the dump flags print intermediate phase output instead.

Usage Examples
--------------
Basic compilation:
    $ mcc demo.c

With output file:
    $ mcc demo.c -o demo.vasm

Inspect phases:
    $ mcc demo.c --tokens --ast --symbols --tac

Machine-readable output of every phase:
    $ mcc demo.c --json

Verbose mode:
    $ mcc -v demo.c
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click

from minicc import __version__
from minicc.compiler import Compiler, CompilerOptions, CompilationResult, ASTPrinter
from minicc.compiler.tac import format_tac
from minicc.cli.errors import ExitCode, handle_cli_exception

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _echo_section(title: str, lines: list[str]) -> None:
    click.echo(f"== {title} ==")
    for line in lines:
        click.echo(line)
    click.echo()


def _dump_phases(
    result: CompilationResult,
    tokens: bool,
    ast: bool,
    symbols: bool,
    tac: bool,
    optimize: bool,
) -> None:
    """Print the requested phase outputs in pipeline order."""
    if tokens:
        _echo_section("Tokens", [repr(token) for token in result.tokens])

    if ast and result.ast is not None:
        _echo_section("AST", ASTPrinter().print(result.ast).splitlines())

    if symbols and result.symbols is not None:
        _echo_section(
            "Symbols",
            [f"{s.name}: {s.data_type}" for s in result.symbols],
        )

    if tac:
        _echo_section("TAC", format_tac(result.tac))
        if optimize:
            _echo_section(
                f"Optimized TAC (changed: {result.changed})",
                format_tac(result.optimized_tac),
            )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: SOURCE.vasm)",
)
@click.option("--tokens", is_flag=True, help="Print the token list")
@click.option("--ast", is_flag=True, help="Print the AST")
@click.option("--symbols", is_flag=True, help="Print the symbol table")
@click.option("--tac", is_flag=True, help="Print TAC before and after folding")
@click.option(
    "--no-optimize",
    is_flag=True,
    help="Skip the constant folding pass",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print every phase result as JSON",
)
@click.option(
    "--no-banner",
    is_flag=True,
    help="Omit the start/end banner comments from the listing",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="mcc")
def main(
    source: Path,
    output: Optional[Path],
    tokens: bool,
    ast: bool,
    symbols: bool,
    tac: bool,
    no_optimize: bool,
    as_json: bool,
    no_banner: bool,
    verbose: bool,
) -> None:
    """
    Compile a minicc source file to virtual assembly.

    SOURCE is the source file to compile.

    \b
    Examples:
        mcc demo.c                  # Outputs demo.vasm
        mcc demo.c -o out.vasm      # Specify output file
        mcc demo.c --tac            # Show TAC, no file written
        mcc demo.c --json           # All phases as JSON
    """
    setup_logging(verbose)

    options = CompilerOptions(
        filename=str(source),
        optimize=not no_optimize,
        emit_banner=not no_banner,
    )

    try:
        logger.debug(f"Compiling {source}")
        result = Compiler(options).compile_file(str(source))

        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
            if not result.success:
                raise SystemExit(ExitCode.COMPILE_ERROR)
            return

        dumping = tokens or ast or symbols or tac
        if dumping:
            _dump_phases(result, tokens, ast, symbols, tac, options.optimize)

        if result.error is not None:
            handle_cli_exception(result.error, verbose)

        if dumping:
            return

        if output is None:
            output = source.with_suffix(".vasm")
        output.write_text(result.assembly_text)

        if verbose:
            click.echo(f"Wrote {len(result.assembly)} lines to {output}")
            click.echo(f"Tokenized: {len(result.tokens)} tokens")
            click.echo(f"Declared: {len(result.symbols)} variables")

        click.echo(f"Compiled {source} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
