"""
Compiler Pipeline Test Suite
============================

End-to-end tests for the compiler driver: every phase run in order
over one CompilationContext, the result object, and error reporting.

Test Organization
-----------------
- TestCompile: successful runs and phase outputs
- TestCompileErrors: failures captured on the result
- TestCompileSource: raising entry points
- TestResultDict: plain-data rendering
"""

import json

import pytest
from minicc import Compiler, CompilerOptions, CompilationResult, compile_source
from minicc.compiler.errors import (
    Phase,
    RedeclarationError,
    UndeclaredIdentifierError,
    UnexpectedTokenError,
    UnterminatedStringError,
)


DEMO_SOURCE = """\
#include <stdio.h>

int main() {
    int a, b;
    a = 2 + 3 * 4;
    b = a / 0;
    printf("%d\\n", &a);
    return a;
}
"""


# =============================================================================
# Successful Compilation
# =============================================================================

class TestCompile:
    """Tests for complete runs."""

    def test_return_constant(self):
        result = Compiler().compile("int main() { return 5; }")
        assert result.success
        assert result.assembly == [
            "; --- VIRTUAL ASSEMBLY CODE START ---",
            "MAIN:",
            "LOAD 5, RET_REG",
            "JUMP EXIT_MAIN",
            "EXIT_MAIN:",
            "; --- VIRTUAL ASSEMBLY CODE END ---",
        ]

    def test_demo_program(self):
        result = Compiler().compile(DEMO_SOURCE, "demo.c")
        assert result.success
        assert result.filename == "demo.c"
        assert [s.name for s in result.symbols] == ["a", "b"]
        assert [str(i) for i in result.tac] == [
            "// Preprocessor: Include stdio.h",
            "MAIN:",
            "ALLOC int a",
            "ALLOC int b",
            "t1 = 3 * 4",
            "t2 = 2 + t1",
            "a = t2",
            "t3 = a / 0",
            "b = t3",
            'PARAM "%d\\n"',
            "PARAM &a",
            "CALL printf, 2",
            "RETURN a",
        ]
        assert result.changed
        assert str(result.optimized_tac[4]) == "t1 = 12"
        assert str(result.optimized_tac[7]) == "t3 = a / 0"
        assert result.fold_stats.folded == 1

    def test_demo_assembly(self):
        result = Compiler(CompilerOptions(emit_banner=False)).compile(DEMO_SOURCE)
        assert result.assembly == [
            "; Preprocessor: Include stdio.h",
            "MAIN:",
            "M_ALLOC a, SIZE(int)",
            "M_ALLOC b, SIZE(int)",
            "LOAD 12, R1",
            "LOAD 2, R2",
            "OP_+ R2, R1",
            "MOV R2, R2",
            "LOAD R2, a",
            "STORE a, a",
            "LOAD a, R3",
            "OP_/ R3, 0",
            "MOV R3, R3",
            "LOAD R3, b",
            "STORE b, b",
            'PUSH_ARG "%d\\n"',
            "PUSH_ARG &a",
            "CALL printf, 2",
            "LOAD a, RET_REG",
            "JUMP EXIT_MAIN",
            "EXIT_MAIN:",
        ]

    def test_no_optimize(self):
        result = Compiler(CompilerOptions(optimize=False)).compile("int a; a = 1 + 1;")
        assert result.optimized_tac == result.tac
        assert not result.changed
        assert result.fold_stats is None
        assert "LOAD 1, R1" in result.assembly

    def test_runs_are_independent(self):
        compiler = Compiler()
        first = compiler.compile("int a; a = 1 + 2;")
        second = compiler.compile("int a; a = 1 + 2;")
        assert first.assembly == second.assembly
        assert first.tac == second.tac

    def test_assembly_text(self):
        result = Compiler(CompilerOptions(emit_banner=False)).compile("")
        assert result.assembly_text == "EXIT_MAIN:\n"

    def test_compile_file(self, tmp_path):
        source_file = tmp_path / "prog.c"
        source_file.write_text("int main() { return 1; }")
        result = Compiler().compile_file(str(source_file))
        assert result.success
        assert result.filename == str(source_file)

    def test_compile_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Compiler().compile_file(str(tmp_path / "missing.c"))


# =============================================================================
# Errors on the Result
# =============================================================================

class TestCompileErrors:
    """compile() returns failures instead of raising."""

    def test_lexical_error(self):
        result = Compiler().compile('printf("never closed);')
        assert not result.success
        assert isinstance(result.error, UnterminatedStringError)
        assert result.error.phase is Phase.LEXICAL
        assert result.tokens == []

    def test_syntax_error_keeps_tokens(self):
        result = Compiler().compile("int a")
        assert result.error.phase is Phase.SYNTAX
        assert len(result.tokens) == 2
        assert result.ast is None

    def test_semantic_error_keeps_ast(self):
        result = Compiler().compile("int a; int a;")
        assert isinstance(result.error, RedeclarationError)
        assert result.ast is not None
        assert result.symbols is None
        assert result.tac == []
        assert result.assembly == []

    def test_use_before_declaration(self):
        result = Compiler().compile("int main() { x = 1; }")
        assert isinstance(result.error, UndeclaredIdentifierError)
        assert result.error.identifier == "x"

    def test_division_by_zero_is_not_an_error(self):
        result = Compiler().compile("int a; a = 1 / 0;")
        assert result.success
        assert result.fold_stats.division_by_zero == 1


# =============================================================================
# Raising Entry Points
# =============================================================================

class TestCompileSource:
    """compile_source() raises the first error."""

    def test_success(self):
        result = compile_source("int a;")
        assert isinstance(result, CompilationResult)
        assert result.assembly[1] == "M_ALLOC a, SIZE(int)"

    def test_raises_phase_error(self):
        with pytest.raises(UnexpectedTokenError):
            compile_source("int = 1;")

    def test_method_raises(self):
        with pytest.raises(UndeclaredIdentifierError):
            Compiler().compile_source("y = 2;", "prog.c")


# =============================================================================
# Plain-Data Rendering
# =============================================================================

class TestResultDict:
    """to_dict() output for presentation layers."""

    def test_success_dict(self):
        data = Compiler().compile("int a; a = 2 * 3;").to_dict()
        assert data["success"] is True
        assert data["error"] is None
        assert data["tokens"][0] == {"type": "KEYWORD", "value": "int", "line": 1, "column": 1}
        assert data["symbols"] == {"a": {"type": "int", "declared": True}}
        assert data["changed"] is True

    def test_tac_is_structured(self):
        """Instructions are dicts keyed by op, not rendered text."""
        data = Compiler().compile("int a; a = 2 * 3;").to_dict()
        t1 = {"kind": "temporary", "value": "t1"}
        assert data["tac"] == [
            {"op": "ALLOC", "type": "int", "dest": "a"},
            {
                "op": "*",
                "dest": t1,
                "left": {"kind": "int", "value": 2},
                "right": {"kind": "int", "value": 3},
            },
            {"op": "ASSIGN", "dest": {"kind": "variable", "value": "a"}, "source": t1},
        ]
        assert data["optimized_tac"][1] == {
            "op": "ASSIGN",
            "dest": t1,
            "source": {"kind": "int", "value": 6},
        }

    def test_ast_is_structured(self):
        data = Compiler().compile("int a; a = 2 * 3;").to_dict()
        ast = data["ast"]
        assert (ast["node"], ast["line"], ast["column"]) == ("Program", 1, 1)
        decl, assignment = ast["body"]
        assert decl["node"] == "VariableDeclaration"
        assert decl["data_type"] == "int"
        assert decl["names"] == ["a"]
        assert decl["name_locations"] == [{"line": 1, "column": 5}]
        assert assignment["target"] == "a"
        assert assignment["value"]["node"] == "BinaryExpression"
        assert assignment["value"]["operator"] == "*"
        assert assignment["value"]["left"]["value"] == 2

    def test_failed_parse_has_no_ast(self):
        data = Compiler().compile("int 5;").to_dict()
        assert data["ast"] is None
        assert data["tac"] == []

    def test_dict_is_json_serializable(self):
        data = Compiler().compile(DEMO_SOURCE).to_dict()
        assert json.loads(json.dumps(data)) == data

    def test_error_dict(self):
        data = Compiler().compile("int a;\nb = 1;", "e.c").to_dict()
        assert data["success"] is False
        assert data["error"]["phase"] == "semantic"
        assert data["error"]["type"] == "UndeclaredIdentifierError"
        assert data["error"]["line"] == 2
        assert data["error"]["column"] == 1
        assert data["assembly"] == []
