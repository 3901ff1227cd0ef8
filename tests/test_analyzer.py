"""Tests for the MiniLang semantic analyzer."""

import pytest

from analyzer import SemanticAnalyzer, SemanticError
from ast_nodes import Program, VarDecl, FuncDecl, Param, ExprStmt, CallExpr, IntLiteral
from diagnostics import DiagnosticCollector, ErrorKind
from parser import parse


def analyze(source: str, legacy: bool = False):
    collector = DiagnosticCollector()
    program = parse(source, collector)
    assert program is not None
    return SemanticAnalyzer(legacy_call_reset=legacy).analyze(program, collector)


def kinds(source: str, legacy: bool = False) -> list:
    return [d.kind for d in analyze(source, legacy).diagnostics]


def count(source: str, kind: ErrorKind) -> int:
    return kinds(source).count(kind)


# --- Global declarations ---

class TestGlobalVariables:
    def test_duplicate_global(self):
        src = '''
            int total;
            int total;
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.DUPLICATE_GLOBAL_VARIABLE]
        assert "'total'" in result.diagnostics[0].message
        assert result.diagnostics[0].line == 3

    def test_duplicate_global_different_types(self):
        src = '''
            int total;
            string total;
        '''
        assert count(src, ErrorKind.DUPLICATE_GLOBAL_VARIABLE) == 1

    def test_three_declarations_two_reports(self):
        src = "int a; int a; int a;"
        assert count(src, ErrorKind.DUPLICATE_GLOBAL_VARIABLE) == 2

    def test_distinct_globals(self):
        assert kinds("int a; float b; string c;") == []

    def test_type_checked_even_when_duplicate(self):
        src = '''
            int x = 1;
            int x = "s";
        '''
        assert kinds(src) == [ErrorKind.DUPLICATE_GLOBAL_VARIABLE, ErrorKind.TYPE_MISMATCH]

    def test_locals_are_not_globals(self):
        src = '''
            int x;
            void f() { int x; }
        '''
        assert kinds(src) == []


class TestFunctionSignatures:
    def test_same_signature(self):
        src = '''
            int f(int a) { return a; }
            int f(int b) { return b; }
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.DUPLICATE_FUNCTION_SIGNATURE]
        assert "f(int)" in result.diagnostics[0].message
        assert result.diagnostics[0].line == 3

    def test_overload_by_param_types(self):
        src = '''
            int f(int a) { return a; }
            int f(float a) { return 1; }
            int f(int a, int b) { return a; }
        '''
        assert count(src, ErrorKind.DUPLICATE_FUNCTION_SIGNATURE) == 0

    def test_return_type_not_part_of_signature(self):
        src = '''
            int g() { return 1; }
            float g() { return 1.0; }
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.DUPLICATE_FUNCTION_SIGNATURE]
        assert "g()" in result.diagnostics[0].message

    def test_signatures_reported_before_globals(self):
        src = '''
            int x;
            int x;
            int f() { return 1; }
            int f() { return 2; }
        '''
        assert kinds(src) == [
            ErrorKind.DUPLICATE_FUNCTION_SIGNATURE,
            ErrorKind.DUPLICATE_GLOBAL_VARIABLE,
        ]


# --- Function bodies ---

class TestFunctionBodies:
    def test_parameter_shadowing(self):
        src = '''
            int add(int a, int b) {
                int a;
            }
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.PARAMETER_SHADOWING]
        diag = result.diagnostics[0]
        assert diag.line == 3
        assert "'add'" in diag.message and "'a'" in diag.message

    def test_duplicate_local(self):
        src = '''
            void f() {
                int x;
                int x = 2;
            }
        '''
        assert kinds(src) == [ErrorKind.DUPLICATE_LOCAL_VARIABLE]

    def test_shadowing_and_duplicate_both_fire(self):
        src = '''
            void f(int a) {
                int a;
                int a;
            }
        '''
        assert kinds(src) == [
            ErrorKind.PARAMETER_SHADOWING,
            ErrorKind.PARAMETER_SHADOWING,
            ErrorKind.DUPLICATE_LOCAL_VARIABLE,
        ]

    def test_nested_blocks_not_descended(self):
        src = '''
            void f(int a) {
                if (a > 0) {
                    int a;
                    int a;
                }
                while (a < 3) { int a; }
                { int a; }
            }
        '''
        assert kinds(src) == []

    def test_locals_are_per_function(self):
        src = '''
            void f() { int x; }
            void g() { int x; }
        '''
        assert kinds(src) == []

    def test_local_initializer_not_type_checked(self):
        assert kinds('void f() { int x = "abc"; }') == []

    def test_function_scopes_returned(self):
        result = analyze("int add(int a, int b) { int c; }")
        scope = result.function_scopes[0]
        assert scope.function_name == "add"
        assert scope.params == {"a", "b"}
        assert scope.locals == {"c"}


# --- Literal types ---

class TestTypeCompatibility:
    @pytest.mark.parametrize("src", [
        'int x = 42;',
        'int x = -7;',
        'float f = 1.5;',
        'float f = 3;',
        'double d = 2.5e10;',
        'string s = "hi";',
        'string s = "";',
    ])
    def test_compatible(self, src):
        assert kinds(src) == []

    @pytest.mark.parametrize("src", [
        'int x = "abc";',
        'int x = 4.2;',
        'float f = "1.0";',
        'string s = hi;',
        'string s = 5;',
        'bool b = true;',
        'char c = 1;',
        'int x = 1 + 2;',
        'int x = (5);',
    ])
    def test_mismatch(self, src):
        assert kinds(src) == [ErrorKind.TYPE_MISMATCH]

    def test_message_names_type_and_text(self):
        diag = analyze('int x = "abc";').diagnostics[0]
        assert "'int'" in diag.message
        assert '"abc"' in diag.message

    def test_uninitialized_not_checked(self):
        assert kinds("bool flag;") == []


# --- Call resolution ---

class TestCallResolution:
    def test_undefined_call(self):
        result = analyze("foo();")
        assert [d.kind for d in result.diagnostics] == [ErrorKind.UNDEFINED_FUNCTION_CALL]
        assert "'foo'" in result.diagnostics[0].message
        assert result.halted_at is result.diagnostics[0]

    def test_declared_later_is_resolved(self):
        src = '''
            void main() { helper(); }
            void helper() { }
        '''
        assert kinds(src) == []

    def test_name_only_resolution(self):
        src = '''
            int sq(int x) { return x * x; }
            void main() { sq(1, 2, 3); }
        '''
        assert kinds(src) == []

    def test_calls_in_nested_blocks(self):
        src = '''
            void main() {
                while (true) {
                    if (true) { bar(); } else { baz(); }
                }
            }
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.UNDEFINED_FUNCTION_CALL]
        assert "'bar'" in result.diagnostics[0].message
        assert result.diagnostics[0].line == 4

    @pytest.mark.parametrize("stmt, name", [
        ("int a = f1();", "f1"),
        ("a = f2();", "f2"),
        ("return f3();", "f3"),
        ("if (f4()) { }", "f4"),
        ("while (f5()) { }", "f5"),
        ("{ f6(); }", "f6"),
    ])
    def test_statement_sites(self, stmt, name):
        result = analyze("void main() { %s }" % stmt)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.UNDEFINED_FUNCTION_CALL]
        assert f"'{name}'" in result.diagnostics[0].message

    def test_deeper_calls_not_inspected(self):
        src = '''
            void main() {
                int a = 1 + hidden();
                show(nested());
                (wrapped());
            }
            void show(int x) { }
        '''
        assert kinds(src) == []

    def test_additive_keeps_earlier_diagnostics(self):
        src = '''
            int total;
            int total;
            foo();
            int v = "x";
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [
            ErrorKind.DUPLICATE_GLOBAL_VARIABLE,
            ErrorKind.TYPE_MISMATCH,
            ErrorKind.UNDEFINED_FUNCTION_CALL,
        ]
        assert result.halted_at.kind is ErrorKind.UNDEFINED_FUNCTION_CALL

    def test_later_functions_not_analyzed(self):
        src = '''
            int total;
            int total;
            foo();
            void f(int a) { int a; }
            bar();
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [
            ErrorKind.DUPLICATE_GLOBAL_VARIABLE,
            ErrorKind.UNDEFINED_FUNCTION_CALL,
        ]
        assert result.halted_at is result.diagnostics[-1]
        assert "'foo'" in result.halted_at.message
        assert result.function_scopes == []

    def test_rest_of_function_skipped(self):
        src = '''
            void main() {
                foo();
                bar();
            }
            void g(int a) { int a; }
        '''
        result = analyze(src)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.UNDEFINED_FUNCTION_CALL]
        assert [s.function_name for s in result.function_scopes] == ["main"]


class TestLegacyCallReset:
    def test_only_undefined_call_survives(self):
        src = '''
            int total;
            int total;
            foo();
        '''
        result = analyze(src, legacy=True)
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].kind is ErrorKind.UNDEFINED_FUNCTION_CALL
        assert "'foo'" in result.diagnostics[0].message

    def test_stops_after_first_undefined_call(self):
        src = '''
            foo();
            bar();
            void f(int a) { int a; }
        '''
        result = analyze(src, legacy=True)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.UNDEFINED_FUNCTION_CALL]
        assert "'foo'" in result.diagnostics[0].message

    def test_front_end_errors_are_cleared_too(self):
        collector = DiagnosticCollector()
        program = parse("int x = 1 @; foo();", collector)
        assert ErrorKind.LEXICAL in [d.kind for d in collector.all()]
        result = SemanticAnalyzer(legacy_call_reset=True).analyze(program, collector)
        assert [d.kind for d in result.diagnostics] == [ErrorKind.UNDEFINED_FUNCTION_CALL]

    def test_no_undefined_call_is_not_reset(self):
        assert kinds("int a; int a;", legacy=True) == [ErrorKind.DUPLICATE_GLOBAL_VARIABLE]


# --- Whole runs ---

class TestRuns:
    def test_idempotent(self):
        src = '''
            int total;
            int total;
            int f(int a) { int a; int a; }
            int f(int b) { return g(); }
            string s = hi;
        '''
        program = parse(src, DiagnosticCollector())
        first = SemanticAnalyzer().analyze(program)
        second = SemanticAnalyzer().analyze(program)
        assert first.diagnostics == second.diagnostics
        assert [str(d) for d in first.diagnostics] == [str(d) for d in second.diagnostics]

    def test_clean_program(self):
        src = '''
            int counter = 0;
            string greeting = "hello";

            int fact(int n) {
                if (n <= 1) { return 1; }
                return n * fact(n - 1);
            }

            void main() {
                int r = fact(5);
                counter = r;
            }

            main();
        '''
        assert kinds(src) == []

    def test_hand_built_tree(self):
        program = Program([
            VarDecl("int", "x", IntLiteral(1, line=1, text="1"), line=1),
            VarDecl("int", "x", None, line=2),
            FuncDecl("void", "f", [Param("int", "p")], [VarDecl("int", "p", None, line=4)], line=3),
            ExprStmt(CallExpr("missing", [], line=5), line=5),
        ])
        result = SemanticAnalyzer().analyze(program)
        assert [(d.kind, d.line) for d in result.diagnostics] == [
            (ErrorKind.DUPLICATE_GLOBAL_VARIABLE, 2),
            (ErrorKind.PARAMETER_SHADOWING, 4),
            (ErrorKind.UNDEFINED_FUNCTION_CALL, 5),
        ]

    def test_unknown_node_kind_raises(self):
        class Mystery:
            pass

        with pytest.raises(SemanticError):
            SemanticAnalyzer().analyze(Program([Mystery()]))

    def test_global_scope_contents(self):
        result = analyze('''
            int a;
            int f(int x, float y) { }
        ''')
        assert result.global_scope.variables == {"a"}
        assert result.global_scope.signatures == {"f(int, float)"}
        assert result.global_scope.has_function_named("f")
