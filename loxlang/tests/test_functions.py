"""
Tests for functions and closures in Lox
"""
import gc

from loxlang.errors import ErrorReporter
from loxlang.interpreter import Interpreter

from loxlang.tests.utils import output_lines, run_source


def test_call_and_return(capsys):
    """
    Test calls, return values and implicit nil.
    """
    source = (
        "fun add(a, b) { return a + b; }\n"
        "fun nothing() {}\n"
        "fun early() { return; print \"unreachable\"; }\n"
        "print add(1, 2);\n"
        "print nothing();\n"
        "print early();\n"
        "print add;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["3", "nil", "nil", "<fn add>"]


def test_recursion(capsys):
    """
    Test a recursive function.
    """
    source = (
        "fun fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); }\n"
        "print fib(15);\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["610"]


def test_return_inside_loop_unwinds_to_call(capsys):
    """
    Test that ``return`` from inside nested loops leaves the function.
    """
    source = (
        "fun find() {\n"
        "    for (var i = 0; i < 10; i = i + 1) {\n"
        "        while (true) { if (i == 3) return i; break; }\n"
        "    }\n"
        "    return -1;\n"
        "}\n"
        "print find();\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["3"]


def test_closure_counter(capsys):
    """
    Test that a returned closure keeps its captured variable alive.
    """
    source = (
        "fun makeCounter() {\n"
        "    var i = 0;\n"
        "    fun count() { i = i + 1; return i; }\n"
        "    return count;\n"
        "}\n"
        "var a = makeCounter();\n"
        "var b = makeCounter();\n"
        "print a();\n"
        "print a();\n"
        "print b();\n"
        "print a();\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["1", "2", "1", "3"]


def test_closures_from_same_call_share_state(capsys):
    """
    Test that two closures created by one call observe each other's writes.
    """
    source = (
        "var inc;\n"
        "var get;\n"
        "fun pair() {\n"
        "    var n = 0;\n"
        "    fun i() { n = n + 1; }\n"
        "    fun g() { return n; }\n"
        "    inc = i;\n"
        "    get = g;\n"
        "}\n"
        "pair();\n"
        "inc();\n"
        "inc();\n"
        "print get();\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["2"]


def test_closure_binds_at_declaration(capsys):
    """
    Test that a later shadowing declaration does not change a closure's binding.
    """
    source = (
        'var a = "global";\n'
        "{\n"
        "    fun showA() { print a; }\n"
        "    showA();\n"
        '    var a = "block";\n'
        "    showA();\n"
        "    print a;\n"
        "}\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["global", "global", "block"]


def test_call_errors(capsys):
    """
    Test calling non-callables and arity mismatches.
    """
    reporter = run_source('"text"();')
    assert reporter.had_runtime_error
    assert capsys.readouterr().err.strip().splitlines() == ["Can only call functions and classes.", "[line 1]"]

    run_source("fun f(a, b) {}\nf(1);")
    assert capsys.readouterr().err.strip().splitlines() == ["Expected 2 arguments but got 1.", "[line 2]"]


def test_stack_overflow_is_a_runtime_error(capsys):
    """
    Test that unbounded recursion is reported instead of crashing.
    """
    reporter = run_source("fun f() { f(); }\nf();")
    assert reporter.had_runtime_error
    assert capsys.readouterr().err.strip().splitlines() == ["Stack overflow.", "[line 1]"]


def test_interpreter_state_persists_across_batches(capsys):
    """
    Test that globals defined in one batch are visible in the next.
    """
    reporter = ErrorReporter()
    interpreter = Interpreter(reporter)
    run_source("var x = 40; fun add2(n) { return n + 2; }", interpreter)
    run_source("print add2(x);", interpreter)
    assert output_lines(capsys) == ["42"]


def test_print_to_custom_stream(tmp_path):
    """
    Test that program output can be redirected.
    """
    out = tmp_path / "out.txt"
    with out.open("w", encoding="utf-8") as stream:
        interpreter = Interpreter(ErrorReporter(), stdout=stream)
        run_source('print "redirected";', interpreter)
    assert out.read_text(encoding="utf-8") == "redirected\n"


def test_deep_recursion_is_not_a_stack_overflow(capsys):
    """
    Test that a thousand nested Lox calls run to completion.
    """
    source = (
        "fun count(n) { if (n > 0) return count(n - 1); return n; }\n"
        "print count(1000);\n"
        "fun sum(n) { if (n == 0) return 0; return n + sum(n - 1); }\n"
        "print sum(1500);\n"
    )
    reporter = run_source(source)
    captured = capsys.readouterr()
    assert not reporter.had_runtime_error
    assert captured.err == ""
    assert captured.out.strip().splitlines() == ["0", "1125750"]


def test_resolved_distances_are_released_with_their_code(capsys):
    """
    Test that scope data for finished batches does not accumulate.
    """
    reporter = ErrorReporter()
    interpreter = Interpreter(reporter)
    run_source("{ var a = 1; print a; }", interpreter)
    gc.collect()
    assert len(interpreter.locals) == 0

    run_source("fun twice(x) { return x * 2; }", interpreter)
    gc.collect()
    assert len(interpreter.locals) == 1
    run_source("print twice(21);", interpreter)
    assert output_lines(capsys) == ["1", "42"]
