"""
Tests for expression evaluation in Lox
"""
from loxlang.tests.utils import output_lines, run_source


def test_arithmetic_and_number_formatting(capsys):
    """
    Test arithmetic operators and how numbers are printed.
    """
    source = (
        "print 1 + 2;\n"
        "print 10 / 4;\n"
        "print 2 * 3 - 1;\n"
        "print -(3);\n"
        "print 1 / 3;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["3", "2.5", "5", "-3", "0.3333333333333333"]


def test_plus_concatenates_when_either_side_is_a_string(capsys):
    """
    Test string concatenation and stringification of the other operand.
    """
    source = (
        'print 1 + "2";\n'
        'print "2" + 1;\n'
        'print "a" + "b";\n'
        'print "is " + true;\n'
        'print "x" + nil;\n'
    )
    run_source(source)
    assert output_lines(capsys) == ["12", "21", "ab", "is true", "xnil"]


def test_division_by_zero_is_a_runtime_error(capsys):
    """
    Test that dividing by zero fails instead of producing infinity.
    """
    reporter = run_source('print "before";\nprint 1 / 0;\nprint "after";')
    captured = capsys.readouterr()
    assert captured.out.strip().splitlines() == ["before"]
    assert captured.err.strip().splitlines() == ["Division by zero.", "[line 2]"]
    assert reporter.had_runtime_error
    assert not reporter.had_error


def test_operand_type_errors(capsys):
    """
    Test the messages for operands of the wrong type.
    """
    cases = {
        'print -"a";': "Operand must be a number.",
        'print 1 - "a";': "Operands must be numbers.",
        'print "a" < "b";': "Operands must be numbers.",
        "print true + nil;": "Operands must be two numbers or include a string.",
    }
    for source, message in cases.items():
        reporter = run_source(source)
        assert reporter.had_runtime_error
        assert capsys.readouterr().err.strip().splitlines() == [message, "[line 1]"]


def test_truthiness(capsys):
    """
    Test that only nil and false are falsy.
    """
    source = (
        "class C {}\n"
        "print !nil;\n"
        "print !false;\n"
        "print !0;\n"
        'print !"";\n'
        "print !true;\n"
        "print !C();\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["true", "true", "false", "false", "false", "false"]


def test_equality_never_coerces(capsys):
    """
    Test equality across types, and that functions equal nothing.
    """
    source = (
        "fun f() {}\n"
        "var g = f;\n"
        "class C {}\n"
        "var c = C();\n"
        'print 1 == "1";\n'
        "print nil == false;\n"
        "print nil == nil;\n"
        "print 1 == 1;\n"
        'print "a" != "a";\n'
        "print f == f;\n"
        "print f == g;\n"
        "print C == C;\n"
        "print c == c;\n"
        "print c == C();\n"
    )
    run_source(source)
    assert output_lines(capsys) == [
        "false", "false", "true", "true", "false",
        "false", "false", "true", "true", "false",
    ]


def test_logical_operators_return_operands(capsys):
    """
    Test that ``and`` and ``or`` short-circuit and yield operand values.
    """
    source = (
        'print nil or "default";\n'
        'print "left" or "right";\n'
        'print nil and "never";\n'
        'print 1 and 2;\n'
        "var called = false;\n"
        "fun touch() { called = true; return true; }\n"
        "false and touch();\n"
        "print called;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["default", "left", "nil", "2", "false"]


def test_ternary_and_comma(capsys):
    """
    Test the conditional and comma operators.
    """
    source = (
        "var a = 0;\n"
        'print true ? "yes" : "no";\n'
        "print nil ? 1 : false ? 2 : 3;\n"
        "print (a = 1, a + 1);\n"
        "print a;\n"
        "var t = a > 0 ? a : -a;\n"
        "print t;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["yes", "3", "2", "1", "1"]


def test_ternary_only_evaluates_one_branch(capsys):
    """
    Test that the branch not taken is never evaluated.
    """
    run_source("print true ? 1 : 1 / 0;")
    captured = capsys.readouterr()
    assert captured.out.strip() == "1"
    assert captured.err == ""


def test_undefined_variable(capsys):
    """
    Test reading and assigning an undefined global.
    """
    reporter = run_source("print missing;")
    assert reporter.had_runtime_error
    assert capsys.readouterr().err.strip().splitlines() == ["Undefined variable 'missing'.", "[line 1]"]

    run_source("\nmissing = 1;")
    assert capsys.readouterr().err.strip().splitlines() == ["Undefined variable 'missing'.", "[line 2]"]


def test_native_clock(capsys):
    """
    Test that ``clock`` is a native function returning a number.
    """
    run_source("print clock() > 0;\nprint clock;")
    assert output_lines(capsys) == ["true", "<native fn>"]
