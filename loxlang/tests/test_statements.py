"""
Tests for statements and control flow in Lox
"""
from loxlang.tests.utils import output_lines, run_source


def test_variables_and_blocks(capsys):
    """
    Test declarations, assignment and block scoping.
    """
    source = (
        'var a = "global a";\n'
        'var b = "global b";\n'
        "var c;\n"
        "{\n"
        '    var a = "outer a";\n'
        "    {\n"
        '        var a = "inner a";\n'
        "        print a;\n"
        "        print b;\n"
        "    }\n"
        "    print a;\n"
        "}\n"
        "print a;\n"
        "print c;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["inner a", "global b", "outer a", "global a", "nil"]


def test_if_else(capsys):
    """
    Test that ``else`` binds to the nearest ``if``.
    """
    source = (
        'if (true) print "then";\n'
        'if (false) print "no"; else print "else";\n'
        'if (true) if (false) print "inner"; else print "dangling";\n'
    )
    run_source(source)
    assert output_lines(capsys) == ["then", "else", "dangling"]


def test_while_and_for(capsys):
    """
    Test ``while`` loops and desugared ``for`` loops.
    """
    source = (
        "var i = 0;\n"
        "while (i < 3) { print i; i = i + 1; }\n"
        "for (var j = 0; j < 2; j = j + 1) print j * 10;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["0", "1", "2", "0", "10"]


def test_for_loop_variable_is_scoped_to_loop(capsys):
    """
    Test that the ``for`` initializer is not visible after the loop.
    """
    reporter = run_source("for (var k = 0; k < 1; k = k + 1) {}\nprint k;")
    assert reporter.had_runtime_error
    assert capsys.readouterr().err.strip().splitlines() == ["Undefined variable 'k'.", "[line 2]"]


def test_break_leaves_innermost_loop(capsys):
    """
    Test that ``break`` exits only the loop that contains it.
    """
    source = (
        "for (var i = 0; i < 3; i = i + 1) {\n"
        "    for (var j = 0; j < 3; j = j + 1) {\n"
        "        if (j == 1) break;\n"
        "        print i * 10 + j;\n"
        "    }\n"
        "}\n"
        "var n = 0;\n"
        "while (true) { n = n + 1; if (n == 5) break; }\n"
        "print n;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["0", "10", "20", "5"]


def test_break_in_loop_inside_function(capsys):
    """
    Test that ``break`` in a loop nested in a function stops that loop only.
    """
    source = (
        "fun firstOver(limit) {\n"
        "    var i = 0;\n"
        "    while (true) {\n"
        "        if (i * i > limit) break;\n"
        "        i = i + 1;\n"
        "    }\n"
        "    return i;\n"
        "}\n"
        "print firstOver(10);\n"
    )
    reporter = run_source(source)
    assert not reporter.had_error
    assert output_lines(capsys) == ["4"]


def test_top_level_break_does_not_run(capsys):
    """
    Test that a compile error prevents any execution.
    """
    reporter = run_source('print "never";\nbreak;')
    captured = capsys.readouterr()
    assert reporter.had_error
    assert captured.out == ""
    assert captured.err.strip() == "[line 2] Error at 'break': Can't use 'break' outside of a loop."


def test_runtime_error_stops_the_batch(capsys):
    """
    Test that statements after a runtime error do not run.
    """
    reporter = run_source('print 1;\nprint nil.x;\nprint 2;')
    captured = capsys.readouterr()
    assert reporter.had_runtime_error
    assert captured.out.strip().splitlines() == ["1"]
    assert captured.err.strip().splitlines() == ["Only instances have properties.", "[line 2]"]
