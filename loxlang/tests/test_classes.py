"""
Tests for classes, instances and inheritance in Lox
"""
import pytest

from loxlang.values import LoxCallable

from loxlang.tests.utils import output_lines, run_source


def test_init_fields_and_methods(capsys):
    """
    Test initializers, fields and method calls.
    """
    source = (
        "class A { init(x) { this.x = x; } get() { return this.x; } }\n"
        "var a = A(5);\n"
        "print a.get();\n"
        "print A;\n"
        "print a;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["5", "<A>", "<A> instance"]


def test_init_arity_is_checked(capsys):
    """
    Test that a class call takes the arity of ``init``.
    """
    source = (
        "class A { init(x) { this.x = x; } }\n"
        "A(5, 6);\n"
    )
    reporter = run_source(source)
    assert reporter.had_runtime_error
    assert capsys.readouterr().err.strip().splitlines() == ["Expected 1 arguments but got 2.", "[line 2]"]


def test_class_without_init_takes_no_arguments(capsys):
    """
    Test that a class without ``init`` has arity zero.
    """
    reporter = run_source("class E {}\nE(1);")
    assert reporter.had_runtime_error
    assert capsys.readouterr().err.strip().splitlines() == ["Expected 0 arguments but got 1.", "[line 2]"]


def test_init_returns_this(capsys):
    """
    Test that calling ``init`` directly, or returning early, yields the instance.
    """
    source = (
        "class P {\n"
        "    init(n) { this.n = n; if (n > 1) return; this.small = true; }\n"
        "}\n"
        "var p = P(1);\n"
        "print p.init(5) == p;\n"
        "print p.n;\n"
        "print p.small;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["true", "5", "true"]


def test_fields_shadow_methods(capsys):
    """
    Test that a field of the same name hides a method.
    """
    source = (
        "class C { m() { return \"method\"; } }\n"
        "var c = C();\n"
        "print c.m();\n"
        'c.m = "field";\n'
        "print c.m;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["method", "field"]


def test_bound_methods_remember_their_instance(capsys):
    """
    Test that a method taken off an instance keeps ``this``.
    """
    source = (
        "class Greeter {\n"
        "    init(name) { this.name = name; }\n"
        '    greet() { print "hi " + this.name; }\n'
        "}\n"
        'var g = Greeter("bob").greet;\n'
        "g();\n"
        "print g;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["hi bob", "<fn greet>"]


def test_inheritance_and_super(capsys):
    """
    Test method inheritance, overriding and ``super`` calls.
    """
    source = (
        "class Doughnut {\n"
        '    cook() { print "Fry until golden brown."; }\n'
        '    name() { return "doughnut"; }\n'
        "}\n"
        "class BostonCream < Doughnut {\n"
        "    cook() {\n"
        "        super.cook();\n"
        '        print "Pipe full of custard.";\n'
        "    }\n"
        "}\n"
        "var b = BostonCream();\n"
        "b.cook();\n"
        "print b.name();\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["Fry until golden brown.", "Pipe full of custard.", "doughnut"]


def test_super_skips_to_superclass_of_defining_class(capsys):
    """
    Test that ``super`` is resolved statically, not from the instance's class.
    """
    source = (
        'class A { method() { print "A"; } }\n'
        'class B < A { method() { print "B"; } test() { super.method(); } }\n'
        "class C < B {}\n"
        "C().test();\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["A"]


def test_inherited_init(capsys):
    """
    Test that a subclass without ``init`` uses its superclass initializer.
    """
    source = (
        "class Base { init(v) { this.v = v; } }\n"
        "class Derived < Base {}\n"
        "print Derived(7).v;\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["7"]


def test_property_errors(capsys):
    """
    Test errors for bad property access.
    """
    cases = {
        "class C {}\nprint C().missing;": ["Undefined property 'missing'.", "[line 2]"],
        "var n = 1;\nn.x = 2;": ["Only instances have fields.", "[line 2]"],
        "print 1.5.x;": ["Only instances have properties.", "[line 1]"],
        "var NotAClass = 1;\nclass D < NotAClass {}": ["Superclass must be a class.", "[line 2]"],
        "class A {}\nclass B < A { m() { return super.nope; } }\nB().m();": [
            "Undefined property 'nope'.",
            "[line 2]",
        ],
    }
    for source, expected in cases.items():
        reporter = run_source(source)
        assert reporter.had_runtime_error, source
        assert capsys.readouterr().err.strip().splitlines() == expected, source


def test_local_class_declaration(capsys):
    """
    Test that a class can be declared inside a block and reference itself.
    """
    source = (
        "{\n"
        "    class Node {\n"
        "        init(next) { this.next = next; }\n"
        "        make() { return Node(this); }\n"
        "    }\n"
        "    var n = Node(nil).make();\n"
        "    print n.next.next;\n"
        "}\n"
    )
    run_source(source)
    assert output_lines(capsys) == ["nil"]


def test_callable_interface_is_abstract():
    """
    Test that a callable must provide both ``arity`` and ``call``.
    """
    class HalfDone(LoxCallable):
        def arity(self) -> int:
            return 0

    with pytest.raises(TypeError):
        HalfDone()
