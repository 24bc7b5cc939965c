"""
AST printer.

Renders expressions in a parenthesized prefix form, e.g. ``1 + 2 * 3``
becomes ``(+ 1 (* 2 3))``, and statements in a compact source-like form.
Used for the ``LOXDEBUG`` dump and for checking parser output in tests.


File: printer.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from loxlang import nodes


def format_literal(value) -> str:
    """Render a literal value the way it is written in source."""
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return f'"{value}"'


def _parenthesize(name: str, *exprs: nodes.Expr) -> str:
    parts = [name] + [format_expr(e) for e in exprs]
    return "(" + " ".join(parts) + ")"


def format_expr(node: nodes.Expr) -> str:
    """
    Convert an expression node back to a readable string.

    Args:
        node (Expr): An expression node.

    Returns:
        str: A string representation of the expression.
    """
    match node:
        case nodes.Literal(value=value):
            return format_literal(value)
        case nodes.Variable(name=name):
            return name.lexeme
        case nodes.Assign(name=name, value=value):
            return f"(= {name.lexeme} {format_expr(value)})"
        case nodes.Binary(left=left, operator=op, right=right):
            return _parenthesize(op.lexeme, left, right)
        case nodes.Logical(left=left, operator=op, right=right):
            return _parenthesize(op.lexeme, left, right)
        case nodes.Unary(operator=op, right=right):
            return _parenthesize(op.lexeme, right)
        case nodes.Grouping(expression=inner):
            return _parenthesize("group", inner)
        case nodes.Conditional(condition=cond, then_branch=then, else_branch=other):
            return _parenthesize("?:", cond, then, other)
        case nodes.Call(callee=callee, arguments=args):
            return _parenthesize("call", callee, *args)
        case nodes.Get(object=obj, name=name):
            return f"(. {format_expr(obj)} {name.lexeme})"
        case nodes.Set(object=obj, name=name, value=value):
            return f"(= (. {format_expr(obj)} {name.lexeme}) {format_expr(value)})"
        case nodes.This():
            return "this"
        case nodes.Super(method=method):
            return f"(super {method.lexeme})"
    return f"<expr {type(node).__name__}>"


def format_stmt(node: nodes.Stmt) -> str:
    """
    Convert a statement node back to a readable string.
    """
    match node:
        case nodes.Expression(expression=expr):
            return f"{format_expr(expr)};"
        case nodes.Print(expression=expr):
            return f"print {format_expr(expr)};"
        case nodes.Var(name=name, initializer=None):
            return f"var {name.lexeme};"
        case nodes.Var(name=name, initializer=init):
            return f"var {name.lexeme} = {format_expr(init)};"
        case nodes.Block(statements=stmts):
            return "{ " + " ".join(format_stmt(s) for s in stmts) + " }"
        case nodes.If(condition=cond, then_branch=then, else_branch=None):
            return f"if {format_expr(cond)} {format_stmt(then)}"
        case nodes.If(condition=cond, then_branch=then, else_branch=other):
            return f"if {format_expr(cond)} {format_stmt(then)} else {format_stmt(other)}"
        case nodes.While(condition=cond, body=body):
            return f"while {format_expr(cond)} {format_stmt(body)}"
        case nodes.Break():
            return "break;"
        case nodes.Return(value=None):
            return "return;"
        case nodes.Return(value=value):
            return f"return {format_expr(value)};"
        case nodes.Function():
            return "fun " + _format_function(node)
        case nodes.Class(name=name, superclass=superclass, methods=methods):
            head = f"class {name.lexeme}"
            if superclass is not None:
                head += f" < {superclass.name.lexeme}"
            return head + " { " + " ".join(_format_function(m) for m in methods) + " }"
    return f"<stmt {type(node).__name__}>"


def _format_function(node: nodes.Function) -> str:
    params = ", ".join(p.lexeme for p in node.params)
    body = " ".join(format_stmt(s) for s in node.body)
    return f"{node.name.lexeme}({params}) {{ {body} }}"
