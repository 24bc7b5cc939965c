"""Resolver.

A static pass over the AST that runs after parsing and before execution.
For every variable reference and assignment it works out how many scope
frames separate the use from the declaration, so the interpreter can jump
straight to the right frame instead of searching by name.

1. Scopes
The resolver keeps a stack of scopes mirroring the frames the interpreter
will create: one per block, one per function call (holding the parameters),
one per bound method (holding ``this``) and one per subclass (holding
``super``). Global code has no scope on the stack; names that are not
found in any scope are left unannotated and looked up as globals at run time.

2. Declaration state
Each scope maps a name to ``False`` while its initializer is being resolved
and ``True`` once it is ready, which catches ``var a = a;``.

3. Checks
The resolver also reports misuse of ``return``, ``this`` and ``super`` and
self-inheriting classes. Errors go to the reporter and resolution carries on.


File: resolver.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from enum import Enum, auto

from loxlang import nodes
from loxlang.errors import ErrorReporter
from loxlang.stack import run_deep
from loxlang.tokens import Token


class FunctionType(Enum):
    """Kind of function body currently being resolved."""
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    """Kind of class body currently being resolved."""
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """Computes scope distances for local variables."""

    def __init__(self, reporter: ErrorReporter):
        self.reporter = reporter
        self.scopes: list[dict[str, bool]] = []
        self.locals: dict[nodes.Expr, int] = {}
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self._line = 1

    def resolve(self, statements: list[nodes.Stmt]) -> dict[nodes.Expr, int]:
        """
        Resolve a program.

        Returns:
            dict: expression node → number of frames between use and binding.
        """
        return run_deep(self._resolve_program, statements)

    def _resolve_program(self, statements: list[nodes.Stmt]) -> dict[nodes.Expr, int]:
        for stmt in statements:
            try:
                self.resolve_stmt(stmt)
            except RecursionError:
                self.reporter.error(self._line, "Program nests too deeply.")
                self.scopes.clear()
                self.current_function = FunctionType.NONE
                self.current_class = ClassType.NONE
        return self.locals

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def resolve_stmt(self, stmt: nodes.Stmt) -> None:
        match stmt:
            case nodes.Block(statements=statements):
                self._begin_scope()
                for inner in statements:
                    self.resolve_stmt(inner)
                self._end_scope()

            case nodes.Class():
                self._resolve_class(stmt)

            case nodes.Function(name=name):
                self._declare(name)
                self._define(name)
                self._resolve_function(stmt, FunctionType.FUNCTION)

            case nodes.Var(name=name, initializer=initializer):
                self._declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self._define(name)

            case nodes.Expression(expression=expr) | nodes.Print(expression=expr):
                self.resolve_expr(expr)

            case nodes.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)

            case nodes.While(condition=condition, body=body):
                self.resolve_expr(condition)
                self.resolve_stmt(body)

            case nodes.Return(keyword=keyword, value=value):
                if self.current_function == FunctionType.NONE:
                    self.reporter.token_error(keyword, "Can't return from top-level code.")
                if value is not None:
                    if self.current_function == FunctionType.INITIALIZER:
                        self.reporter.token_error(keyword, "Can't return a value from an initializer.")
                    self.resolve_expr(value)

            case nodes.Break():
                pass

            case _:
                raise RuntimeError(f"Unknown statement type: {type(stmt).__name__}")

    def _resolve_class(self, stmt: nodes.Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.reporter.token_error(stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(stmt.superclass)
            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True
        for method in stmt.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            self._resolve_function(method, kind)
        self._end_scope()

        if stmt.superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def _resolve_function(self, function: nodes.Function, kind: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = kind
        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self._end_scope()
        self.current_function = enclosing_function

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def resolve_expr(self, expr: nodes.Expr) -> None:
        match expr:
            case nodes.Variable(name=name):
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self.reporter.token_error(name, "Can't read local variable in its own initializer.")
                self._resolve_local(expr, name)

            case nodes.Assign(name=name, value=value):
                self.resolve_expr(value)
                self._resolve_local(expr, name)

            case nodes.Binary(left=left, right=right) | nodes.Logical(left=left, right=right):
                self.resolve_expr(left)
                self.resolve_expr(right)

            case nodes.Conditional(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_expr(then_branch)
                self.resolve_expr(else_branch)

            case nodes.Call(callee=callee, arguments=arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)

            case nodes.Get(object=obj):
                self.resolve_expr(obj)

            case nodes.Set(object=obj, value=value):
                self.resolve_expr(value)
                self.resolve_expr(obj)

            case nodes.Grouping(expression=inner) | nodes.Unary(right=inner):
                self.resolve_expr(inner)

            case nodes.Literal():
                pass

            case nodes.This(keyword=keyword):
                if self.current_class == ClassType.NONE:
                    self.reporter.token_error(keyword, "Can't use 'this' outside of a class.")
                    return
                self._resolve_local(expr, keyword)

            case nodes.Super(keyword=keyword):
                if self.current_class == ClassType.NONE:
                    self.reporter.token_error(keyword, "Can't use 'super' outside of a class.")
                elif self.current_class != ClassType.SUBCLASS:
                    self.reporter.token_error(keyword, "Can't use 'super' in a class with no superclass.")
                self._resolve_local(expr, keyword)

            case _:
                raise RuntimeError(f"Invalid expression node: {expr!r}")

    # ------------------------------------------------------------------
    # Scope helpers
    # ------------------------------------------------------------------

    def _resolve_local(self, expr: nodes.Expr, name: Token) -> None:
        self._line = name.line
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr] = depth
                return

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: Token) -> None:
        self._line = name.line
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.reporter.token_error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True
