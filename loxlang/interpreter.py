"""Interpreter.

This is a tree-walk interpreter for evaluating AST nodes produced by the
parser and annotated by the resolver. It supports arithmetic, variables,
closures, classes with single inheritance, conditionals, loops, and output
statements.

1. Execution Model
Statements are executed via `execute()` and expressions are evaluated using
`evaluate()`. Both dispatch on the node class with a `match` statement and
recurse on the host call stack.

2. Environment
`self.env` is the current scope frame and `self.globals` the outermost one.
Blocks and function calls install a fresh frame and restore the previous one
when they finish, however they finish. Variable nodes the resolver annotated
are read with `Environment.get_at`; everything else is a global.

3. Control Flow
`execute()` returns a signal: `None` to fall through, a `ReturnSignal` that
unwinds to the nearest function call, or `BREAK` that unwinds to the
nearest loop. Signals are ordinary return values and never reach the error
reporter.

4. Error Handling
Runtime errors are raised as `LoxRuntimeError`. `interpret()` catches the
first one, reports it with its line number and abandons the rest of the
batch. Exhausting the host stack is reported the same way; see
`loxlang.stack` for how much room a batch gets.


File: interpreter.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import time
import weakref
from typing import Any, TextIO

from loxlang import nodes
from loxlang.environment import Environment
from loxlang.errors import ErrorReporter
from loxlang.exceptions import LoxRuntimeError
from loxlang.signals import BREAK, ReturnSignal, Signal
from loxlang.stack import run_deep
from loxlang.tokens import Token, TokenType
from loxlang.values import (
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    NativeFunction,
    is_equal,
    is_truthy,
    stringify,
)


class Interpreter:
    """Tree-walk interpreter for Lox."""

    def __init__(self, reporter: ErrorReporter, stdout: TextIO | None = None):
        """
        Initialize the interpreter.

        Parameters:
            reporter (ErrorReporter): Receives runtime errors.
            stdout: Stream for ``print``. Defaults to ``sys.stdout`` at the
                time of printing.
        """
        self.reporter = reporter
        self.stdout = stdout
        self.globals = Environment()
        self.env = self.globals
        self.locals: weakref.WeakKeyDictionary[nodes.Expr, int] = weakref.WeakKeyDictionary()
        self._line = 0

        self.globals.define("clock", NativeFunction("clock", 0, time.time))

    def resolve(self, locals_: dict[nodes.Expr, int]) -> None:
        """
        Merge scope distances computed by the resolver.

        Entries are held weakly, so they go away with the last reference to
        their AST node. Nodes reachable from live functions and classes stay.
        """
        self.locals.update(locals_)

    def interpret(self, statements: list[nodes.Stmt]) -> None:
        """
        Execute top-level statements in order.

        Stops at the first runtime error, which is reported once.
        """
        run_deep(self._interpret, statements)

    def _interpret(self, statements: list[nodes.Stmt]) -> None:
        try:
            for stmt in statements:
                if isinstance(self.execute(stmt), ReturnSignal):
                    break
        except LoxRuntimeError as e:
            self.reporter.runtime_failure(e.line, e.message)
        except RecursionError:
            self.env = self.globals
            self.reporter.runtime_failure(self._line, "Stack overflow.")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute(self, stmt: nodes.Stmt) -> Signal:
        """
        Execute a single statement.

        Returns:
            None, a ReturnSignal, or BREAK.
        """
        match stmt:
            case nodes.Expression(expression=expr):
                self.evaluate(expr)

            case nodes.Print(expression=expr):
                value = self.evaluate(expr)
                print(stringify(value), file=self.stdout)

            case nodes.Var(name=name, initializer=initializer):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.env.define(name.lexeme, value)

            case nodes.Block(statements=statements):
                return self.execute_block(statements, Environment(self.env))

            case nodes.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)

            case nodes.While(condition=condition, body=body):
                while is_truthy(self.evaluate(condition)):
                    signal = self.execute(body)
                    if signal is BREAK:
                        break
                    if signal is not None:
                        return signal

            case nodes.Break():
                return BREAK

            case nodes.Return(value=value):
                result = None
                if value is not None:
                    result = self.evaluate(value)
                return ReturnSignal(result)

            case nodes.Function(name=name):
                self.env.define(name.lexeme, LoxFunction(stmt, self.env))

            case nodes.Class():
                self._execute_class(stmt)

            case _:
                raise RuntimeError(f"Unknown statement type: {type(stmt).__name__}")

        return None

    def execute_block(self, statements: list[nodes.Stmt], env: Environment) -> Signal:
        """
        Execute ``statements`` in ``env`` and restore the current frame.
        """
        saved_env = self.env
        self.env = env
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.env = saved_env

    def _execute_class(self, stmt: nodes.Class) -> None:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        self.env.define(stmt.name.lexeme, None)

        method_env = self.env
        if superclass is not None:
            method_env = Environment(self.env)
            method_env.define("super", superclass)

        methods = {
            method.name.lexeme: LoxFunction(method, method_env, method.name.lexeme == "init")
            for method in stmt.methods
        }
        klass = LoxClass(stmt.name.lexeme, superclass, methods)
        self.env.assign(stmt.name, klass)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate(self, expr: nodes.Expr) -> Any:
        """
        Recursively evaluate an expression node and return its value.

        Raises:
            LoxRuntimeError: On type errors, bad calls and undefined names.
        """
        match expr:
            case nodes.Literal(value=value):
                return value

            case nodes.Grouping(expression=inner):
                return self.evaluate(inner)

            case nodes.Variable(name=name):
                return self._lookup_variable(name, expr)

            case nodes.Assign(name=name, value=value_expr):
                value = self.evaluate(value_expr)
                distance = self.locals.get(expr)
                if distance is not None:
                    self.env.assign_at(distance, name.lexeme, value)
                else:
                    self.globals.assign(name, value)
                return value

            case nodes.Unary(operator=op, right=right):
                return self._evaluate_unary(op, self.evaluate(right))

            case nodes.Binary(left=left, operator=op, right=right):
                lhs = self.evaluate(left)
                rhs = self.evaluate(right)
                return self._evaluate_binary(op, lhs, rhs)

            case nodes.Logical(left=left, operator=op, right=right):
                lhs = self.evaluate(left)
                if op.type == TokenType.OR:
                    if is_truthy(lhs):
                        return lhs
                elif not is_truthy(lhs):
                    return lhs
                return self.evaluate(right)

            case nodes.Conditional(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.evaluate(then_branch)
                return self.evaluate(else_branch)

            case nodes.Call(callee=callee_expr, paren=paren, arguments=argument_exprs):
                callee = self.evaluate(callee_expr)
                arguments = [self.evaluate(arg) for arg in argument_exprs]
                return self._call(callee, arguments, paren)

            case nodes.Get(object=obj_expr, name=name):
                obj = self.evaluate(obj_expr)
                if not isinstance(obj, LoxInstance):
                    raise LoxRuntimeError(name, "Only instances have properties.")
                return obj.get(name)

            case nodes.Set(object=obj_expr, name=name, value=value_expr):
                obj = self.evaluate(obj_expr)
                if not isinstance(obj, LoxInstance):
                    raise LoxRuntimeError(name, "Only instances have fields.")
                value = self.evaluate(value_expr)
                obj.set(name, value)
                return value

            case nodes.This(keyword=keyword):
                return self._lookup_variable(keyword, expr)

            case nodes.Super(method=method_name):
                distance = self.locals[expr]
                superclass = self.env.get_at(distance, "super")
                instance = self.env.get_at(distance - 1, "this")
                method = superclass.find_method(method_name.lexeme)
                if method is None:
                    raise LoxRuntimeError(method_name, f"Undefined property '{method_name.lexeme}'.")
                return method.bind(instance)

        raise RuntimeError(f"Invalid expression node: {expr!r}")

    def _lookup_variable(self, name: Token, expr: nodes.Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.env.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _call(self, callee: Any, arguments: list[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                paren,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
            )
        self._line = paren.line
        return callee.call(self, arguments)

    @staticmethod
    def _evaluate_unary(op: Token, right: Any) -> Any:
        match op.type:
            case TokenType.MINUS:
                _check_number_operand(op, right)
                return -right
            case TokenType.BANG:
                return not is_truthy(right)
        raise RuntimeError(f"Unknown unary operator '{op.lexeme}'")

    @staticmethod
    def _evaluate_binary(op: Token, lhs: Any, rhs: Any) -> Any:
        match op.type:
            # Arithmetic
            case TokenType.PLUS:
                if _is_number(lhs) and _is_number(rhs):
                    return lhs + rhs
                if isinstance(lhs, str) or isinstance(rhs, str):
                    return stringify(lhs) + stringify(rhs)
                raise LoxRuntimeError(op, "Operands must be two numbers or include a string.")
            case TokenType.MINUS:
                _check_number_operands(op, lhs, rhs)
                return lhs - rhs
            case TokenType.STAR:
                _check_number_operands(op, lhs, rhs)
                return lhs * rhs
            case TokenType.SLASH:
                _check_number_operands(op, lhs, rhs)
                if rhs == 0:
                    raise LoxRuntimeError(op, "Division by zero.")
                return lhs / rhs
            # Comparison
            case TokenType.GREATER:
                _check_number_operands(op, lhs, rhs)
                return lhs > rhs
            case TokenType.GREATER_EQUAL:
                _check_number_operands(op, lhs, rhs)
                return lhs >= rhs
            case TokenType.LESS:
                _check_number_operands(op, lhs, rhs)
                return lhs < rhs
            case TokenType.LESS_EQUAL:
                _check_number_operands(op, lhs, rhs)
                return lhs <= rhs
            # Equality
            case TokenType.EQUAL_EQUAL:
                return is_equal(lhs, rhs)
            case TokenType.BANG_EQUAL:
                return not is_equal(lhs, rhs)
            # Comma
            case TokenType.COMMA:
                return rhs
        raise RuntimeError(f"Unknown binary operator '{op.lexeme}'")


def _is_number(value: Any) -> bool:
    return isinstance(value, float)


def _check_number_operand(op: Token, operand: Any) -> None:
    if not _is_number(operand):
        raise LoxRuntimeError(op, "Operand must be a number.")


def _check_number_operands(op: Token, lhs: Any, rhs: Any) -> None:
    if not (_is_number(lhs) and _is_number(rhs)):
        raise LoxRuntimeError(op, "Operands must be numbers.")
