"""AST node definitions for Lox.

The parser builds a tree of these nodes and both the resolver and the
interpreter walk it. Nodes use identity equality and hashing
(``eq=False``) because the resolver's output maps individual expression
nodes to scope distances; two structurally identical references to ``x`` in
different places must stay distinct keys.


File: nodes.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loxlang.tokens import Token


# ---- Expressions ----

class Expr:
    """Base class of expression nodes."""


@dataclass(eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Conditional(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, for error locations
    arguments: list[Expr] = field(default_factory=list)


@dataclass(eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(eq=False)
class Literal(Expr):
    value: Any


@dataclass(eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass(eq=False)
class This(Expr):
    keyword: Token


@dataclass(eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(eq=False)
class Variable(Expr):
    name: Token


# ---- Statements ----

class Stmt:
    """Base class of statement nodes."""


@dataclass(eq=False)
class Block(Stmt):
    statements: list[Stmt]


@dataclass(eq=False)
class Break(Stmt):
    keyword: Token


@dataclass(eq=False)
class Function(Stmt):
    name: Token
    params: list[Token]
    body: list[Stmt]


@dataclass(eq=False)
class Class(Stmt):
    name: Token
    superclass: Variable | None
    methods: list[Function]


@dataclass(eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None


@dataclass(eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(eq=False)
class Return(Stmt):
    keyword: Token
    value: Expr | None


@dataclass(eq=False)
class Var(Stmt):
    name: Token
    initializer: Expr | None


@dataclass(eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt
