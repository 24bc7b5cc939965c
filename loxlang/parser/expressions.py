"""
Expression parsing utilities for Lox.

These functions operate on a `loxlang.parser.parser.Parser` instance and
implement the recursive descent logic for expressions, maintaining
operator precedence and associativity.


File: expressions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from loxlang import nodes
from loxlang.tokens import TokenType

if TYPE_CHECKING:
    from loxlang.parser import Parser

MAX_ARGUMENTS = 255


# ---- Lowest precedence ----

def parse_expression(parser: 'Parser') -> nodes.Expr:
    """Parse a comma-separated expression list, yielding the last value."""
    expr = parser.conditional()
    while parser.match(TokenType.COMMA):
        operator = parser.prev_token
        right = parser.conditional()
        expr = nodes.Binary(expr, operator, right)
    return expr


def parse_conditional(parser: 'Parser') -> nodes.Expr:
    """Parse ``cond ? a : b``; right-associative."""
    expr = parser.assignment()
    if parser.match(TokenType.QUESTION):
        then_branch = parser.conditional()
        parser.eat(TokenType.COLON, "Expect ':' in ternary operator.")
        else_branch = parser.conditional()
        expr = nodes.Conditional(expr, then_branch, else_branch)
    return expr


def parse_assignment(parser: 'Parser') -> nodes.Expr:
    """
    Parse an assignment.

    The target is parsed as an ordinary expression first; only a bare
    variable or a property access may then be followed by ``=``.
    """
    expr = parser.logical_or()
    if parser.match(TokenType.EQUAL):
        equals = parser.prev_token
        value = parser.conditional()
        if isinstance(expr, nodes.Variable):
            return nodes.Assign(expr.name, value)
        if isinstance(expr, nodes.Get):
            return nodes.Set(expr.object, expr.name, value)
        parser.error(equals, "Invalid assignment target.")
    return expr


def parse_logical_or(parser: 'Parser') -> nodes.Expr:
    """Parse ``or`` chains."""
    expr = parser.logical_and()
    while parser.match(TokenType.OR):
        operator = parser.prev_token
        right = parser.logical_and()
        expr = nodes.Logical(expr, operator, right)
    return expr


def parse_logical_and(parser: 'Parser') -> nodes.Expr:
    """Parse ``and`` chains."""
    expr = parser.equality()
    while parser.match(TokenType.AND):
        operator = parser.prev_token
        right = parser.equality()
        expr = nodes.Logical(expr, operator, right)
    return expr


def parse_equality(parser: 'Parser') -> nodes.Expr:
    """Parse ``==`` and ``!=``."""
    expr = parser.comparison()
    while parser.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
        operator = parser.prev_token
        right = parser.comparison()
        expr = nodes.Binary(expr, operator, right)
    return expr


def parse_comparison(parser: 'Parser') -> nodes.Expr:
    """Parse relational operators."""
    expr = parser.term()
    while parser.match(
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    ):
        operator = parser.prev_token
        right = parser.term()
        expr = nodes.Binary(expr, operator, right)
    return expr


def parse_term(parser: 'Parser') -> nodes.Expr:
    """Parse addition and subtraction expressions."""
    expr = parser.factor()
    while parser.match(TokenType.MINUS, TokenType.PLUS):
        operator = parser.prev_token
        right = parser.factor()
        expr = nodes.Binary(expr, operator, right)
    return expr


def parse_factor(parser: 'Parser') -> nodes.Expr:
    """Parse multiplication and division expressions."""
    expr = parser.unary()
    while parser.match(TokenType.SLASH, TokenType.STAR):
        operator = parser.prev_token
        right = parser.unary()
        expr = nodes.Binary(expr, operator, right)
    return expr


def parse_unary(parser: 'Parser') -> nodes.Expr:
    """Parse prefix operators."""
    if parser.match(TokenType.BANG, TokenType.MINUS):
        operator = parser.prev_token
        return nodes.Unary(operator, parser.unary())
    return parser.call()


def parse_call(parser: 'Parser') -> nodes.Expr:
    """Parse any mixture of ``(...)`` and ``.name`` suffixes, left to right."""
    expr = parser.primary()
    while True:
        if parser.match(TokenType.LEFT_PAREN):
            expr = _finish_call(parser, expr)
        elif parser.match(TokenType.DOT):
            name = parser.eat(TokenType.IDENTIFIER, "Expect property name after '.'.")
            expr = nodes.Get(expr, name)
        else:
            break
    return expr


def _finish_call(parser: 'Parser', callee: nodes.Expr) -> nodes.Expr:
    """Parse the argument list of a call whose ``(`` was just consumed."""
    arguments = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(arguments) >= MAX_ARGUMENTS:
                parser.error(
                    parser.curr_token,
                    f"Can't have more than {MAX_ARGUMENTS} arguments.",
                )
            arguments.append(parser.conditional())
            if not parser.match(TokenType.COMMA):
                break
    paren = parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
    return nodes.Call(callee, paren, arguments)


# ---- Highest precedence ----

def parse_primary(parser: 'Parser') -> nodes.Expr:
    """Parse a literal, variable, or parenthesized expression."""
    if parser.match(TokenType.FALSE):
        return nodes.Literal(False)
    if parser.match(TokenType.TRUE):
        return nodes.Literal(True)
    if parser.match(TokenType.NIL):
        return nodes.Literal(None)

    if parser.match(TokenType.NUMBER, TokenType.STRING):
        return nodes.Literal(parser.prev_token.literal)

    if parser.match(TokenType.SUPER):
        keyword = parser.prev_token
        parser.eat(TokenType.DOT, "Expect '.' after 'super'.")
        method = parser.eat(TokenType.IDENTIFIER, "Expect superclass method name.")
        return nodes.Super(keyword, method)

    if parser.match(TokenType.THIS):
        return nodes.This(parser.prev_token)

    if parser.match(TokenType.IDENTIFIER):
        return nodes.Variable(parser.prev_token)

    if parser.match(TokenType.LEFT_PAREN):
        expr = parser.expression()
        parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
        return nodes.Grouping(expr)

    raise parser.error(parser.curr_token, "Expect expression.")
