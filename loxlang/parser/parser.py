"""
Main parser entry point for Lox.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process. The actual parsing routines are split across
`loxlang.parser.expressions` and `loxlang.parser.statements`.

Errors are reported as soon as they are found. A parse error unwinds to the
nearest declaration, where the parser synchronizes on a statement boundary
and carries on, so one malformed statement does not hide the next.


File: parser.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

from loxlang import nodes
from loxlang.errors import ErrorReporter
from loxlang.exceptions import ParseError
from loxlang.stack import run_deep
from loxlang.tokens import Token, TokenType

from . import expressions as _expr
from . import statements as _stmt

# Tokens that begin a new statement; synchronization stops in front of them.
STATEMENT_STARTS = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})

TOO_DEEP = "Expression nests too deeply."


class Parser:
    """Lox parser."""

    def __init__(self, tokens: list[Token], reporter: ErrorReporter):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): A list of Token instances ending with EOF.
            reporter (ErrorReporter): Receives syntax errors.
        """
        self.tokens = tokens
        self.reporter = reporter
        self.position = 0
        self.loop_depth = 0

    # Token helpers
    @property
    def curr_token(self) -> Token:
        """The token about to be consumed."""
        return self.tokens[self.position]

    @property
    def prev_token(self) -> Token:
        """The most recently consumed token."""
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        """Return ``True`` once only EOF remains."""
        return self.curr_token.type == TokenType.EOF

    def check(self, token_type: TokenType) -> bool:
        """Return ``True`` if the current token is of ``token_type``."""
        if self.is_at_end():
            return False
        return self.curr_token.type == token_type

    def advance(self) -> Token:
        """Consume the current token and return it."""
        if not self.is_at_end():
            self.position += 1
        return self.prev_token

    def match(self, *token_types: TokenType) -> bool:
        """Consume the current token if it is one of ``token_types``."""
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def eat(self, token_type: TokenType, message: str) -> Token:
        """
        Consume the current token if it matches the expected type.

        Parameters:
            token_type (TokenType): The expected token type.
            message (str): Error message used when the token does not match.

        Raises:
            ParseError: If the token does not match the expected type.
        """
        if self.check(token_type):
            return self.advance()
        raise self.error(self.curr_token, message)

    def error(self, token: Token, message: str) -> ParseError:
        """
        Report a syntax error at ``token`` and return the exception to raise.

        Callers that can keep parsing in a consistent state simply discard
        the returned exception.
        """
        self.reporter.token_error(token, message)
        return ParseError(message)

    def synchronize(self) -> None:
        """
        Discard tokens until a statement boundary.
        """
        self.advance()
        while not self.is_at_end():
            if self.prev_token.type == TokenType.SEMICOLON:
                return
            if self.curr_token.type in STATEMENT_STARTS:
                return
            self.advance()

    # Expression wrappers
    def expression(self) -> nodes.Expr:
        """
        Parse a full expression including the comma operator.
        """
        return _expr.parse_expression(self)

    def conditional(self) -> nodes.Expr:
        """
        Parse a ternary conditional expression.
        """
        return _expr.parse_conditional(self)

    def assignment(self) -> nodes.Expr:
        """
        Parse an assignment to a variable or a field.
        """
        return _expr.parse_assignment(self)

    def logical_or(self) -> nodes.Expr:
        """
        Parse a logical OR expression.
        """
        return _expr.parse_logical_or(self)

    def logical_and(self) -> nodes.Expr:
        """
        Parse a logical AND expression.
        """
        return _expr.parse_logical_and(self)

    def equality(self) -> nodes.Expr:
        """
        Parse an equality expression.
        """
        return _expr.parse_equality(self)

    def comparison(self) -> nodes.Expr:
        """
        Parse a comparison expression using relational operators.
        """
        return _expr.parse_comparison(self)

    def term(self) -> nodes.Expr:
        """
        Parse an addition or subtraction expression.
        """
        return _expr.parse_term(self)

    def factor(self) -> nodes.Expr:
        """
        Parse a multiplication or division expression.
        """
        return _expr.parse_factor(self)

    def unary(self) -> nodes.Expr:
        """
        Parse a prefix ``!`` or ``-`` expression.
        """
        return _expr.parse_unary(self)

    def call(self) -> nodes.Expr:
        """
        Parse a primary followed by call and property suffixes.
        """
        return _expr.parse_call(self)

    def primary(self) -> nodes.Expr:
        """
        Parse a literal, variable, ``this``, ``super`` access or group.
        """
        return _expr.parse_primary(self)

    # Statement wrappers
    def declaration(self) -> nodes.Stmt | None:
        """
        Parse a declaration, recovering from errors.
        """
        return _stmt.parse_declaration(self)

    def statement(self) -> nodes.Stmt:
        """
        Parse a single statement.
        """
        return _stmt.parse_statement(self)

    def block(self) -> list[nodes.Stmt]:
        """
        Parse the statements of a block after its opening brace.
        """
        return _stmt.parse_block(self)

    def function(self, kind: str) -> nodes.Function:
        """
        Parse a function or method declaration.
        """
        return _stmt.parse_function(self, kind)

    def parse(self) -> list[nodes.Stmt]:
        """
        Parse the full input into a list of statements.
        """
        return run_deep(self._parse_program)

    def _parse_program(self) -> list[nodes.Stmt]:
        statements = []
        while not self.is_at_end():
            try:
                stmt = self.declaration()
            except RecursionError:
                self.error(self.curr_token, TOO_DEEP)
                self.synchronize()
                continue
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self) -> nodes.Expr | None:
        """
        Parse the input as a single expression.

        Returns ``None`` if the expression is malformed or if tokens remain
        after it.
        """
        return run_deep(self._parse_single_expression)

    def _parse_single_expression(self) -> nodes.Expr | None:
        try:
            expr = self.expression()
        except ParseError:
            return None
        except RecursionError:
            self.error(self.curr_token, TOO_DEEP)
            return None
        if not self.is_at_end():
            self.error(self.curr_token, "Expect end of expression.")
            return None
        return expr
