"""Errors.


File: exceptions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from loxlang.tokens import Token


class ParseError(Exception):
    """
    Raised by the parser after a syntax error has been reported.

    Never escapes :meth:`Parser.parse`; it only unwinds to the nearest
    declaration so the parser can synchronize.
    """


class LoxRuntimeError(Exception):
    """
    Error raised while evaluating a program.
    """
    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(f"{message} on line {token.line}")

    @property
    def line(self) -> int:
        """Line of the token that caused the error."""
        return self.token.line


class UndefinedVariableException(LoxRuntimeError):
    """
    Error for undefined variables.
    """
    def __init__(self, name: Token):
        self.varname = name.lexeme
        super().__init__(name, f"Undefined variable '{name.lexeme}'.")


class UndefinedPropertyException(LoxRuntimeError):
    """
    Error for property lookups that match neither a field nor a method.
    """
    def __init__(self, name: Token):
        self.property = name.lexeme
        super().__init__(name, f"Undefined property '{name.lexeme}'.")
