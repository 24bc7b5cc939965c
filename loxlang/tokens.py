"""Shared definitions for lexical tokens.

This module centralizes the token kinds produced by the lexer and consumed by
the parser. Keeping them in one place prevents the two components from
drifting apart when new tokens are added or existing ones are renamed.


File: tokens.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from enum import Enum


class TokenType(str, Enum):
    """
    Enumeration of lexical categories.
    """

    # Single-character tokens
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"
    QUESTION = "QUESTION"
    COLON = "COLON"

    # One or two character tokens
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    AND = "AND"
    BREAK = "BREAK"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    EOF = "EOF"

    def __str__(self) -> str:  # pragma: no cover - trivial
        """
        Return the underlying string value for nicer debug output.
        """
        return self.value


KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "break": TokenType.BREAK,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


class Token:
    """
    Represents a lexical token with a type, lexeme, literal value and line.
    """

    __slots__ = ("type", "lexeme", "literal", "line")

    def __init__(self, type_: TokenType, lexeme: str, literal, line: int):
        """
        Initialize a new token.

        Parameters:
            type_ (TokenType): The token type.
            lexeme (str): The source text of the token.
            literal (str | float | None): The literal value, if any.
            line (int): The source line the token ends on.
        """
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "lexeme", lexeme)
        object.__setattr__(self, "literal", literal)
        object.__setattr__(self, "line", line)

    def __setattr__(self, name, value):
        raise AttributeError("Token is immutable")

    def __repr__(self) -> str:
        """
        Return a string representation of the token.
        """
        return f"Token({self.type}, {self.lexeme!r}, {self.literal!r}, line={self.line})"


__all__ = ["TokenType", "KEYWORDS", "Token"]
