"""Lexer for Lox.

This lexer performs a single pass over the source code using a combined
regular expression of named groups. Each match yields a :class:`Token`
containing its type, lexeme, literal value and source line number.

Tokens cover literals (numbers, strings), identifiers and keywords, operators
and delimiters. Comment text beginning with ``//`` or enclosed within
``/* … */`` is skipped during tokenization so line numbers remain accurate.
Block comments do not nest.

Malformed input (an unexpected character, an unterminated string or block
comment) is reported through the error reporter and scanning carries on, so a
single bad token does not hide later ones.


File: lexer.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

import re

from loxlang.errors import ErrorReporter
from loxlang.tokens import KEYWORDS, Token, TokenType


token_specification: list[tuple[str, str]] = [
    # Comments
    ('BLOCK_COMMENT',         r'/\*[\s\S]*?\*/'),
    ('UNTERMINATED_COMMENT',  r'/\*[\s\S]*'),
    ('LINE_COMMENT',          r'//[^\n]*'),

    # Literals
    ('NUMBER',                r'[0-9]+(?:\.[0-9]+)?'),
    ('STRING',                r'"[^"]*"'),
    ('UNTERMINATED_STRING',   r'"[^"]*'),

    # Identifiers and keywords
    ('IDENTIFIER',            r'[A-Za-z_][A-Za-z0-9_]*'),

    # Two character operators
    ('BANG_EQUAL',            r'!='),
    ('EQUAL_EQUAL',           r'=='),
    ('GREATER_EQUAL',         r'>='),
    ('LESS_EQUAL',            r'<='),

    # Single character operators
    ('BANG',                  r'!'),
    ('EQUAL',                 r'='),
    ('GREATER',               r'>'),
    ('LESS',                  r'<'),
    ('MINUS',                 r'-'),
    ('PLUS',                  r'\+'),
    ('SLASH',                 r'/'),
    ('STAR',                  r'\*'),
    ('QUESTION',              r'\?'),
    ('COLON',                 r':'),

    # Delimiters
    ('LEFT_PAREN',            r'\('),
    ('RIGHT_PAREN',           r'\)'),
    ('LEFT_BRACE',            r'\{'),
    ('RIGHT_BRACE',           r'\}'),
    ('COMMA',                 r','),
    ('DOT',                   r'\.'),
    ('SEMICOLON',             r';'),

    # Miscellaneous
    ('NEWLINE',               r'\n'),
    ('SKIP',                  r'[ \t\r]+'),
    ('MISMATCH',              r'.'),
]

tok_regex = re.compile(
    '|'.join(f'(?P<{name}>{pattern})' for name, pattern in token_specification)
)


def tokenize(code: str, reporter: ErrorReporter) -> list[Token]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        code (str): The source code to tokenize.
        reporter (ErrorReporter): Receives lexical errors.

    Returns:
        list[Token]: A list of Token instances terminated by an EOF token.
    """
    tokens: list[Token] = []
    line_num = 1

    for match_obj in tok_regex.finditer(code):
        kind = match_obj.lastgroup
        value = match_obj.group()

        if kind == 'NEWLINE':
            line_num += 1
            continue
        if kind in ('SKIP', 'LINE_COMMENT'):
            continue
        if kind == 'BLOCK_COMMENT':
            line_num += value.count('\n')
            continue
        if kind == 'UNTERMINATED_COMMENT':
            line_num += value.count('\n')
            reporter.error(line_num, "Unterminated block comment.")
            continue
        if kind == 'UNTERMINATED_STRING':
            line_num += value.count('\n')
            reporter.error(line_num, "Unterminated string.")
            continue
        if kind == 'MISMATCH':
            reporter.error(line_num, f"Unexpected character '{value}'.")
            continue

        if kind == 'NUMBER':
            tokens.append(Token(TokenType.NUMBER, value, float(value), line_num))
        elif kind == 'STRING':
            line_num += value.count('\n')
            tokens.append(Token(TokenType.STRING, value, value[1:-1], line_num))
        elif kind == 'IDENTIFIER':
            tokens.append(Token(KEYWORDS.get(value, TokenType.IDENTIFIER), value, None, line_num))
        else:
            tokens.append(Token(TokenType(kind), value, None, line_num))

    tokens.append(Token(TokenType.EOF, "", None, line_num))
    return tokens
