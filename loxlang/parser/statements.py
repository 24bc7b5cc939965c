"""Statement parsing utilities for Lox.

These functions operate on a `loxlang.parser.parser.Parser` instance and
handle the various statement forms in the language such as blocks,
conditionals, loops, and function and class declarations.


File: statements.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from loxlang import nodes
from loxlang.exceptions import ParseError
from loxlang.tokens import TokenType

from .expressions import MAX_ARGUMENTS

if TYPE_CHECKING:
    from loxlang.parser import Parser


def parse_declaration(parser: 'Parser') -> nodes.Stmt | None:
    """
    Parse a declaration or statement.

    On a syntax error the parser is synchronized to the next statement
    boundary and ``None`` is returned.

    Syntax:
        <classDecl> | <funDecl> | <varDecl> | <statement>

    Args:
        parser: The parser instance.

    Returns:
        Stmt | None: The parsed node, or None after an error.
    """
    try:
        if parser.match(TokenType.CLASS):
            return parse_class(parser)
        if parser.match(TokenType.FUN):
            return parser.function("function")
        if parser.match(TokenType.VAR):
            return parse_var(parser)
        return parser.statement()
    except ParseError:
        parser.synchronize()
        return None


def parse_class(parser: 'Parser') -> nodes.Class:
    """
    Parse a class declaration.

    Syntax:
        class <name> [< <superclass>] { <method>* }

    Args:
        parser: The parser instance.

    Returns:
        Class: the class node.
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect class name.")

    superclass = None
    if parser.match(TokenType.LESS):
        parser.eat(TokenType.IDENTIFIER, "Expect superclass name.")
        superclass = nodes.Variable(parser.prev_token)

    parser.eat(TokenType.LEFT_BRACE, "Expect '{' before class body.")
    methods = []
    while not parser.check(TokenType.RIGHT_BRACE) and not parser.is_at_end():
        methods.append(parser.function("method"))
    parser.eat(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
    return nodes.Class(name, superclass, methods)


def parse_function(parser: 'Parser', kind: str) -> nodes.Function:
    """
    Parse a function definition. Methods share this grammar minus ``fun``.

    The loop depth is cleared while the body is parsed so that ``break``
    can never target a loop outside the function.

    Syntax:
        <name>(<params>) { <block> }

    Args:
        parser: The parser instance.
        kind: "function" or "method", used in error messages.

    Returns:
        Function: the function node.
    """
    name = parser.eat(TokenType.IDENTIFIER, f"Expect {kind} name.")
    parser.eat(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
    params = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(params) >= MAX_ARGUMENTS:
                parser.error(
                    parser.curr_token,
                    f"Can't have more than {MAX_ARGUMENTS} parameters.",
                )
            params.append(parser.eat(TokenType.IDENTIFIER, "Expect parameter name."))
            if not parser.match(TokenType.COMMA):
                break
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
    parser.eat(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")

    enclosing_loop_depth = parser.loop_depth
    parser.loop_depth = 0
    try:
        body = parser.block()
    finally:
        parser.loop_depth = enclosing_loop_depth
    return nodes.Function(name, params, body)


def parse_var(parser: 'Parser') -> nodes.Var:
    """
    Parse a ``var`` declaration.

    Syntax:
        var <identifier> [= <expression>];

    Args:
        parser: The parser instance.

    Returns:
        Var: the declaration node.
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect variable name.")
    initializer = None
    if parser.match(TokenType.EQUAL):
        initializer = parser.conditional()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
    return nodes.Var(name, initializer)


def parse_statement(parser: 'Parser') -> nodes.Stmt:
    """
    Parse a single statement.

    Args:
        parser: The parser instance.

    Returns:
        Stmt: representing the AST node.
    """
    if parser.match(TokenType.BREAK):
        return parse_break(parser)
    if parser.match(TokenType.FOR):
        return parse_for(parser)
    if parser.match(TokenType.IF):
        return parse_if(parser)
    if parser.match(TokenType.PRINT):
        return parse_print(parser)
    if parser.match(TokenType.RETURN):
        return parse_return(parser)
    if parser.match(TokenType.WHILE):
        return parse_while(parser)
    if parser.match(TokenType.LEFT_BRACE):
        return nodes.Block(parser.block())
    return parse_expression_statement(parser)


def parse_block(parser: 'Parser') -> list[nodes.Stmt]:
    """
    Parse a block of statements enclosed in braces.

    Syntax:
        { <declaration>* }

    Args:
        parser: The parser instance.

    Returns:
        list: the statements of the block.
    """
    statements = []
    while not parser.check(TokenType.RIGHT_BRACE) and not parser.is_at_end():
        stmt = parser.declaration()
        if stmt is not None:
            statements.append(stmt)
    parser.eat(TokenType.RIGHT_BRACE, "Expect '}' after block.")
    return statements


def parse_break(parser: 'Parser') -> nodes.Break:
    """
    Parse a 'break' control statement.

    Syntax:
        break;

    Args:
        parser: The parser instance.

    Returns:
        Break: the break node.
    """
    keyword = parser.prev_token
    if parser.loop_depth == 0:
        parser.error(keyword, "Can't use 'break' outside of a loop.")
    parser.eat(TokenType.SEMICOLON, "Expect ';' after 'break'.")
    return nodes.Break(keyword)


def parse_for(parser: 'Parser') -> nodes.Stmt:
    """
    Parse a C-style ``for`` loop and desugar it into a ``while`` loop.

    Syntax:
        for ([<init>]; [<condition>]; [<increment>]) <statement>

    Args:
        parser: The parser instance.

    Returns:
        Stmt: a While node, wrapped in a Block when there is an initializer.
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")
    if parser.match(TokenType.SEMICOLON):
        initializer = None
    elif parser.match(TokenType.VAR):
        initializer = parse_var(parser)
    else:
        initializer = parse_expression_statement(parser)

    condition = None
    if not parser.check(TokenType.SEMICOLON):
        condition = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after loop condition.")

    increment = None
    if not parser.check(TokenType.RIGHT_PAREN):
        increment = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

    body = _loop_body(parser)

    if increment is not None:
        body = nodes.Block([body, nodes.Expression(increment)])
    if condition is None:
        condition = nodes.Literal(True)
    body = nodes.While(condition, body)
    if initializer is not None:
        body = nodes.Block([initializer, body])
    return body


def parse_if(parser: 'Parser') -> nodes.If:
    """
    Parse a conditional 'if' statement with an optional else branch.

    Syntax:
        if (<condition>) <statement> [else <statement>]

    Args:
        parser: The parser instance.

    Returns:
        If: the conditional node.
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
    condition = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
    then_branch = parser.statement()
    else_branch = None
    if parser.match(TokenType.ELSE):
        else_branch = parser.statement()
    return nodes.If(condition, then_branch, else_branch)


def parse_print(parser: 'Parser') -> nodes.Print:
    """
    Parse a 'print' statement.

    Syntax:
        print <expression>;

    Args:
        parser: The parser instance.

    Returns:
        Print: the print node.
    """
    value = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after value.")
    return nodes.Print(value)


def parse_return(parser: 'Parser') -> nodes.Return:
    """
    Parse a 'return' statement.

    Syntax:
        return [<expression>];

    Args:
        parser: The parser instance.

    Returns:
        Return: the return node; ``value`` is None for a bare return.
    """
    keyword = parser.prev_token
    value = None
    if not parser.check(TokenType.SEMICOLON):
        value = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after return value.")
    return nodes.Return(keyword, value)


def parse_while(parser: 'Parser') -> nodes.While:
    """
    Parse a 'while' statement.

    Syntax:
        while (<condition>) <statement>

    Args:
        parser: The parser instance.

    Returns:
        While: the loop node.
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
    condition = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
    return nodes.While(condition, _loop_body(parser))


def parse_expression_statement(parser: 'Parser') -> nodes.Expression:
    """
    Parse an expression evaluated for its side effects.

    Syntax:
        <expression>;
    """
    expr = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after expression.")
    return nodes.Expression(expr)


def _loop_body(parser: 'Parser') -> nodes.Stmt:
    """Parse a loop body with the loop depth raised by one."""
    parser.loop_depth += 1
    try:
        return parser.statement()
    finally:
        parser.loop_depth -= 1
