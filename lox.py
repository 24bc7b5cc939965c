"""
Lox Language Interpreter

This is the main entry point for the Lox language interpreter.

Workflow:
1. The source is read from the script named on the command line, or line by
   line from the interactive prompt.
2. The Lexer tokenizes the source code into meaningful tokens.
3. The Parser processes tokens into an AST following the language grammar.
4. The Resolver computes the scope distance of every local variable.
5. The Interpreter walks the AST, evaluating expressions and executing statements.

Exit codes follow the BSD sysexits convention: 64 for bad usage, 65 when the
script has a compile-time error and 70 when it fails at run time.


File: lox.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""
import os
import sys

from loxlang import nodes
from loxlang.errors import ErrorReporter
from loxlang.interpreter import Interpreter
from loxlang.lexer import tokenize
from loxlang.parser import Parser
from loxlang.printer import format_stmt
from loxlang.resolver import Resolver

EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70


def print_usage():
    """
    Print usage.
    """
    print()
    print("Lox Language Interpreter")
    print()
    print("Usage:")
    print("    lox [script.lox]")
    print()
    print("Arguments:")
    print("    <script.lox>")
    print("        Path to a Lox source file to execute.")
    print()
    print("Example:")
    print("    lox hello.lox")
    print()
    print("Or run with no arguments to enter interactive mode (REPL).")
    print()
    print("Environment:")
    print("    LOXDEBUG")
    print("        When set, print the tokens and AST before running.")


def debug_print_tokens_ast(tokens, ast):
    """
    Print tokenized source and AST
    """
    print("\nTokens:\n")
    print(tokens)
    print("\nAST:\n")
    for stmt in ast:
        print(format_stmt(stmt))
    print(" ")


def run(source: str, interpreter: Interpreter, reporter: ErrorReporter) -> None:
    """
    Run one batch of source through the whole pipeline.

    Nothing is executed if the lexer, parser or resolver reported an error.
    """
    tokens = tokenize(source, reporter)
    parser = Parser(tokens, reporter)
    statements = parser.parse()

    if os.environ.get('LOXDEBUG'):
        debug_print_tokens_ast(tokens, statements)

    if reporter.had_error:
        return

    locals_ = Resolver(reporter).resolve(statements)
    if reporter.had_error:
        return

    interpreter.resolve(locals_)
    interpreter.interpret(statements)


def run_expression(source: str, interpreter: Interpreter, reporter: ErrorReporter) -> bool:
    """
    Evaluate ``source`` as a bare expression and print its value.

    Returns ``False`` without reporting anything when ``source`` is not a
    single well-formed expression, so the caller can run it as statements.
    """
    probe = ErrorReporter(echo=False)
    tokens = tokenize(source, probe)
    if probe.had_error:
        return False
    expr = Parser(tokens, probe).parse_expression()
    if expr is None:
        return False

    stmt = nodes.Print(expr)
    locals_ = Resolver(reporter).resolve([stmt])
    if reporter.had_error:
        return True

    interpreter.resolve(locals_)
    interpreter.interpret([stmt])
    return True


def run_script(script_name: str) -> int:
    """
    Run a Lox script and return the process exit code.
    """
    with open(script_name, "r", encoding="utf-8") as f:
        code = f.read()

    reporter = ErrorReporter()
    interpreter = Interpreter(reporter)
    run(code, interpreter, reporter)

    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return 0


def run_repl():
    """
    Run the interactive REPL
    """
    print("Lox Language Interpreter - REPL")
    print("Type `exit` or `quit` to leave.")
    reporter = ErrorReporter()
    interpreter = Interpreter(reporter)
    while True:
        try:
            line = input("> ")
        except KeyboardInterrupt:
            print("\nInterrupted.")
            break
        except EOFError:
            print()
            break

        if line.strip() in {"exit", "quit"}:
            break
        if not line.strip():
            continue

        if not run_expression(line, interpreter, reporter):
            run(line, interpreter, reporter)
        reporter.reset()


def main(argv: list[str]) -> int:
    """
    Entry point for the CLI.

    Behaviour:
    - No arguments: enter the REPL.
    - One argument equal to ``-h`` or ``--help``: print usage and exit.
    - One argument that is not an option: treat it as the path to a script and run it.
    - Any other pattern: print usage and return exit code 64.
    """
    args = argv[1:]
    if not args:
        run_repl()
        return 0
    if len(args) == 1 and args[0] in ('-h', '--help'):
        print_usage()
        return 0
    if len(args) == 1:
        return run_script(args[0])
    print_usage()
    return EX_USAGE


def cli():
    """Console script entry point."""
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    cli()
