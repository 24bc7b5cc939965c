"""
Utility functions shared across Lox Language tests.
"""
from pathlib import Path
import sys

from loxlang.errors import ErrorReporter
from loxlang.interpreter import Interpreter
from loxlang.lexer import tokenize
from loxlang.parser import Parser
from loxlang.resolver import Resolver

# Ensure the project root is on the Python path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))


def parse_source(source: str, reporter: ErrorReporter | None = None):
    """
    Parse source code and return the AST.
    """
    reporter = reporter or ErrorReporter(echo=False)
    tokens = tokenize(source, reporter)
    parser = Parser(tokens, reporter)
    return parser.parse()


def resolve_source(source: str):
    """
    Parse and resolve source code.

    Returns the AST, the scope distance map and the reporter.
    """
    reporter = ErrorReporter(echo=False)
    ast = parse_source(source, reporter)
    locals_ = Resolver(reporter).resolve(ast)
    return ast, locals_, reporter


def run_source(source: str, interpreter: Interpreter | None = None) -> ErrorReporter:
    """
    Run source code through the whole pipeline and return the reporter.

    Program output goes to ``sys.stdout`` and diagnostics to ``sys.stderr``,
    so tests can read both with ``capsys``.
    """
    reporter = interpreter.reporter if interpreter else ErrorReporter()
    interpreter = interpreter or Interpreter(reporter)
    ast = parse_source(source, reporter)
    if reporter.had_error:
        return reporter
    locals_ = Resolver(reporter).resolve(ast)
    if reporter.had_error:
        return reporter
    interpreter.resolve(locals_)
    interpreter.interpret(ast)
    return reporter


def output_lines(capsys) -> list[str]:
    """
    Return captured stdout split into lines.
    """
    return capsys.readouterr().out.strip().splitlines()
