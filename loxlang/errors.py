"""Diagnostic sink.

Every stage reports problems here rather than printing them itself. The
reporter formats each message, writes it to a stream and keeps a structured
copy so that callers (the CLI, the language server, tests) can inspect what
went wrong. Two flags record whether a compile-time or a run-time error has
been seen; the CLI maps them to exit codes 65 and 70.


File: errors.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import sys
from dataclasses import dataclass
from typing import TextIO

from loxlang.tokens import Token, TokenType


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem."""

    line: int
    where: str
    message: str
    runtime: bool = False

    def __str__(self) -> str:
        if self.runtime:
            return f"{self.message}\n[line {self.line}]"
        return f"[line {self.line}] Error{self.where}: {self.message}"


class ErrorReporter:
    """
    Collects and prints compile-time and run-time diagnostics.
    """

    def __init__(self, stream: TextIO | None = None, echo: bool = True):
        """
        Parameters:
            stream: Where formatted messages are written. Defaults to
                whatever ``sys.stderr`` is at the time of writing.
            echo: When false, messages are only kept in :attr:`diagnostics`.
        """
        self.stream = stream
        self.echo = echo
        self.diagnostics: list[Diagnostic] = []
        self.had_error = False
        self.had_runtime_error = False

    def report(self, line: int, where: str, message: str) -> None:
        """Record a compile-time error found at ``line``."""
        self.had_error = True
        self._emit(Diagnostic(line, where, message))

    def error(self, line: int, message: str) -> None:
        """Record a compile-time error without a location hint."""
        self.report(line, "", message)

    def token_error(self, token: Token, message: str) -> None:
        """Record a compile-time error located at ``token``."""
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_failure(self, line: int, message: str) -> None:
        """Record an error raised while executing a program."""
        self.had_runtime_error = True
        self._emit(Diagnostic(line, "", message, runtime=True))

    def reset(self) -> None:
        """Clear the error flags and stored diagnostics before a new batch."""
        self.had_error = False
        self.had_runtime_error = False
        self.diagnostics.clear()

    @property
    def messages(self) -> list[str]:
        """Formatted form of every stored diagnostic."""
        return [str(d) for d in self.diagnostics]

    def _emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.echo:
            print(diagnostic, file=self.stream if self.stream is not None else sys.stderr)
