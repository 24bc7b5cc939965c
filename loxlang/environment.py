"""Scope frames.

An :class:`Environment` maps names to values and links to the frame that
encloses it. Closures keep a reference to the frame they were created in,
so several functions may share, and mutate, the same frame.


File: environment.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

from typing import Any

from loxlang.exceptions import UndefinedVariableException
from loxlang.tokens import Token


class Environment:
    """A single scope frame."""

    def __init__(self, enclosing: Environment | None = None):
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        """Bind ``name`` in this frame, replacing any existing binding."""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Look ``name`` up in this frame and then in each enclosing frame.

        Raises:
            UndefinedVariableException: If no frame binds the name.
        """
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise UndefinedVariableException(name)

    def assign(self, name: Token, value: Any) -> None:
        """
        Rebind ``name`` in the nearest frame that defines it.

        Raises:
            UndefinedVariableException: If no frame binds the name.
        """
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise UndefinedVariableException(name)

    def ancestor(self, distance: int) -> Environment:
        """Return the frame ``distance`` links out from this one."""
        env = self
        for _ in range(distance):
            env = env.enclosing
            if env is None:
                raise RuntimeError(f"No enclosing scope at distance {distance}")
        return env

    def get_at(self, distance: int, name: str) -> Any:
        """Read ``name`` from exactly the frame ``distance`` links out."""
        values = self.ancestor(distance).values
        if name not in values:
            raise RuntimeError(f"Resolved variable '{name}' missing at distance {distance}")
        return values[name]

    def assign_at(self, distance: int, name: str, value: Any) -> None:
        """Rebind ``name`` in exactly the frame ``distance`` links out."""
        values = self.ancestor(distance).values
        if name not in values:
            raise RuntimeError(f"Resolved variable '{name}' missing at distance {distance}")
        values[name] = value

    def __repr__(self) -> str:
        return f"Environment({list(self.values)}, enclosing={self.enclosing is not None})"
