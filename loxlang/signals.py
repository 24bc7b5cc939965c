"""Control-flow signals.

Executing a statement yields ``None`` when control falls through normally,
a :class:`ReturnSignal` when a ``return`` is unwinding to the nearest
function call, or :data:`BREAK` when a ``break`` is unwinding to the
nearest loop. They travel back through ordinary return values, never through
the exception channel used for runtime errors.


File: signals.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import Any, Final


class ReturnSignal:
    """Carries the value of a ``return`` statement."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class BreakSignal:
    """Marks a ``break`` unwinding to its loop."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "BREAK"


BREAK: Final = BreakSignal()

Signal = ReturnSignal | BreakSignal | None
