"""Host stack management.

The parser, resolver and interpreter all recurse on the Python call stack,
roughly one handful of frames per level of nesting in the Lox source (or per
Lox function call). Python's default limit of 1000 frames would cut ordinary
programs short, so each stage runs through :func:`run_deep`, which raises
the recursion limit and executes the work on a thread with a stack large
enough to reach that limit. Running out of it then shows up as a
``RecursionError`` that the stage can report, rather than a crash.


File: stack.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import sys
import threading
from typing import Any, Callable

# Python frames allowed while a stage runs.
MAX_DEPTH = 40_000

# Bytes of stack for the worker thread; comfortably above MAX_DEPTH frames.
STACK_SIZE = 256 * 1024 * 1024


def raise_recursion_limit() -> None:
    """Raise the interpreter-wide recursion limit to :data:`MAX_DEPTH`."""
    if sys.getrecursionlimit() < MAX_DEPTH:
        sys.setrecursionlimit(MAX_DEPTH)


def run_deep(fn: Callable[..., Any], *args: Any) -> Any:
    """
    Call ``fn(*args)`` on a worker thread with a large stack and wait for it.

    The return value is passed back, and any exception raised by ``fn`` is
    re-raised in the calling thread.
    """
    raise_recursion_limit()
    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = fn(*args)
        except BaseException as e:  # re-raised in the caller below
            outcome["error"] = e

    previous = threading.stack_size(STACK_SIZE)
    try:
        worker = threading.Thread(target=target, name="lox-worker", daemon=True)
        worker.start()
    finally:
        threading.stack_size(previous)
    worker.join()

    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("value")
