"""Runtime values.

Lox values map onto Python objects: ``nil`` is ``None``, booleans are
``bool``, numbers are ``float`` and strings are ``str``. Functions, classes
and instances are the reference types defined here.

1. Functions
A :class:`LoxFunction` pairs a ``Function`` declaration with the frame it was
created in. Calling it opens one new frame on that closure for the
parameters. :meth:`LoxFunction.bind` wraps the closure in one more frame that
holds ``this``, producing a bound method.

2. Classes
A :class:`LoxClass` is callable. Calling it creates a :class:`LoxInstance`
and runs ``init`` on it when the class (or a superclass) defines one.

3. Instances
Property lookup checks the instance's own fields first, then the methods of
its class and each superclass in turn.


File: values.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

from loxlang import nodes
from loxlang.environment import Environment
from loxlang.exceptions import UndefinedPropertyException
from loxlang.signals import ReturnSignal
from loxlang.tokens import Token

if TYPE_CHECKING:
    from loxlang.interpreter import Interpreter


class LoxCallable(ABC):
    """Anything that can appear before ``(...)``."""

    @abstractmethod
    def arity(self) -> int:
        """Number of arguments a call must pass."""

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        """Invoke with arguments already checked against :meth:`arity`."""


class LoxFunction(LoxCallable):
    """Runtime representation of a user-defined function or method."""

    def __init__(self, declaration: nodes.Function, closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def bind(self, instance: LoxInstance) -> LoxFunction:
        """Return a copy of this method whose ``this`` is ``instance``."""
        env = Environment(self.closure)
        env.define("this", instance)
        return LoxFunction(self.declaration, env, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        env = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            env.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, env)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if isinstance(signal, ReturnSignal):
            return signal.value
        return None

    def __eq__(self, other) -> bool:
        return False

    __hash__ = object.__hash__

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        return f"LoxFunction({self.name})"


class NativeFunction(LoxCallable):
    """A function implemented in Python."""

    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        return self.fn(*arguments)

    def __eq__(self, other) -> bool:
        return False

    __hash__ = object.__hash__

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"NativeFunction({self.name})"


class LoxClass(LoxCallable):
    """Runtime representation of a class."""

    def __init__(self, name: str, superclass: LoxClass | None, methods: dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> LoxFunction | None:
        """Find ``name`` on this class or the nearest superclass defining it."""
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return f"<{self.name}>"

    def __repr__(self) -> str:
        return f"LoxClass({self.name})"


class LoxInstance:
    """An object created by calling a class."""

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        """
        Read a field, or bind a method found on the class chain.

        Raises:
            UndefinedPropertyException: If neither exists.
        """
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise UndefinedPropertyException(name)

    def set(self, name: Token, value: Any) -> None:
        """Create or overwrite a field."""
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"<{self.klass.name}> instance"

    def __repr__(self) -> str:
        return f"LoxInstance({self.klass.name})"


def is_truthy(value: Any) -> bool:
    """``nil`` and ``false`` are falsy; everything else is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """
    Value equality without type coercion.

    Functions are never equal to anything, themselves included; other
    reference types compare by identity.
    """
    if isinstance(a, (LoxFunction, NativeFunction)) or isinstance(b, (LoxFunction, NativeFunction)):
        return False
    if type(a) is not type(b):
        return False
    if isinstance(a, (LoxClass, LoxInstance)):
        return a is b
    return a == b


def stringify(value: Any) -> str:
    """Render a value the way ``print`` shows it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return str(value)
