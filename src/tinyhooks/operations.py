"""Reflection helpers for reading and rebinding operations on a class.

Operations are stored on classes as raw attributes: plain functions for
instance methods, ``classmethod`` and ``staticmethod`` objects for
unit-level ones. The composer only deals with ``layer(receiver, *args,
**kwargs)`` callables, so this module converts between the two forms.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Iterable
from enum import Enum
from typing import Any

from tinyhooks.errors import MissingOperationError


class OperationKind(str, Enum):
    """How an operation is bound when called."""

    INSTANCE = "instance"
    CLASS = "class"
    STATIC = "static"

    @property
    def unit_level(self) -> bool:
        return self is not OperationKind.INSTANCE


def kind_of(raw: Any) -> OperationKind | None:
    """Classify a raw class attribute, or return None if it is not an operation."""
    if isinstance(raw, staticmethod):
        return OperationKind.STATIC
    if isinstance(raw, classmethod):
        return OperationKind.CLASS
    if inspect.isfunction(raw):
        return OperationKind.INSTANCE
    return None


def resolve(cls: type, name: str, *, static: bool = False) -> Any:
    """Get the current raw implementation of ``name`` as seen from ``cls``.

    Args:
        cls: Class to look the operation up on (MRO included)
        name: Operation name
        static: Look for a class/static method instead of an instance method

    Returns:
        Raw attribute (function, classmethod or staticmethod)

    Raises:
        MissingOperationError: If no operation of the requested level exists
    """
    try:
        raw = inspect.getattr_static(cls, name)
    except AttributeError:
        raise MissingOperationError(cls.__qualname__, name) from None

    kind = kind_of(raw)
    if kind is None or kind.unit_level != static:
        raise MissingOperationError(cls.__qualname__, name)
    return raw


def unwrap(raw: Any) -> Any:
    """Convert a raw attribute to a ``layer(receiver, *args, **kwargs)`` callable."""
    kind = kind_of(raw)
    if kind is OperationKind.INSTANCE:
        return raw
    if kind is OperationKind.CLASS:
        return raw.__func__

    func = raw.__func__

    @functools.wraps(func)
    def static_layer(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return static_layer


def rewrap(layer: Any, kind: OperationKind, owner: type) -> Any:
    """Convert a composed layer back to a raw attribute of the given kind.

    Static methods have no receiver, so their hooks see ``owner`` (the class
    the hook was defined on) in its place.
    """
    if kind is OperationKind.INSTANCE:
        return layer
    if kind is OperationKind.CLASS:
        return classmethod(layer)

    @functools.wraps(layer)
    def static_entry(*args: Any, **kwargs: Any) -> Any:
        return layer(owner, *args, **kwargs)

    return staticmethod(static_entry)


def operations(cls: type, skip: Iterable[type] = (object,)) -> dict[str, OperationKind]:
    """List the operations visible on ``cls`` in definition order.

    Args:
        cls: Class to inspect
        skip: Classes whose own attributes are not reported

    Returns:
        Mapping of operation name to its kind
    """
    skipped = set(skip)
    found: dict[str, OperationKind] = {}
    for klass in reversed(cls.__mro__):
        if klass in skipped:
            continue
        for name, raw in vars(klass).items():
            kind = kind_of(raw)
            if kind is None:
                # A non-callable attribute hides an inherited operation
                found.pop(name, None)
            else:
                found[name] = kind
    return found
