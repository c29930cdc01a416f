"""Hook chain composition.

Each call to :func:`compose` wraps the *current* implementation of an
operation in one new layer. Chains are therefore strictly nested: the
innermost layer is the original implementation and every new hook becomes
the outermost layer.

Formal Model:
    Layer Lᵢ = (kind, bodyᵢ, guardᵢ) applied to inner chain Cᵢ₋₁:

        before: if guard and body aborts then ⊥ else Cᵢ₋₁(args)
        after:  r = Cᵢ₋₁(args); if guard then body(args); r
        around: if guard then body(proceed, args) else Cᵢ₋₁(args)

All layers are plain callables taking the receiver as their first argument;
descriptor handling (instance, class and static methods) lives in
:mod:`tinyhooks.operations`.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from tinyhooks.errors import ConfigurationError, MissingOperationError
from tinyhooks.terminators import Outcome, Terminator, run_before

logger = logging.getLogger(__name__)

# Type aliases
Layer = Callable[..., Any]
HookBody = Callable[..., Any]
GuardFn = Callable[[Any], Any]


class HookKind(str, Enum):
    """Kind of interception a hook performs."""

    BEFORE = "before"
    AFTER = "after"
    AROUND = "around"

    @classmethod
    def parse(cls, value: str | HookKind) -> HookKind:
        """Convert a kind name to a HookKind.

        Raises:
            ConfigurationError: If ``value`` is not a supported kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"{value} is not supported.") from None


def _describe(receiver: Any) -> str:
    owner = receiver if isinstance(receiver, type) else type(receiver)
    return owner.__qualname__


def late_bound(name: str) -> HookBody:
    """Build a hook body that calls the receiver's ``name`` method.

    The method is looked up on every invocation, so it may be defined after
    the hook (for example by a subclass).

    Args:
        name: Method name to resolve on the receiver

    Returns:
        Callable taking ``(receiver, *args, **kwargs)``
    """

    def call_by_name(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            method = getattr(receiver, name)
        except AttributeError:
            raise MissingOperationError(_describe(receiver), name) from None
        return method(*args, **kwargs)

    call_by_name.__name__ = name
    call_by_name.__qualname__ = name
    return call_by_name


def resolve_guard(guard: GuardFn | str | None) -> GuardFn | None:
    """Normalize a guard to a ``guard(receiver)`` callable.

    A string names a zero-argument method called on the receiver.
    """
    if guard is None or callable(guard):
        return guard
    return late_bound(guard)


def compose(
    kind: HookKind,
    previous: Layer,
    body: HookBody,
    terminator: Terminator = Terminator.ABORT,
    guard: GuardFn | None = None,
) -> Layer:
    """Wrap ``previous`` in a new hook layer.

    Args:
        kind: Hook kind
        previous: Current chain, called as ``previous(receiver, *args, **kwargs)``
        body: Hook body; ``around`` bodies receive ``proceed`` after the receiver
        terminator: Termination policy (``before`` only)
        guard: Predicate evaluated against the receiver; falsy skips the body

    Returns:
        New outermost layer with the same calling convention as ``previous``
    """
    if kind is HookKind.BEFORE:
        return _before(previous, body, terminator, guard)
    if kind is HookKind.AFTER:
        return _after(previous, body, guard)
    return _around(previous, body, guard)


def _before(previous: Layer, body: HookBody, terminator: Terminator, guard: GuardFn | None) -> Layer:
    @functools.wraps(previous)
    def before(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        if guard is None or guard(receiver):
            if run_before(terminator, body, receiver, args, kwargs) is Outcome.ABORT:
                logger.debug("Call to %s.%s terminated by before hook", _describe(receiver), previous.__name__)
                return None
        return previous(receiver, *args, **kwargs)

    return before


def _after(previous: Layer, body: HookBody, guard: GuardFn | None) -> Layer:
    @functools.wraps(previous)
    def after(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        result = previous(receiver, *args, **kwargs)
        if guard is None or guard(receiver):
            body(receiver, *args, **kwargs)
        return result

    return after


def _around(previous: Layer, body: HookBody, guard: GuardFn | None) -> Layer:
    @functools.wraps(previous)
    def around(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        if guard is not None and not guard(receiver):
            return previous(receiver, *args, **kwargs)

        def proceed() -> Any:
            return previous(receiver, *args, **kwargs)

        return body(receiver, proceed, *args, **kwargs)

    return around
