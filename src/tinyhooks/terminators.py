"""Termination policy for ``before`` hooks.

A ``before`` hook may stop the wrapped call (and every hook defined before
it on the same operation) from running. How it signals that depends on the
hook's terminator:

- ``abort``: the body calls :func:`abort` anywhere in its dynamic extent
- ``return_false``: the body returns exactly ``False``

Either way the result is an :class:`Outcome` the composer inspects; the
exception raised by :func:`abort` is only the unwinding mechanism.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, NoReturn

from tinyhooks.errors import ConfigurationError


class HookAbort(BaseException):
    """Raised by :func:`abort` to unwind out of a ``before`` hook body."""


def abort() -> NoReturn:
    """Stop the current call from inside a ``before`` hook.

    Only meaningful for hooks using the ``abort`` terminator; with
    ``return_false`` the signal is not caught and propagates to the caller.
    """
    raise HookAbort()


class Outcome(Enum):
    """Result of running a ``before`` hook body."""

    PROCEED = "proceed"
    ABORT = "abort"


class Terminator(str, Enum):
    """How a ``before`` hook signals termination."""

    ABORT = "abort"
    RETURN_FALSE = "return_false"

    @classmethod
    def parse(cls, value: str | Terminator) -> Terminator:
        """Convert a terminator name to a Terminator.

        Raises:
            ConfigurationError: If ``value`` is not a recognized terminator
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ConfigurationError(f"terminator must be one of {valid}, not {value!r}") from None


def run_before(
    terminator: Terminator,
    body: Callable[..., Any],
    receiver: Any,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> Outcome:
    """Run a ``before`` hook body and report whether it terminated the call.

    Args:
        terminator: Policy deciding what counts as termination
        body: Hook body, called as ``body(receiver, *args, **kwargs)``
        receiver: Instance (or class) the operation was called on
        args: Positional arguments of the original call
        kwargs: Keyword arguments of the original call

    Returns:
        Outcome.ABORT if termination was signaled, Outcome.PROCEED otherwise
    """
    if terminator is Terminator.ABORT:
        try:
            body(receiver, *args, **kwargs)
        except HookAbort:
            return Outcome.ABORT
        return Outcome.PROCEED

    if body(receiver, *args, **kwargs) is False:
        return Outcome.ABORT
    return Outcome.PROCEED
