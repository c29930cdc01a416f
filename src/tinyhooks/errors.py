"""Exception types raised while defining and dispatching hooks.

All of these are configuration-time errors except ``MissingOperationError``,
which is also raised at call time when a hook body or guard referenced by
name cannot be resolved on the receiver.
"""

from __future__ import annotations


class HookError(Exception):
    """Base class for tinyhooks errors."""


class ConfigurationError(HookError, ValueError):
    """A hook or filter was declared with invalid arguments."""


class TargetError(HookError):
    """The target operation is not in the unit's allow-list."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(f"{name} is not a target of {owner}; check the include/exclude patterns given to target().")
        self.owner = owner
        self.name = name


class PrivateError(HookError):
    """Hooking a non-public operation while public-only mode is on."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(
            f"Public only mode is on and hooks for private methods ({name} for this time) are not available."
        )
        self.owner = owner
        self.name = name


class MissingOperationError(HookError, AttributeError):
    """No operation with the given name exists on the owner or receiver."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(f"undefined method '{name}' for {owner}")
        self.owner = owner
        self.name = name
