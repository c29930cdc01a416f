"""Before/after/around hooks for methods of Python classes.

This package lets a class attach interception logic to its own (or its
bases') methods without touching their definitions, and restore the
original behaviour later:
- Stacked hooks: every new hook wraps the current chain
- Termination: a before hook can stop the call via abort() or by returning False
- Guards: a predicate on the receiver decides whether a hook's body runs
- Scope inheritance: subclasses copy their parent's hook state
- Target policy: allow/deny patterns and public-only mode

Formal Model:
    Chain Cₙ = Lₙ ∘ Lₙ₋₁ ∘ … ∘ L₁ ∘ original

    before hooks run Lₙ … L₁, after hooks run L₁ … Lₙ,
    around hooks nest with Lₙ outermost.
"""

from tinyhooks.composer import HookKind, compose
from tinyhooks.errors import (
    ConfigurationError,
    HookError,
    MissingOperationError,
    PrivateError,
    TargetError,
)
from tinyhooks.hookable import HookState, Hookable, after, around, before, derive
from tinyhooks.terminators import HookAbort, Outcome, Terminator, abort
from tinyhooks.visibility import Visibility, visibility_of

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "HookAbort",
    "HookError",
    "HookKind",
    "HookState",
    "Hookable",
    "MissingOperationError",
    "Outcome",
    "PrivateError",
    "TargetError",
    "Terminator",
    "Visibility",
    "abort",
    "after",
    "around",
    "before",
    "compose",
    "derive",
    "visibility_of",
]
