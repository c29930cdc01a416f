"""Visibility rules for hook targets.

An operation is non-public when its name starts with an underscore and it
is not a dunder (``__name__``-style) protocol method. Name-mangled methods
(``__secret`` stored as ``_Owner__secret``) are therefore non-public too.
"""

from __future__ import annotations

import logging
from enum import Enum

from tinyhooks.errors import PrivateError

logger = logging.getLogger(__name__)


class Visibility(str, Enum):
    """Visibility of an operation."""

    PUBLIC = "public"
    PRIVATE = "private"


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def visibility_of(name: str) -> Visibility:
    """Get the visibility implied by an operation name.

    Args:
        name: Operation name as stored on the class

    Returns:
        Visibility.PRIVATE for ``_name`` and mangled names, PUBLIC otherwise
    """
    if name.startswith("_") and not is_dunder(name):
        return Visibility.PRIVATE
    return Visibility.PUBLIC


def is_public(name: str) -> bool:
    return visibility_of(name) is Visibility.PUBLIC


def check_visibility(owner: str, name: str, public_only: bool) -> None:
    """Reject non-public targets while public-only mode is on.

    Args:
        owner: Qualified name of the hookable unit (for the error message)
        name: Target operation name
        public_only: Whether the unit currently restricts hooks to public operations

    Raises:
        PrivateError: If ``name`` is non-public and ``public_only`` is set
    """
    if public_only and not is_public(name):
        logger.debug("Refusing hook on private operation '%s' of %s", name, owner)
        raise PrivateError(owner, name)
