"""Registry of pristine operation implementations.

Stores, per hookable unit, the implementation each operation had before
the first hook was defined for it. Entries are written once and never
replaced, so a registry never holds a composed chain.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)


class OriginalRegistry:
    """First-write-wins mapping from operation name to implementation."""

    def __init__(self, entries: dict[str, Any] | None = None) -> None:
        self._entries: dict[str, Any] = dict(entries or {})

    def record(self, name: str, impl: Any) -> bool:
        """Store ``impl`` under ``name`` unless an entry already exists.

        Args:
            name: Operation name
            impl: Raw class attribute (function or method descriptor)

        Returns:
            True if the entry was written, False if one was already present
        """
        if name in self._entries:
            return False
        self._entries[name] = impl
        logger.debug("Recorded original implementation of '%s'", name)
        return True

    def lookup(self, name: str, current: Any = None) -> Any:
        """Get the pristine implementation, falling back to ``current``.

        Args:
            name: Operation name
            current: Implementation to return when ``name`` was never hooked

        Returns:
            The recorded implementation or ``current``
        """
        return self._entries.get(name, current)

    def names(self) -> list[str]:
        return list(self._entries)

    def copy(self) -> OriginalRegistry:
        return OriginalRegistry(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"OriginalRegistry({sorted(self._entries)!r})"
