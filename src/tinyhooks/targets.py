"""Allow/deny policy over the operation names that may receive hooks.

The filter is unrestricted until ``configure`` is called. Configuration
snapshots the candidate names at that moment:

- include only: candidates matching ``include``
- exclude only: candidates not matching ``exclude``
- both: candidates matching ``include``, minus those matching ``exclude``

Patterns are strings or compiled regular expressions and are matched with
``re.search``, so an unanchored pattern matches anywhere in the name.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from tinyhooks.errors import ConfigurationError

logger = logging.getLogger(__name__)

Pattern = str | re.Pattern[str]


def _compile(pattern: Pattern) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


class TargetFilter:
    """Ordered allow-list of hookable operation names.

    Attributes:
        allowed: Names eligible for hooks, or None when unrestricted
    """

    def __init__(self, allowed: Iterable[str] | None = None) -> None:
        self.allowed: tuple[str, ...] | None = tuple(allowed) if allowed is not None else None

    @property
    def restricted(self) -> bool:
        return self.allowed is not None

    def allow(self, name: str) -> bool:
        """Check whether ``name`` may receive hooks."""
        return self.allowed is None or name in self.allowed

    def configure(
        self,
        candidates: Iterable[str],
        include: Pattern | None = None,
        exclude: Pattern | None = None,
    ) -> tuple[str, ...]:
        """Restrict the filter to the candidates selected by the patterns.

        Args:
            candidates: Operation names eligible before filtering
            include: Pattern a name must match
            exclude: Pattern a name must not match

        Returns:
            The new allow-list

        Raises:
            ConfigurationError: If neither pattern is given
        """
        if include is None and exclude is None:
            raise ConfigurationError("target() requires an include or exclude pattern")

        names = list(dict.fromkeys(candidates))
        if include is not None:
            include_re = _compile(include)
            names = [name for name in names if include_re.search(name)]
        if exclude is not None:
            exclude_re = _compile(exclude)
            names = [name for name in names if not exclude_re.search(name)]

        self.allowed = tuple(names)
        logger.debug("Target filter configured (include=%r, exclude=%r): %s", include, exclude, names)
        return self.allowed

    def copy(self) -> TargetFilter:
        return TargetFilter(self.allowed)

    def __repr__(self) -> str:
        if self.allowed is None:
            return "TargetFilter(unrestricted)"
        return f"TargetFilter({list(self.allowed)!r})"
