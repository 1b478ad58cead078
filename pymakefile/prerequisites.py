"""Prerequisite declarations.

A declaration is one of:
- None: no prerequisites
- str: a single prerequisite
- sequence of str: prerequisites in build order (duplicates allowed)
- callable: receives the MatchResult and returns any of the forms above

Example:
    Prerequisites(lambda m: m[1] + '.c').resolve(match)   # ['main.c']
"""

from collections.abc import Callable
from typing import Any, List, Optional

from .exceptions import InvalidRule
from .target import MatchResult


def _normalize(value: Any, origin: str) -> List[str]:
    """Turn a static declaration into a list of target strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, str):
                msg = "%s: prerequisites must be strings. Got '%r' (%s)"
                raise InvalidRule(msg % (origin, item, type(item)))
        return list(value)
    msg = "%s: prerequisites must be a string, a list of strings or a callable. Got '%r' (%s)"
    raise InvalidRule(msg % (origin, value, type(value)))


class Prerequisites:
    """Resolve a prerequisite declaration against a match."""

    def __init__(self, decl: Any = None):
        self.decl = decl
        if not isinstance(decl, Callable):
            # validate static declarations at registration time
            _normalize(decl, 'declaration')

    @property
    def is_dynamic(self) -> bool:
        return isinstance(self.decl, Callable)

    def resolve(self, match: Optional[MatchResult]) -> List[str]:
        """Return the prerequisite target strings for ``match``."""
        if self.is_dynamic:
            return _normalize(self.decl(match), repr(self.decl))
        return _normalize(self.decl, 'declaration')

    def __repr__(self):
        return f'Prerequisites({self.decl!r})'
