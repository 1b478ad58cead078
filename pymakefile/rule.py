"""Rules bind a target to its prerequisites and recipe."""

from dataclasses import dataclass
from typing import Optional

from .prerequisites import Prerequisites
from .recipe import Recipe
from .target import MatchResult, Target


@dataclass
class Rule:
    """A (target, prerequisites, recipe) triple.

    ``prerequisites`` and ``recipe`` may be replaced in place by
    Makefile.update_rule(); the target never changes. ``doc`` is a
    free-form description shown by `pymake --dry-run`.
    """
    target: Target
    prerequisites: Prerequisites
    recipe: Recipe
    doc: Optional[str] = None

    def match(self, name: str) -> Optional[MatchResult]:
        return self.target.match(name)

    def __str__(self) -> str:
        return str(self.target)
