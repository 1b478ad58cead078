"""Exceptions raised by pymakefile.

All errors derive from MakeError so callers can catch build failures
with a single except clause.
"""

from typing import Sequence


class MakeError(Exception):
    """Base class for all pymakefile errors."""
    pass


class InvalidRule(MakeError):
    """A rule declaration (target, prerequisites or recipe) is malformed."""
    pass


class RuleNotFound(MakeError):
    """update_rule() was called for a declaration that is not registered."""

    def __init__(self, decl):
        self.decl = decl
        super().__init__(f"no rule registered for {decl!r}")


class NoRuleError(MakeError):
    """Requested target matches no rule and does not exist on disk."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"no rule to make target {target!r}")


class NoDefaultTargetError(MakeError):
    """make() was called without a target and no literal rule exists."""

    def __init__(self):
        super().__init__("no target given and no literal target registered")


class CyclicDependencyError(MakeError):
    """A target (transitively) depends on itself."""

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__("cyclic dependency: " + " -> ".join(self.chain))


class RecipeError(MakeError):
    """A recipe raised an exception.

    The original exception is available as ``cause`` and ``__cause__``.
    """

    def __init__(self, target: str, cause: BaseException):
        self.target = target
        self.cause = cause
        super().__init__(f"recipe for {target!r} failed: {cause!r}")
