"""Programmable, Make-like build orchestration.

Rules map a target (literal path, glob or regex) to prerequisites and a
recipe. make() works out which targets are stale and runs only the
recipes it needs, each at most once per call.

Example:
    import asyncio
    from pymakefile import Makefile

    async def copy(ctx):
        await ctx.write_target(await ctx.read_dependency())

    mk = Makefile()
    mk.add_rule('recursive.a.out', 'a.js',
                lambda ctx: ctx.write_target('A'))
    mk.add_rule('recursive.b.out', 'recursive.a.out', copy)

    asyncio.run(mk.make('recursive.b.out'))
"""

from .exceptions import (
    MakeError, InvalidRule, RuleNotFound, NoRuleError,
    NoDefaultTargetError, CyclicDependencyError, RecipeError,
)
from .target import (
    Target, TargetKind, LiteralTarget, GlobTarget, RegexTarget,
    MatchResult, make_target,
)
from .prerequisites import Prerequisites
from .recipe import Recipe, RecipeContext
from .rule import Rule
from .registry import RuleRegistry
from .make import BuildSession
from .makefile import Makefile

__all__ = [
    # Errors
    'MakeError', 'InvalidRule', 'RuleNotFound', 'NoRuleError',
    'NoDefaultTargetError', 'CyclicDependencyError', 'RecipeError',
    # Targets
    'Target', 'TargetKind', 'LiteralTarget', 'GlobTarget', 'RegexTarget',
    'MatchResult', 'make_target',
    # Rules
    'Prerequisites', 'Recipe', 'RecipeContext', 'Rule', 'RuleRegistry',
    # Engine
    'BuildSession', 'Makefile',
]
