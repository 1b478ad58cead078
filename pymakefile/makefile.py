"""Makefile: register rules and build targets.

Example:
    import asyncio
    from pymakefile import Makefile

    mk = Makefile('project/')
    mk.add_rule('build/a.txt', 'src/a.txt',
                lambda ctx: ctx.target_path.write_text('A'))
    asyncio.run(mk.make('build/a.txt'))
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .exceptions import NoDefaultTargetError, RuleNotFound
from .make import BuildSession
from .prerequisites import Prerequisites
from .recipe import Recipe
from .registry import RuleRegistry
from .rule import Rule
from .target import make_target

logger = logging.getLogger(__name__)


class Makefile:
    """A set of rules plus the directory they build in.

    Attributes:
        root: Directory relative target paths are resolved against
              (defaults to the current working directory)
        verbose: Log every recipe run at INFO level
    """

    def __init__(self, root: Union[str, Path, None] = None, verbose: bool = False):
        self.root = Path.cwd() if root is None else Path(root)
        self.verbose = verbose
        self._registry = RuleRegistry()
        self._by_decl: Dict[Any, Rule] = {}

    def add_rule(self, target, prerequisites=None,
                 recipe: Optional[Callable] = None,
                 doc: Optional[str] = None) -> Rule:
        """Register a new rule.

        @param target: literal path, glob string or compiled regex
        @param prerequisites: None, string, list of strings, or callable
                              receiving the MatchResult
        @param recipe: callable receiving a RecipeContext, sync or async
        @param doc: optional description
        @return: the new Rule
        """
        rule = Rule(
            make_target(target),
            Prerequisites(prerequisites),
            Recipe(recipe),
            doc=doc,
        )
        self._registry.add(rule)
        self._by_decl[rule.target.decl] = rule
        logger.debug('add rule %s', rule)
        return rule

    def update_rule(self, target, prerequisites=None,
                    recipe: Optional[Callable] = None) -> Rule:
        """Replace prerequisites and recipe of an existing rule in place.

        Raises:
            RuleNotFound: If no rule was registered with this declaration.
        """
        decl = make_target(target).decl
        rule = self._by_decl.get(decl)
        if rule is None:
            raise RuleNotFound(target)
        rule.prerequisites = Prerequisites(prerequisites)
        rule.recipe = Recipe(recipe)
        logger.debug('update rule %s', rule)
        return rule

    def update_or_add_rule(self, target, prerequisites=None,
                           recipe: Optional[Callable] = None) -> Rule:
        if make_target(target).decl in self._by_decl:
            return self.update_rule(target, prerequisites, recipe)
        return self.add_rule(target, prerequisites, recipe)

    @property
    def rules(self) -> List[Rule]:
        """Rules in registration order."""
        return list(self._registry)

    @property
    def default_target(self) -> Optional[str]:
        """First literal target registered, or None."""
        return self._registry.first_literal()

    def find_rule(self, target: str):
        """Return (rule, match) for ``target``; raises NoRuleError."""
        return self._registry.find_rule(target)

    async def make(self, target: Optional[str] = None) -> bool:
        """Bring ``target`` up to date.

        @param target: name to build; defaults to the first literal target
        @return: True if the target was (re)built during this call

        Raises:
            NoDefaultTargetError: No target given and no literal rule.
            NoRuleError: A required target has no rule and no file.
            RecipeError: A recipe failed.
            CyclicDependencyError: A target depends on itself.
        """
        if not target:
            target = self.default_target
            if target is None:
                raise NoDefaultTargetError()
        session = BuildSession(self._registry, self.root, verbose=self.verbose)
        return await session.make(target)
