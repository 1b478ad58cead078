"""Build sessions: staleness detection and memoized recursive execution.

A BuildSession serves one top-level make() call. Each distinct target
is resolved by exactly one asyncio.Task per session; any later or
concurrent request for the same target awaits that same task, so a
prerequisite shared by several dependents runs its recipe once.

Resolution of a target:
1. Find its rule (an existing file without a rule is a source file)
2. Resolve its prerequisites concurrently through the session
3. Decide staleness:
   - target missing on disk -> stale
   - any prerequisite changed during this session -> stale
   - any existing prerequisite newer than the target -> stale
4. Run the recipe if stale; report whether the target changed

Nothing survives the session: a new make() call starts from scratch.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from .exceptions import CyclicDependencyError, NoRuleError
from .recipe import RecipeContext
from .registry import RuleRegistry

logger = logging.getLogger(__name__)


def get_mtime(path: Path) -> Optional[float]:
    """Return modification time of ``path``, or None if it doesn't exist."""
    try:
        return path.stat().st_mtime
    except OSError:
        return None


class BuildSession:
    """Per-call memo of target resolutions.

    Attributes:
        registry: Rules used to find recipes
        root: Directory relative target paths are resolved against
        verbose: Log recipe runs at INFO instead of DEBUG
    """

    def __init__(self, registry: RuleRegistry, root: Union[str, Path],
                 verbose: bool = False):
        self.registry = registry
        self.root = Path(root)
        self.verbose = verbose
        self._memo: Dict[str, 'asyncio.Task[bool]'] = {}
        # target -> prerequisites it waits on, for cycle detection
        self._edges: Dict[str, Set[str]] = {}

    async def make(self, target: str) -> bool:
        """Resolve a top-level target and discard the memo afterwards."""
        try:
            return await self.resolve(target)
        finally:
            self._memo.clear()
            self._edges.clear()

    async def resolve(self, target: str) -> bool:
        """Resolve ``target`` once per session; return whether it changed."""
        task = self._memo.get(target)
        if task is None:
            task = asyncio.ensure_future(self._resolve(target))
            self._memo[target] = task
        return await task

    def _find_path(self, start: str, goal: str) -> Optional[List[str]]:
        """Return a prerequisite chain from ``start`` to ``goal``, if any."""
        stack = [(start, [start])]
        seen = set()
        while stack:
            node, path = stack.pop()
            if node == goal:
                return path
            if node in seen:
                continue
            seen.add(node)
            for nxt in self._edges.get(node, ()):
                stack.append((nxt, path + [nxt]))
        return None

    def _depend(self, target: str, prerequisite: str) -> None:
        """Record that ``target`` waits on ``prerequisite``.

        Raises:
            CyclicDependencyError: If the prerequisite already waits,
                directly or transitively, on ``target``.
        """
        path = self._find_path(prerequisite, target)
        if path is not None:
            raise CyclicDependencyError([target] + path)
        self._edges.setdefault(target, set()).add(prerequisite)

    async def _resolve_prerequisites(self, target: str,
                                     prerequisites: List[str]) -> List[str]:
        """Resolve all prerequisites; return the ones that changed.

        Siblings run concurrently. Every sibling settles before the first
        failure (in declaration order) is re-raised.
        """
        for prerequisite in prerequisites:
            self._depend(target, prerequisite)

        results = await asyncio.gather(
            *(self.resolve(p) for p in prerequisites),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return [p for p, changed in zip(prerequisites, results) if changed]

    def _stale_reason(self, target: str, prerequisites: List[str],
                      changed: List[str]) -> Optional[str]:
        """Explain why ``target`` must be rebuilt, or None if up to date."""
        target_mtime = get_mtime(self.root / target)
        if target_mtime is None:
            return "target does not exist"
        if changed:
            return f"prerequisite {changed[0]!r} changed"
        for prerequisite in prerequisites:
            mtime = get_mtime(self.root / prerequisite)
            if mtime is not None and mtime > target_mtime:
                return f"prerequisite {prerequisite!r} is newer"
        return None

    async def _resolve(self, target: str) -> bool:
        found = self.registry.match(target)
        if found is None:
            if target and get_mtime(self.root / target) is not None:
                logger.debug('%s - source file', target)
                return False
            raise NoRuleError(target)

        # snapshot: update_rule() during the build doesn't affect this run
        rule, match = found
        prerequisites = rule.prerequisites.resolve(match)
        recipe = rule.recipe

        changed = await self._resolve_prerequisites(target, prerequisites)

        reason = self._stale_reason(target, prerequisites, changed)
        if reason is None:
            logger.debug('%s - up to date', target)
            return False

        level = logging.INFO if self.verbose else logging.DEBUG
        logger.log(level, 'make %s (%s)', target, reason)
        context = RecipeContext(
            target=target,
            match=match,
            dependencies=list(prerequisites),
            root=self.root,
        )
        await recipe.execute(context)
        return True
