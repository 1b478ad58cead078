"""Recipes and the context they run with.

A recipe is any callable taking a RecipeContext. It may be a plain
function or a coroutine function; awaitable results are awaited before
the target is considered built.

Example:
    async def compile_md5(ctx):
        source = await ctx.read_dependency()
        await ctx.write_target(hashlib.md5(source.encode()).hexdigest())

    mk.add_rule('*.md5', lambda m: m[1], compile_md5)
"""

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import InvalidRule, MakeError, RecipeError
from .target import MatchResult


def _noop(ctx):
    pass


@dataclass
class RecipeContext:
    """Everything a recipe can see about the target being built.

    Attributes:
        target: Requested target name
        match: MatchResult from matching the target against its rule
        dependencies: Resolved prerequisite names, in declaration order
        root: Directory relative paths are resolved against
    """
    target: str
    match: MatchResult
    dependencies: List[str] = field(default_factory=list)
    root: Path = field(default_factory=Path.cwd)

    @property
    def target_path(self) -> Path:
        """Absolute path of the target."""
        return self.root / self.target

    def dependency(self, which: Union[int, str, None] = None) -> str:
        """Select one prerequisite by index or by name.

        The selector may be omitted only when there is exactly one
        prerequisite.

        Raises:
            ValueError: If the selection is ambiguous or names an unknown
                prerequisite.
        """
        if which is None:
            if len(self.dependencies) != 1:
                raise ValueError(
                    f"{self.target!r} has {len(self.dependencies)} "
                    f"prerequisites; pass an index or name to select one"
                )
            return self.dependencies[0]
        if isinstance(which, int):
            try:
                return self.dependencies[which]
            except IndexError:
                raise ValueError(
                    f"{self.target!r} has no prerequisite #{which}"
                )
        if which not in self.dependencies:
            raise ValueError(f"{which!r} is not a prerequisite of {self.target!r}")
        return which

    def dependency_path(self, which: Union[int, str, None] = None) -> Path:
        """Absolute path of the selected prerequisite."""
        return self.root / self.dependency(which)

    async def read_dependency(self, which: Union[int, str, None] = None,
                              encoding: Optional[str] = 'utf-8') -> Union[str, bytes]:
        """Read the content of a prerequisite.

        Returns bytes when ``encoding`` is None.
        """
        path = self.dependency_path(which)
        if encoding is None:
            return await asyncio.to_thread(path.read_bytes)
        return await asyncio.to_thread(path.read_text, encoding=encoding)

    async def write_target(self, content: Union[str, bytes],
                           encoding: str = 'utf-8') -> None:
        """Write ``content`` as the target's output, creating parent dirs."""
        path = self.target_path

        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding=encoding)

        await asyncio.to_thread(_write)


class Recipe:
    """Wrapper around a recipe callable."""

    def __init__(self, decl: Optional[Callable] = None):
        if decl is None:
            decl = _noop
        if not isinstance(decl, Callable):
            msg = "recipe must be callable. Got '%r' (%s)"
            raise InvalidRule(msg % (decl, type(decl)))
        self.decl = decl

    async def execute(self, context: RecipeContext) -> Any:
        """Run the recipe and wait for it to finish.

        Raises:
            RecipeError: Wrapping whatever the recipe raised.
        """
        try:
            result = self.decl(context)
            if inspect.isawaitable(result):
                result = await result
        except MakeError:
            raise
        except Exception as exc:
            raise RecipeError(context.target, exc) from exc
        return result

    def __repr__(self):
        name = getattr(self.decl, '__name__', None) or repr(self.decl)
        return f'Recipe({name})'
