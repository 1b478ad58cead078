"""Shell recipe with variable injection for YAML-defined rules.

This module provides the ShellRecipe class that runs shell commands
with automatic variable injection from the target, its prerequisites
and the match captures.
"""

import asyncio
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Dict, List, Union

from pymakefile.recipe import RecipeContext

logger = logging.getLogger(__name__)


@dataclass
class ShellRecipe:
    """Shell command recipe with variable injection.

    Variables are injected in TWO ways:
    1. Format string substitution: {target}, {dep_0}, {name}
    2. Environment variables: target=build/main.o, dep_0=src/main.c, name=main

    Available variables:
    - target: the requested target
    - deps: all prerequisites, space-separated
    - dep_0, dep_1, ...: prerequisites by index
    - match_0: the matched text; match_1, ...: positional captures
    - <name>: named captures

    Example:
        template = "cc -c {dep_0} -o {target}"

        With target=build/main.o and prerequisites [src/main.c]:
        - Command: cc -c src/main.c -o build/main.o

    Commands run in order in the build root; the first failure stops.
    """

    commands: Union[str, List[str]]

    def __post_init__(self):
        if isinstance(self.commands, str):
            self.commands = [self.commands]

    def _build_substitutions(self, ctx: RecipeContext) -> Dict[str, str]:
        """Build the substitution dictionary for format strings and env vars."""
        subs: Dict[str, str] = {}

        # Captures: {match_0}, {match_1}, named {module}
        subs['match_0'] = ctx.match.matched
        for i, group in enumerate(ctx.match.groups, start=1):
            if group is not None:
                subs[f'match_{i}'] = group
        for key, value in ctx.match.named.items():
            if value is not None:
                subs[key] = value

        # Prerequisites: {deps}, {dep_0}, {dep_1}
        subs['deps'] = " ".join(ctx.dependencies)
        for i, dep in enumerate(ctx.dependencies):
            subs[f'dep_{i}'] = dep

        subs['target'] = ctx.target
        return subs

    def _format_command(self, template: str, subs: Dict[str, str]) -> str:
        try:
            return template.format(**subs)
        except KeyError as e:
            available = ', '.join(sorted(subs.keys()))
            raise KeyError(
                f"Unknown variable {e} in recipe template. "
                f"Available variables: {available}"
            )

    def _build_environment(self, subs: Dict[str, str]) -> Dict[str, str]:
        """Return a copy of os.environ with the variables added."""
        env = os.environ.copy()
        for key, value in subs.items():
            env[key] = str(value)
        return env

    async def __call__(self, ctx: RecipeContext) -> None:
        """Run the commands.

        Raises:
            subprocess.CalledProcessError: If a command exits non-zero
        """
        subs = self._build_substitutions(ctx)
        env = self._build_environment(subs)

        for template in self.commands:
            cmd = self._format_command(template, subs)
            logger.debug('%s - run: %s', ctx.target, cmd)

            proc = await asyncio.create_subprocess_shell(
                cmd,
                cwd=str(ctx.root),
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
            stdout = stdout.decode('utf-8', 'replace')
            stderr = stderr.decode('utf-8', 'replace')

            if stdout:
                logger.debug('%s - output:\n%s', ctx.target, stdout.rstrip())
            if proc.returncode != 0:
                # Print stderr for debugging
                if stderr:
                    print(stderr, file=sys.stderr)
                raise subprocess.CalledProcessError(
                    proc.returncode, cmd, stdout, stderr,
                )

    def __repr__(self) -> str:
        return f"ShellRecipe({self.commands!r})"
