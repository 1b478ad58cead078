"""YAML rule runner and command line entry point."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

from pymakefile.exceptions import MakeError, NoRuleError
from pymakefile.makefile import Makefile

from .parser import parse_yaml_file
from .converter import yaml_to_makefile

logger = logging.getLogger(__name__)


def load_yaml(
    yaml_path: Union[str, Path],
    root: Optional[Union[str, Path]] = None,
    verbose: bool = False,
) -> Makefile:
    """Load a YAML rule file into a Makefile.

    A relative ``root`` in the file's config is taken relative to the
    YAML file itself.
    """
    yaml_path = Path(yaml_path)
    rule_file = parse_yaml_file(yaml_path)

    if root is None:
        root = yaml_path.parent / rule_file.config.get('root', '.')

    mk = yaml_to_makefile(rule_file, root=root, verbose=verbose)
    logger.debug('loaded %d rule(s) from %s', len(mk.rules), yaml_path)
    return mk


def default_goals(yaml_path: Union[str, Path]) -> List[Optional[str]]:
    """Goals used when none are given: config 'default' or first literal."""
    config = parse_yaml_file(yaml_path).config
    return [config.get('default')]


def run_yaml(
    yaml_path: Union[str, Path],
    targets: Optional[List[str]] = None,
    root: Optional[Union[str, Path]] = None,
    verbose: bool = False,
) -> Dict[str, bool]:
    """Load a YAML rule file and build ``targets`` in order.

    Each target gets its own make() call, so each starts from fresh
    staleness information.

    Args:
        yaml_path: Path to the YAML file
        targets: Names to build (defaults to config 'default' or the
                 first literal rule)
        root: Override root directory from config
        verbose: Log each recipe run

    Returns:
        Dict mapping each requested target to whether it was rebuilt

    Example:
        result = run_yaml('makefile.yaml', ['build/app'])
        if result['build/app']:
            print("rebuilt")
    """
    mk = load_yaml(yaml_path, root=root, verbose=verbose)
    goals = list(targets) if targets else default_goals(yaml_path)

    async def _build_all():
        results = {}
        for goal in goals:
            results[goal or mk.default_target] = await mk.make(goal)
        return results

    return asyncio.run(_build_all())


def describe(mk: Makefile, targets: List[Optional[str]]) -> List[str]:
    """Describe rules and requested targets without running recipes."""
    lines = [f"Rules ({len(mk.rules)}):"]
    for rule in mk.rules:
        line = f"  - {rule}"
        if rule.doc:
            line += f"  # {rule.doc}"
        lines.append(line)

    for goal in targets:
        goal = goal or mk.default_target
        if goal is None:
            lines.append("No default target")
            continue
        try:
            rule, match = mk.find_rule(goal)
        except NoRuleError:
            lines.append(f"{goal}: no rule")
            continue
        prerequisites = rule.prerequisites.resolve(match)
        lines.append(f"{goal}: rule {rule}")
        lines.append(f"  prerequisites: {', '.join(prerequisites) or '(none)'}")
    return lines


def main(args: Optional[List[str]] = None) -> int:
    """CLI entry point for building targets from a YAML rule file.

    Usage:
        pymake [-f FILE] [options] [targets...]

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    import argparse

    parser = argparse.ArgumentParser(
        description='Build targets from a YAML rule file',
        prog='pymake',
    )
    parser.add_argument(
        'targets',
        nargs='*',
        help='Targets to build (default: config default or first literal rule)',
    )
    parser.add_argument(
        '-f', '--file',
        default='makefile.yaml',
        help='Path to the YAML file (default: makefile.yaml)',
    )
    parser.add_argument(
        '--root',
        type=str,
        default=None,
        help='Override root directory for targets',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log every recipe run and staleness decision',
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show rules and resolved prerequisites without building',
    )

    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        yaml_path = Path(parsed.file)

        if parsed.dry_run:
            mk = load_yaml(yaml_path, root=parsed.root)
            goals = parsed.targets or default_goals(yaml_path)
            print(f"Parsed {yaml_path}:")
            for line in describe(mk, goals):
                print(f"  {line}")
            return 0

        results = run_yaml(
            yaml_path,
            targets=parsed.targets,
            root=parsed.root,
            verbose=parsed.verbose,
        )
        for goal, changed in results.items():
            print(f"{goal}: {'rebuilt' if changed else 'up to date'}")
        return 0

    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MakeError as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
