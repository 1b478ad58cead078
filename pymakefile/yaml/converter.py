"""Convert YAML rule definitions into Makefile rules.

Prerequisite strings of glob and regex rules are templates rendered
against the match:
- <name> - named capture
- <1>, <2> - positional captures
- <0> - the whole matched text
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pymakefile.makefile import Makefile
from pymakefile.target import MatchResult, Target, make_target

from .action import ShellRecipe
from .parser import RuleFile

_PLACEHOLDER_RE = re.compile(r'<(\w+)>')


def render_template(template: str, match: MatchResult) -> str:
    """Render a template string with capture values."""
    def _sub(m):
        key = m.group(1)
        try:
            value = match[int(key)] if key.isdigit() else match[key]
        except (IndexError, KeyError):
            return m.group(0)
        return '' if value is None else value
    return _PLACEHOLDER_RE.sub(_sub, template)


class TemplatePrerequisites:
    """Prerequisite callable rendering templates against the match."""

    def __init__(self, templates: List[str]):
        self.templates = list(templates)

    def __call__(self, match: MatchResult) -> List[str]:
        return [render_template(t, match) for t in self.templates]

    def __repr__(self):
        return f'TemplatePrerequisites({self.templates!r})'


def rule_target(rule_dict: Dict[str, Any]) -> Target:
    """Build the Target for a rule definition."""
    if 'regex' in rule_dict:
        return make_target(re.compile(rule_dict['regex']))
    return make_target(rule_dict['target'])


def rule_prerequisites(rule_dict: Dict[str, Any], target: Target):
    """Build the prerequisite declaration for a rule definition."""
    prerequisites = rule_dict.get('prerequisites')
    if prerequisites is None:
        return None
    if isinstance(prerequisites, str):
        prerequisites = [prerequisites]
    if target.is_file_path:
        return list(prerequisites)
    return TemplatePrerequisites(prerequisites)


def rule_recipe(rule_dict: Dict[str, Any]) -> Optional[ShellRecipe]:
    recipe = rule_dict.get('recipe')
    if recipe is None:
        return None
    return ShellRecipe(recipe)


def yaml_to_makefile(
    rule_file: RuleFile,
    root: Union[str, Path, None] = None,
    verbose: bool = False,
) -> Makefile:
    """Create a Makefile holding all rules from a RuleFile.

    Args:
        rule_file: Parsed YAML rule file
        root: Override root (defaults to config root or cwd)
        verbose: Passed to the Makefile

    Returns:
        Makefile with the rules registered in file order
    """
    if root is None:
        root = rule_file.config.get('root', '.')
    mk = Makefile(Path(root).resolve(), verbose=verbose)

    for rule_dict in rule_file.rules:
        target = rule_target(rule_dict)
        mk.add_rule(
            target,
            rule_prerequisites(rule_dict, target),
            rule_recipe(rule_dict),
            doc=rule_dict.get('doc'),
        )

    return mk
