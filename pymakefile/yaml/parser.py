"""YAML parsing and validation for rule files.

This module handles parsing makefile.yaml files and validating their structure.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Any, Union

import yaml

from pymakefile.exceptions import MakeError


@dataclass
class RuleFile:
    """Parsed YAML rule file."""
    config: Dict[str, Any] = field(default_factory=dict)
    rules: List[Dict[str, Any]] = field(default_factory=list)


class RuleFileError(MakeError):
    """Error parsing or validating a YAML rule file."""
    pass


def parse_yaml_file(path: Union[str, Path]) -> RuleFile:
    """Parse and validate a makefile.yaml file.

    Args:
        path: Path to the YAML file

    Returns:
        RuleFile with parsed configuration and rules

    Raises:
        RuleFileError: If the file is invalid or missing required fields
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path) as f:
        return parse_yaml_string(f.read())


def parse_yaml_string(content: str) -> RuleFile:
    """Parse YAML content from a string.

    Args:
        content: YAML content as string

    Returns:
        RuleFile with parsed configuration and rules
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise RuleFileError(f"Invalid YAML syntax: {e}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise RuleFileError("YAML root must be a mapping")

    return _validate_yaml_data(data)


def _validate_yaml_data(data: Dict[str, Any]) -> RuleFile:
    """Validate parsed YAML data structure.

    Raises:
        RuleFileError: If validation fails
    """
    config = data.get('config', {})
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise RuleFileError("'config' must be a mapping")
    for key in ('root', 'default'):
        if key in config and not isinstance(config[key], str):
            raise RuleFileError(f"config '{key}' must be a string")

    rules = data.get('rules', [])
    if rules is None:
        rules = []
    if not isinstance(rules, list):
        raise RuleFileError("'rules' must be a list")

    return RuleFile(
        config=config,
        rules=[_validate_rule(rule, i) for i, rule in enumerate(rules)],
    )


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _validate_rule(rule: Dict[str, Any], index: int) -> Dict[str, Any]:
    """Validate a single rule definition.

    Args:
        rule: Rule dictionary
        index: Index in rules list (for error messages)

    Returns:
        Validated rule dictionary
    """
    if not isinstance(rule, dict):
        raise RuleFileError(f"Rule {index} must be a mapping")

    # Exactly one of target / regex
    if ('target' in rule) == ('regex' in rule):
        raise RuleFileError(
            f"Rule {index} needs exactly one of 'target' or 'regex'"
        )
    key = 'target' if 'target' in rule else 'regex'
    if not isinstance(rule[key], str) or not rule[key]:
        raise RuleFileError(f"Rule {index}: '{key}' must be a non-empty string")
    name = rule[key]
    if key == 'regex':
        try:
            re.compile(name)
        except re.error as e:
            raise RuleFileError(f"Rule {index}: invalid regex {name!r}: {e}")

    prerequisites = rule.get('prerequisites')
    if prerequisites is not None and not (
            isinstance(prerequisites, str) or _is_str_list(prerequisites)):
        raise RuleFileError(
            f"Rule '{name}': 'prerequisites' must be a string or list of strings"
        )

    recipe = rule.get('recipe')
    if recipe is not None and not (isinstance(recipe, str) or _is_str_list(recipe)):
        raise RuleFileError(
            f"Rule '{name}': 'recipe' must be a string or list of strings"
        )

    if 'doc' in rule and not isinstance(rule.get('doc'), str):
        raise RuleFileError(f"Rule '{name}': 'doc' must be a string")

    unknown = set(rule) - {'target', 'regex', 'prerequisites', 'recipe', 'doc'}
    if unknown:
        raise RuleFileError(
            f"Rule '{name}': unknown field(s) {', '.join(sorted(unknown))}"
        )

    return rule
