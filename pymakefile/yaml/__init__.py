"""YAML-based rule files for pymakefile.

This module provides a declarative YAML format for defining rules with
shell command recipes, turning pymakefile into a make-like tool.

Example makefile.yaml:
    config:
      root: .
      default: build/app

    rules:
      - target: "build/<module>.o"
        prerequisites: "src/<module>.c"
        recipe: "cc -c {dep_0} -o {target}"

      - target: build/app
        prerequisites: [build/main.o, build/util.o]
        recipe: "cc -o {target} {deps}"

Usage:
    from pymakefile.yaml import run_yaml
    result = run_yaml('makefile.yaml')

CLI:
    pymake -f makefile.yaml build/app
    python -m pymakefile.yaml build/app
"""

from .parser import parse_yaml_file, parse_yaml_string, RuleFile, RuleFileError
from .converter import yaml_to_makefile, render_template
from .action import ShellRecipe
from .runner import load_yaml, run_yaml, main

__all__ = [
    'parse_yaml_file',
    'parse_yaml_string',
    'RuleFile',
    'RuleFileError',
    'yaml_to_makefile',
    'render_template',
    'ShellRecipe',
    'load_yaml',
    'run_yaml',
    'main',
]
