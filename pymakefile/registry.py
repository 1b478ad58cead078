"""Rule registry: finds the rule that produces a requested target.

Lookup order:
1. Literal index, O(1) dictionary lookup on the exact path
2. Reverse scan of all rules, O(n), last registered wins

A literal rule therefore always beats a pattern rule for its own path,
whatever order they were registered in.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import NoRuleError
from .rule import Rule
from .target import MatchResult


class LiteralIndex:
    """O(1) exact path lookup using dictionary."""

    def __init__(self):
        self._by_path: Dict[str, Rule] = {}

    def register(self, path: str, rule: Rule) -> None:
        """Register ``rule`` for ``path``, replacing any earlier rule."""
        self._by_path[path] = rule

    def find(self, path: str) -> Optional[Rule]:
        return self._by_path.get(path)

    def __contains__(self, path: str) -> bool:
        return path in self._by_path

    def __len__(self) -> int:
        return len(self._by_path)


class RuleRegistry:
    """Ordered collection of rules with a literal fast path.

    Example:
        registry = RuleRegistry()
        registry.add(Rule(make_target('*.o'), Prerequisites(), Recipe()))
        rule, match = registry.find_rule('main.o')
    """

    def __init__(self):
        self._literal = LiteralIndex()
        self._rules: List[Rule] = []

    def add(self, rule: Rule) -> None:
        """Append a rule; literal targets are also indexed by path."""
        if rule.target.is_file_path:
            self._literal.register(rule.target.decl, rule)
        self._rules.append(rule)

    def match(self, name: str) -> Optional[Tuple[Rule, MatchResult]]:
        """Find the rule producing ``name``, or None."""
        rule = self._literal.find(name)
        if rule is not None:
            return rule, MatchResult.literal(name)

        for rule in reversed(self._rules):
            m = rule.match(name)
            if m is not None:
                return rule, m
        return None

    def find_rule(self, name: str) -> Tuple[Rule, MatchResult]:
        """Find the rule producing ``name``.

        Raises:
            NoRuleError: If no rule matches.
        """
        found = self.match(name)
        if found is None:
            raise NoRuleError(name)
        return found

    def first_literal(self) -> Optional[str]:
        """Path of the first literal rule registered, used as default goal."""
        for rule in self._rules:
            if rule.target.is_file_path:
                return rule.target.decl
        return None

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def literal_count(self) -> int:
        """Number of literal targets indexed."""
        return len(self._literal)
