"""Tests for RuleRegistry target matching."""

import re
import pytest

from pymakefile.exceptions import NoRuleError
from pymakefile.prerequisites import Prerequisites
from pymakefile.recipe import Recipe
from pymakefile.registry import LiteralIndex, RuleRegistry
from pymakefile.rule import Rule
from pymakefile.target import make_target


def make_rule(decl):
    return Rule(make_target(decl), Prerequisites(), Recipe())


class TestLiteralIndex:

    def test_register_and_find(self):
        index = LiteralIndex()
        rule = make_rule("a")
        index.register("a", rule)
        assert index.find("a") is rule
        assert "a" in index
        assert index.find("b") is None
        assert len(index) == 1

    def test_register_replaces(self):
        index = LiteralIndex()
        first, second = make_rule("a"), make_rule("a")
        index.register("a", first)
        index.register("a", second)
        assert index.find("a") is second


class TestRuleRegistryBasic:

    def test_empty_registry(self):
        registry = RuleRegistry()
        assert registry.match("anything") is None
        assert len(registry) == 0
        assert registry.first_literal() is None

    def test_find_rule_raises_when_missing(self):
        registry = RuleRegistry()
        with pytest.raises(NoRuleError) as exc_info:
            registry.find_rule("missing.o")
        assert exc_info.value.target == "missing.o"

    def test_literal_match_is_trivial(self):
        registry = RuleRegistry()
        rule = make_rule("a.out")
        registry.add(rule)

        found, match = registry.find_rule("a.out")
        assert found is rule
        assert match.matched == "a.out"
        assert match.groups == ()
        assert registry.literal_count == 1

    def test_pattern_match_has_groups(self):
        registry = RuleRegistry()
        registry.add(make_rule("*.o"))
        _, match = registry.find_rule("main.o")
        assert match[1] == "main"

    def test_iteration_in_registration_order(self):
        registry = RuleRegistry()
        rules = [make_rule("a"), make_rule("*.b"), make_rule("c")]
        for rule in rules:
            registry.add(rule)
        assert list(registry) == rules


class TestRuleRegistryPriority:
    """Tests for literal priority and last-registered-wins."""

    def test_literal_beats_later_pattern(self):
        registry = RuleRegistry()
        literal = make_rule("main.o")
        registry.add(literal)
        registry.add(make_rule("*.o"))

        rule, _ = registry.find_rule("main.o")
        assert rule is literal

    def test_literal_beats_earlier_pattern(self):
        registry = RuleRegistry()
        registry.add(make_rule("*.o"))
        literal = make_rule("main.o")
        registry.add(literal)

        rule, _ = registry.find_rule("main.o")
        assert rule is literal

    def test_literal_beats_regex(self):
        registry = RuleRegistry()
        literal = make_rule("main.o")
        registry.add(literal)
        registry.add(make_rule(re.compile(r"\.o$")))

        rule, _ = registry.find_rule("main.o")
        assert rule is literal

    def test_last_registered_pattern_wins(self):
        registry = RuleRegistry()
        first = make_rule("*.o")
        second = make_rule(re.compile(r"\.o$"))
        registry.add(first)
        registry.add(second)

        rule, _ = registry.find_rule("main.o")
        assert rule is second

    def test_earlier_pattern_used_when_later_does_not_match(self):
        registry = RuleRegistry()
        first = make_rule("*.o")
        registry.add(first)
        registry.add(make_rule("*.c"))

        rule, _ = registry.find_rule("main.o")
        assert rule is first

    def test_first_literal_is_default(self):
        registry = RuleRegistry()
        registry.add(make_rule("*.o"))
        registry.add(make_rule("app"))
        registry.add(make_rule("lib"))
        assert registry.first_literal() == "app"
