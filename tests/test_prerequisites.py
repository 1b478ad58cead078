"""Tests for prerequisite declarations."""

import pytest

from pymakefile.exceptions import InvalidRule
from pymakefile.prerequisites import Prerequisites
from pymakefile.target import MatchResult, make_target


class TestStaticPrerequisites:

    def test_none_is_empty(self):
        assert Prerequisites().resolve(None) == []

    def test_single_string(self):
        assert Prerequisites("a.js").resolve(None) == ["a.js"]

    def test_list_keeps_order_and_duplicates(self):
        prereq = Prerequisites(["b", "a", "b"])
        assert prereq.resolve(None) == ["b", "a", "b"]

    def test_tuple_accepted(self):
        assert Prerequisites(("a", "b")).resolve(None) == ["a", "b"]

    def test_resolve_returns_copy(self):
        decl = ["a"]
        result = Prerequisites(decl).resolve(None)
        result.append("b")
        assert decl == ["a"]

    def test_non_string_item_rejected_at_construction(self):
        with pytest.raises(InvalidRule):
            Prerequisites(["a", 1])

    def test_bad_type_rejected_at_construction(self):
        with pytest.raises(InvalidRule):
            Prerequisites({"a": 1})


class TestDynamicPrerequisites:

    def test_callable_receives_match(self):
        match = make_target("*.md5.out").match("glob.md5.out")
        prereq = Prerequisites(lambda m: m[1] + ".js")
        assert prereq.is_dynamic
        assert prereq.resolve(match) == ["glob.js"]

    def test_callable_may_return_list(self):
        prereq = Prerequisites(lambda m: ["x", "y"])
        assert prereq.resolve(MatchResult.literal("t")) == ["x", "y"]

    def test_callable_may_return_none(self):
        prereq = Prerequisites(lambda m: None)
        assert prereq.resolve(MatchResult.literal("t")) == []

    def test_callable_evaluated_every_time(self):
        calls = []

        def decl(m):
            calls.append(m)
            return "a"

        prereq = Prerequisites(decl)
        prereq.resolve(MatchResult.literal("t"))
        prereq.resolve(MatchResult.literal("t"))
        assert len(calls) == 2

    def test_bad_callable_result_rejected(self):
        prereq = Prerequisites(lambda m: 3)
        with pytest.raises(InvalidRule):
            prereq.resolve(MatchResult.literal("t"))
