"""Tests for rule matching."""

import re

import pytest

from graphite_bridge.core.errors import ConfigurationError
from graphite_bridge.paths.models import Rule
from graphite_bridge.paths.rules import matching_rules, rule_matches

METRIC = {
    "__name__": "test:metric",
    "testlabel": "test:value",
    "owner": "team-X",
}


class TestRuleMatches:
    """Tests for rule_matches()."""

    def test_empty_rule_matches_everything(self):
        assert rule_matches(METRIC, Rule()) is True
        assert rule_matches({"__name__": "x"}, Rule()) is True

    def test_exact_match(self):
        assert rule_matches(METRIC, Rule(match={"owner": "team-X"})) is True
        assert rule_matches(METRIC, Rule(match={"owner": "team-Y"})) is False

    def test_exact_match_requires_all_pairs(self):
        rule = Rule(match={"owner": "team-X", "testlabel": "other"})
        assert rule_matches(METRIC, rule) is False

    def test_exact_match_on_name_label(self):
        assert rule_matches(METRIC, Rule(match={"__name__": "test:metric"})) is True

    def test_absent_label_fails(self):
        assert rule_matches(METRIC, Rule(match={"missing": ""})) is False
        assert rule_matches(METRIC, Rule(match_re={"missing": re.compile(".*")})) is False

    def test_pattern_is_searched_not_anchored(self):
        assert rule_matches(METRIC, Rule(match_re={"testlabel": re.compile("value")})) is True

    def test_anchored_pattern(self):
        assert rule_matches(METRIC, Rule(match_re={"testlabel": re.compile("^test:.*$")})) is True
        assert rule_matches(METRIC, Rule(match_re={"testlabel": re.compile("^value")})) is False

    def test_exact_and_pattern_combined(self):
        rule = Rule(match={"owner": "team-X"}, match_re={"testlabel": re.compile("^nope")})
        assert rule_matches(METRIC, rule) is False


class TestMatchingRules:
    def test_preserves_table_order(self):
        first = Rule(template="first")
        second = Rule(match={"owner": "team-Y"}, template="second")
        third = Rule(match={"owner": "team-X"}, template="third")
        assert list(matching_rules(METRIC, [first, second, third])) == [first, third]


class TestRuleFromDict:
    def test_continue_defaults_to_false(self):
        rule = Rule.from_dict({"match": {"owner": "team-X"}})
        assert rule.continues is False
        assert rule.template is None

    def test_patterns_compiled(self):
        rule = Rule.from_dict({"match_re": {"testlabel": "^test"}, "continue": True})
        assert rule.match_re["testlabel"].pattern == "^test"
        assert rule.continues is True

    def test_continue_must_be_boolean(self):
        with pytest.raises(ConfigurationError, match="boolean"):
            Rule.from_dict({"continue": "false"})

    def test_to_dict(self):
        data = {"match": {"a": "b"}, "match_re": {"c": "d+"}, "template": "t", "continue": True}
        assert Rule.from_dict(data).to_dict() == data
