"""
Rule matching against labeled metrics.

A rule matches when every exact predicate holds and every pattern predicate
finds a match somewhere in the label value (``re.search``; anchoring is up to
the rule author). A predicate on a label the metric lacks fails the rule.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from graphite_bridge.paths.models import Metric, Rule


def rule_matches(metric: Metric, rule: Rule) -> bool:
    """Check whether a metric satisfies all predicates of a rule."""
    for name, expected in rule.match.items():
        if metric.get(name) != expected:
            return False

    for name, pattern in rule.match_re.items():
        value = metric.get(name)
        if value is None or pattern.search(value) is None:
            return False

    return True


def matching_rules(metric: Metric, rules: Iterable[Rule]) -> Iterator[Rule]:
    """Yield the rules a metric matches, in table order."""
    return (rule for rule in rules if rule_matches(metric, rule))
