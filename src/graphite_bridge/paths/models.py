"""
Core data models for metric/path translation.

A metric is a plain mapping of label name to label value in which the
reserved ``__name__`` label holds the metric name. Rules and template data
are loaded once and shared read-only by every translation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping

from graphite_bridge.core.errors import ConfigurationError

# Reserved label holding the metric name
METRIC_NAME_LABEL = "__name__"

Metric = Mapping[str, str]
TemplateData = Mapping[str, Any]


class OutputFormat(StrEnum):
    """Path layouts understood by the storage backend."""

    PLAIN_PATH = "carbon"  # name.label.value.label.value
    TAGGED_PATH = "carbon-tags"  # name;label=value;label=value
    BRACE_TAGGED = "carbon-openmetrics"  # name{label="value",label="value"}


@dataclass(frozen=True)
class Rule:
    """
    A single entry of the ordered write-rule table.

    Attributes:
        match: Label name to exact value; every pair must hold
        match_re: Label name to compiled pattern; every pattern must be found in the value
        template: Jinja2 template rendered into a path when the rule matches
        continues: Keep evaluating later rules after this one matched
    """

    match: Mapping[str, str] = field(default_factory=dict)
    match_re: Mapping[str, re.Pattern[str]] = field(default_factory=dict)
    template: str | None = None
    continues: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Rule:
        """
        Build a rule from its configuration form (``continue`` key included).

        Raises:
            ConfigurationError: If ``continue`` is not a boolean
        """
        continues = data.get("continue", False)
        if not isinstance(continues, bool):
            raise ConfigurationError("Rule continue must be a boolean", details={"continue": continues})

        return cls(
            match=dict(data.get("match") or {}),
            match_re={name: re.compile(pattern) for name, pattern in (data.get("match_re") or {}).items()},
            template=data.get("template") or None,
            continues=continues,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "match": dict(self.match),
            "match_re": {name: pattern.pattern for name, pattern in self.match_re.items()},
            "template": self.template,
            "continue": self.continues,
        }
