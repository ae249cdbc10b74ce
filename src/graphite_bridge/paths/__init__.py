"""
Bidirectional translation between labeled metrics and graphite paths.

Forward: labeled metric -> one or more paths, driven by an ordered rule table.
Reverse: default-format path + prefix -> labels.
"""

from graphite_bridge.paths.engine import PathTranslator, paths_from_metric
from graphite_bridge.paths.escape import escape, escape_for_template, unescape
from graphite_bridge.paths.formatter import default_path, sorted_label_names
from graphite_bridge.paths.models import (
    METRIC_NAME_LABEL,
    Metric,
    OutputFormat,
    Rule,
    TemplateData,
)
from graphite_bridge.paths.parser import metric_from_path, metric_labels_from_path
from graphite_bridge.paths.rules import matching_rules, rule_matches
from graphite_bridge.paths.templates import compile_template, render_template

__all__ = [
    # Models
    "METRIC_NAME_LABEL",
    "Metric",
    "OutputFormat",
    "Rule",
    "TemplateData",
    # Escaping
    "escape",
    "escape_for_template",
    "unescape",
    # Forward translation
    "default_path",
    "sorted_label_names",
    "rule_matches",
    "matching_rules",
    "compile_template",
    "render_template",
    "paths_from_metric",
    "PathTranslator",
    # Reverse translation
    "metric_labels_from_path",
    "metric_from_path",
]
