"""
Translation of labeled metrics into storage paths.

Rules are evaluated in table order. Each matching rule may render a template
path; a matching rule without ``continue`` stops evaluation. The default path
is appended only when no matching rule stopped evaluation, which lets rules
either add paths on top of the default (``continue: true``) or replace or
suppress it (``continue: false``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import structlog

from graphite_bridge.core.errors import TemplateError, ValidationError
from graphite_bridge.paths.formatter import default_path
from graphite_bridge.paths.models import METRIC_NAME_LABEL, Metric, OutputFormat, Rule, TemplateData
from graphite_bridge.paths.rules import rule_matches
from graphite_bridge.paths.templates import render_template

logger = structlog.get_logger()


def paths_from_metric(
    metric: Metric,
    fmt: OutputFormat,
    prefix: str,
    rules: Sequence[Rule] | None = None,
    template_data: TemplateData | None = None,
) -> list[str]:
    """
    Compute every path a metric is written to.

    Args:
        metric: Labels of the metric, ``__name__`` included
        fmt: Layout of the default path
        prefix: Prepended to the default path (not to template paths)
        rules: Ordered rule table
        template_data: Shared data exposed to templates as ``shared``

    Returns:
        Rendered template paths in rule order, followed by the default path
        unless a matching rule stopped evaluation. May be empty.

    Raises:
        ValidationError: If the metric has no ``__name__`` label
        TemplateError: If a matching rule's template fails; no partial result
    """
    if METRIC_NAME_LABEL not in metric:
        raise ValidationError("Metric has no name label", details={"labels": sorted(metric)})

    paths: list[str] = []
    terminated = False

    for index, rule in enumerate(rules or ()):
        if not rule_matches(metric, rule):
            continue

        if rule.template:
            try:
                paths.append(render_template(rule.template, metric, template_data))
            except TemplateError as e:
                e.details.setdefault("rule", index)
                logger.debug(
                    "template_render_failed",
                    rule=index,
                    metric=metric[METRIC_NAME_LABEL],
                    error=e.message,
                )
                raise

        if not rule.continues:
            terminated = True
            break

    if not terminated:
        paths.append(default_path(metric, fmt, prefix))

    return paths


@dataclass(frozen=True)
class PathTranslator:
    """
    Rule table and template data bound together for repeated translation.

    Instances hold no mutable state, so one translator can serve any number
    of concurrent workers.
    """

    rules: tuple[Rule, ...] = ()
    template_data: TemplateData = field(default_factory=dict)
    prefix: str = ""
    fmt: OutputFormat = OutputFormat.PLAIN_PATH

    def paths(self, metric: Metric) -> list[str]:
        return paths_from_metric(metric, self.fmt, self.prefix, self.rules, self.template_data)

    def paths_for_batch(self, metrics: Iterable[Metric]) -> list[tuple[Metric, list[str]]]:
        """
        Translate a batch, dropping metrics that cannot be translated.

        A failing metric is logged and skipped; the remaining metrics are
        still translated.
        """
        results = []
        dropped = 0
        for metric in metrics:
            try:
                results.append((metric, self.paths(metric)))
            except (TemplateError, ValidationError) as e:
                dropped += 1
                logger.warning(
                    "metric_dropped",
                    metric=metric.get(METRIC_NAME_LABEL),
                    error_type=type(e).__name__,
                    error=e.message,
                    **e.details,
                )

        if dropped:
            logger.info("batch_translated", translated=len(results), dropped=dropped)
        return results
