"""
Default path generation.

Label segments are always emitted in ascending label-name order so that
equivalent metrics produce identical paths regardless of insertion order.
Only values and the metric name are escaped; label names are written as-is.
"""

from __future__ import annotations

from graphite_bridge.core.errors import ValidationError
from graphite_bridge.paths.escape import escape
from graphite_bridge.paths.models import METRIC_NAME_LABEL, Metric, OutputFormat


def sorted_label_names(metric: Metric) -> list[str]:
    """Label names in path order, excluding the metric name label."""
    return sorted(name for name in metric if name != METRIC_NAME_LABEL)


def default_path(metric: Metric, fmt: OutputFormat, prefix: str) -> str:
    """
    Build the default storage path for a metric.

    Examples (prefix ``"p."``, metric ``up{job="api", env="prod"}``):
        carbon              -> p.up.env.prod.job.api
        carbon-tags         -> p.up;env=prod;job=api
        carbon-openmetrics  -> p.up{env="prod",job="api"}

    Raises:
        ValidationError: If the metric has no ``__name__`` label
    """
    if METRIC_NAME_LABEL not in metric:
        raise ValidationError(
            "Metric has no name label",
            details={"labels": sorted(metric)},
        )

    name = escape(metric[METRIC_NAME_LABEL])
    labels = [(label, escape(metric[label])) for label in sorted_label_names(metric)]

    if fmt is OutputFormat.PLAIN_PATH:
        return prefix + name + "".join(f".{label}.{value}" for label, value in labels)
    if fmt is OutputFormat.TAGGED_PATH:
        return prefix + name + "".join(f";{label}={value}" for label, value in labels)
    if fmt is OutputFormat.BRACE_TAGGED:
        tags = ",".join(f'{label}="{value}"' for label, value in labels)
        return prefix + name + "{" + tags + "}"

    raise ValidationError("Unsupported output format", details={"format": str(fmt)})
