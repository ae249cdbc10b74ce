"""
Recovery of labels from default-format (``carbon``) paths.

The layout is ``<prefix><name>.<label>.<value>.<label>.<value>...`` with the
name and values escaped. Because ``.`` never appears unescaped inside a name
or value, splitting on ``.`` is unambiguous.
"""

from __future__ import annotations

from graphite_bridge.core.errors import FormatError
from graphite_bridge.paths.escape import unescape
from graphite_bridge.paths.models import METRIC_NAME_LABEL

SEPARATOR = "."


def metric_labels_from_path(path: str, prefix: str) -> list[tuple[str, str]]:
    """
    Decode a stored path back into an ordered label list.

    Example:
        >>> metric_labels_from_path("prometheus-prefix.test.owner.team-X", "prometheus-prefix")
        [('__name__', 'test'), ('owner', 'team-X')]

    Raises:
        FormatError: If the path does not start with the prefix, has an odd
            number of label segments, an empty name, or a malformed escape
    """
    if not path.startswith(prefix):
        raise FormatError(
            "Path does not start with prefix",
            details={"path": path, "prefix": prefix},
        )

    remainder = path[len(prefix) :].lstrip(SEPARATOR)
    segments = remainder.split(SEPARATOR)
    if not segments[0]:
        raise FormatError("Path has no metric name", details={"path": path})

    label_segments = segments[1:]
    if len(label_segments) % 2:
        raise FormatError(
            "Odd number of label segments in path",
            details={"path": path, "segments": len(label_segments)},
        )

    labels = [(METRIC_NAME_LABEL, unescape(segments[0]))]
    for i in range(0, len(label_segments), 2):
        labels.append((label_segments[i], unescape(label_segments[i + 1])))
    return labels


def metric_from_path(path: str, prefix: str) -> dict[str, str]:
    """
    Decode a stored path into a metric mapping.

    Raises:
        FormatError: As metric_labels_from_path, or on a repeated label name
    """
    metric: dict[str, str] = {}
    for name, value in metric_labels_from_path(path, prefix):
        if name in metric:
            raise FormatError(
                "Duplicate label in path",
                details={"path": path, "label": name},
            )
        metric[name] = value
    return metric
