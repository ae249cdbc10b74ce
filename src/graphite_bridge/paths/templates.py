"""
Rule template rendering.

Templates are Jinja2 strings rendered in a sandbox against a context of::

    shared  - operator template data, loaded once with the config
    labels  - the metric's labels, including ``__name__``
    escape  - the path escaper, also available as the ``escape`` filter

so ``tmpl.{{ shared.env | escape }}.{{ labels.owner }}`` is a typical rule.
Undefined fields and syntax errors raise TemplateError.
"""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping

import jinja2
from jinja2 import StrictUndefined
from jinja2.sandbox import SandboxedEnvironment

from graphite_bridge.core.errors import TemplateError
from graphite_bridge.paths.escape import escape_for_template
from graphite_bridge.paths.models import Metric, TemplateData

SHARED_KEY = "shared"
LABELS_KEY = "labels"
ESCAPE_KEY = "escape"


class _PathTemplateEnvironment(SandboxedEnvironment):
    """Sandbox where ``a.b`` on a mapping looks up key ``b`` before attributes."""

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except KeyError:
                return self.undefined(obj=obj, name=attribute)
        return super().getattr(obj, attribute)


def _template_environment() -> SandboxedEnvironment:
    env = _PathTemplateEnvironment(
        autoescape=False,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
    )
    env.filters[ESCAPE_KEY] = escape_for_template
    env.globals[ESCAPE_KEY] = escape_for_template
    return env


_ENV = _template_environment()


@lru_cache(maxsize=1024)
def compile_template(template: str) -> jinja2.Template:
    """
    Compile (and cache) a rule template.

    Raises:
        TemplateError: If the template has a syntax error
    """
    try:
        return _ENV.from_string(template)
    except jinja2.TemplateError as e:
        raise TemplateError(
            f"Invalid template: {e}",
            details={"template": template},
        ) from e


def build_context(labels: Metric, shared: TemplateData | None) -> dict[str, Any]:
    """Fresh render context combining shared data with a read-only labels view."""
    return {
        SHARED_KEY: shared if shared is not None else {},
        LABELS_KEY: MappingProxyType(dict(labels)),
        ESCAPE_KEY: escape_for_template,
    }


def render_template(template: str, labels: Metric, shared: TemplateData | None = None) -> str:
    """
    Render a rule template for one metric.

    Raises:
        TemplateError: On syntax errors, references to undefined fields, or any
            other error raised while rendering (e.g. division by zero)
    """
    compiled = compile_template(template)
    try:
        return compiled.render(build_context(labels, shared))
    except Exception as e:
        raise TemplateError(
            f"Template rendering failed: {e}",
            details={"template": template},
        ) from e
