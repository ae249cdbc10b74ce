"""
Rules file loading and validation.

The rules file is YAML::

    prefix: "prometheus."
    format: carbon
    write:
      template_data:
        shared: data.foo
      rules:
      - match: {owner: team-X}
        match_re: {testlabel: ^test:.*$}
        template: 'tmpl_1.{{ shared.shared | escape }}.{{ labels.owner }}'
        continue: true

Everything is validated up front (patterns compiled, templates parsed) so
that a bad rule is reported at load time rather than per metric.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import structlog
import yaml

from graphite_bridge.config.settings import Settings, get_settings
from graphite_bridge.core.errors import ConfigurationError, TemplateError
from graphite_bridge.paths.engine import PathTranslator
from graphite_bridge.paths.models import OutputFormat, Rule, TemplateData
from graphite_bridge.paths.templates import compile_template

logger = structlog.get_logger()

RULE_KEYS = frozenset({"match", "match_re", "template", "continue"})


@dataclass(frozen=True)
class BridgeConfig:
    """Loaded translation configuration, read-only after load."""

    prefix: str = ""
    format: OutputFormat = OutputFormat.PLAIN_PATH
    rules: tuple[Rule, ...] = ()
    template_data: TemplateData = field(default_factory=lambda: MappingProxyType({}))

    def translator(self) -> PathTranslator:
        return PathTranslator(
            rules=self.rules,
            template_data=self.template_data,
            prefix=self.prefix,
            fmt=self.format,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "prefix": self.prefix,
            "format": str(self.format),
            "write": {
                "template_data": _thaw(self.template_data),
                "rules": [rule.to_dict() for rule in self.rules],
            },
        }


def _freeze(value: Any) -> Any:
    """Recursively wrap template data mappings in read-only views."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def parse_format(value: str) -> OutputFormat:
    """Parse a format name such as ``carbon-tags``."""
    try:
        return OutputFormat(value)
    except ValueError:
        raise ConfigurationError(
            f"Unknown output format: {value}",
            details={"valid": ", ".join(f.value for f in OutputFormat)},
        ) from None


def _string_mapping(data: Any, key: str, index: int) -> dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Rule {key} must be a mapping", details={"rule": index})
    for name, value in data.items():
        if not isinstance(name, str) or not isinstance(value, str):
            raise ConfigurationError(
                f"Rule {key} entries must be strings",
                details={"rule": index, "label": name},
            )
    return dict(data)


def parse_rule(data: Any, index: int) -> Rule:
    """
    Validate one rule entry and build a Rule.

    Raises:
        ConfigurationError: On unknown keys, bad value types, invalid
            patterns, or templates that fail to compile
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError("Rule must be a mapping", details={"rule": index})

    unknown = set(data) - RULE_KEYS
    if unknown:
        raise ConfigurationError(
            "Unknown rule keys",
            details={"rule": index, "keys": ", ".join(sorted(map(str, unknown)))},
        )

    match = _string_mapping(data.get("match"), "match", index)
    match_re = _string_mapping(data.get("match_re"), "match_re", index)
    for name, pattern in match_re.items():
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(
                f"Invalid match_re pattern: {e}",
                details={"rule": index, "label": name, "pattern": pattern},
            ) from e

    template = data.get("template")
    if template is not None:
        if not isinstance(template, str):
            raise ConfigurationError("Rule template must be a string", details={"rule": index})
        try:
            compile_template(template)
        except TemplateError as e:
            raise ConfigurationError(e.message, details={"rule": index, **e.details}) from e

    continues = data.get("continue", False)
    if not isinstance(continues, bool):
        raise ConfigurationError("Rule continue must be a boolean", details={"rule": index})

    return Rule.from_dict(
        {"match": match, "match_re": match_re, "template": template, "continue": continues}
    )


def config_from_dict(data: Mapping[str, Any] | None, settings: Settings | None = None) -> BridgeConfig:
    """
    Build a BridgeConfig from already-parsed YAML data.

    Prefix and format fall back to settings when the document omits them.
    """
    settings = settings or get_settings()
    data = data or {}
    if not isinstance(data, Mapping):
        raise ConfigurationError("Configuration root must be a mapping")

    write = data.get("write") or {}
    if not isinstance(write, Mapping):
        raise ConfigurationError("write section must be a mapping")

    template_data = write.get("template_data") or {}
    if not isinstance(template_data, Mapping):
        raise ConfigurationError("write.template_data must be a mapping")

    raw_rules = write.get("rules") or []
    if not isinstance(raw_rules, list):
        raise ConfigurationError("write.rules must be a list")

    prefix = data.get("prefix", settings.default_prefix)
    if not isinstance(prefix, str):
        raise ConfigurationError("prefix must be a string")

    return BridgeConfig(
        prefix=prefix,
        format=parse_format(str(data.get("format", settings.default_format))),
        rules=tuple(parse_rule(rule, index) for index, rule in enumerate(raw_rules)),
        template_data=_freeze(template_data),
    )


def load_config(path: str | Path | None = None, settings: Settings | None = None) -> BridgeConfig:
    """
    Load and validate a rules file.

    Args:
        path: Rules file; defaults to the ``config_file`` setting. With neither,
            an empty configuration (default paths only) is returned.
        settings: Settings override, mainly for tests

    Raises:
        ConfigurationError: If the file is missing, not valid YAML, or invalid
    """
    settings = settings or get_settings()
    config_path = Path(path) if path else (Path(settings.config_file) if settings.config_file else None)

    if config_path is None:
        logger.debug("no_config_file", prefix=settings.default_prefix)
        return config_from_dict({}, settings)

    if not config_path.exists():
        raise ConfigurationError("Configuration file not found", details={"path": str(config_path)})

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", details={"path": str(config_path)}) from e

    config = config_from_dict(data, settings)
    logger.info(
        "config_loaded",
        path=str(config_path),
        rules=len(config.rules),
        format=str(config.format),
    )
    return config
