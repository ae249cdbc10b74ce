"""
graphite-bridge configuration.

- Pydantic-based settings (GRAPHITE_BRIDGE_ environment variables, .env files)
- YAML rules file loading with validation at load time
"""

from graphite_bridge.config.loader import (
    BridgeConfig,
    config_from_dict,
    load_config,
    parse_format,
    parse_rule,
)
from graphite_bridge.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "BridgeConfig",
    "config_from_dict",
    "load_config",
    "parse_format",
    "parse_rule",
]
