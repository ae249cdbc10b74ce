"""Root test configuration."""

import logging

import pytest
import structlog
import yaml

from graphite_bridge.config.loader import config_from_dict
from graphite_bridge.config.settings import Settings


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def settings():
    """Settings isolated from GRAPHITE_BRIDGE_* variables and .env files."""
    return Settings(_env_file=None, config_file=None, default_prefix="", default_format="carbon")


RULES_YAML = """
write:
  template_data:
    shared: data.foo
  rules:
  - match:
      owner: team-X
    match_re:
      testlabel: ^test:.*$
    template: 'tmpl_1.{{ shared.shared | escape }}.{{ labels.owner }}'
    continue: true
  - match:
      owner: team-X
      testlabel2: test:value2
    template: 'tmpl_2.{{ labels.owner }}.{{ shared.shared }}'
    continue: false
  - match:
      owner: team-Y
    template: 'tmpl_3.{{ labels.owner }}.{{ shared.shared }}'
    continue: false
  - match:
      owner: team-Z
    continue: false
"""


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML)
    return path


@pytest.fixture
def rules_config(settings):
    """The four-rule table above, loaded in memory."""
    return config_from_dict(yaml.safe_load(RULES_YAML), settings)
