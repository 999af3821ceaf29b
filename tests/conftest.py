"""Pytest configuration and fixtures for launchkit tests."""

import pytest

from launchkit.action import Action, Input, Manager
from launchkit.app import App
from launchkit.config import LaunchkitSettings
from launchkit.plugins import PluginRegistry
from launchkit.utils import setup_logging


ACTION_YAML = """
runtime: plugin
action:
  title: Greet {{ .name }}
  description: Says hello to ${GREET_TARGET}
  arguments:
    - name: name
      default: world
    - name: my-name
      default: anon
  options:
    - name: loud
      type: boolean
      default: false
    - name: count
      type: integer
      default: 1
"""


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Send logs to stderr so stdout stays assertable."""
    setup_logging("DEBUG", "plain")


@pytest.fixture
def launchkit_settings():
    """Provide test application settings."""
    return LaunchkitSettings(
        log_level="DEBUG",
        discovery_timeout=5,
        fail_on_discovery_error=False,
        metrics_enabled=False,
    )


@pytest.fixture
def registry():
    """Provide an empty plugin registry."""
    return PluginRegistry()


@pytest.fixture
def app(launchkit_settings, registry):
    """Provide an application with an empty registry."""
    return App(settings=launchkit_settings, registry=registry)


@pytest.fixture
def manager():
    """Provide an action manager with a short discovery timeout."""
    return Manager(discovery_timeout=1)


@pytest.fixture
def sample_yaml():
    """Provide sample action content."""
    return ACTION_YAML


@pytest.fixture
def sample_action(sample_yaml):
    """Provide an action built from sample content."""
    return Action.from_yaml("test:greet", sample_yaml)


@pytest.fixture
def bind_input():
    """Bind input to an action and return the action."""

    def _bind(action, args=None, opts=None):
        action.set_input(Input(args=args, opts=opts))
        return action

    return _bind
