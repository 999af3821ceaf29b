"""Test plugin contributing an action that writes logs at every level."""

from typing import List

import structlog

from launchkit.action import Action, FnRuntime
from launchkit.plugins import Plugin, PluginInfo

ACTION_YAML = """
runtime: plugin
action:
  title: Test Plugin - Log levels
"""

logger = structlog.get_logger(__name__)


async def log_levels(action: Action) -> None:
    logger.debug("this is DEBUG log")
    logger.info("this is INFO log")
    logger.warning("this is WARN log")
    logger.error("this is ERROR log")


async def discover_actions() -> List[Action]:
    a = Action.from_yaml("testplugin:log-levels", ACTION_YAML)
    a.set_runtime(FnRuntime(log_levels))
    return [a]


plugin = Plugin(
    name="loglevels",
    info=PluginInfo(name="loglevels", description="Outputs logs"),
    discover_actions=discover_actions,
)
