"""Action manager: storage, discovery and decoration."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import structlog
from prometheus_client import Counter, Histogram

from ..plugins.base import Plugin, PluginCapability
from .action import Action
from .errors import ActionNotFoundError
from .input import Input


logger = structlog.get_logger(__name__)

# Prometheus metrics
DISCOVERY_DURATION = Histogram(
    "launchkit_discovery_duration_seconds",
    "Time spent by plugins discovering actions",
    ["plugin"],
)

DISCOVERY_FAILURES = Counter(
    "launchkit_discovery_failures_total",
    "Total number of failed plugin discovery calls",
    ["plugin"],
)

ACTIONS_EXECUTED = Counter(
    "launchkit_actions_executed_total",
    "Total number of actions executed",
    ["status"],
)

ACTIONS_DECORATED = Counter(
    "launchkit_actions_decorated_total",
    "Total number of actions passed through decorators",
)

DecoratorFunc = Callable[["Manager", Action], None]


@dataclass
class DiscoveryResult:
    """Actions collected from plugins and per-plugin failures."""

    actions: List[Action] = field(default_factory=list)
    errors: Dict[str, BaseException] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class Manager:
    """Holds actions and the decorators applied to discovered actions."""

    def __init__(self, discovery_timeout: Optional[float] = None) -> None:
        """Initialize the action manager.

        Args:
            discovery_timeout: Maximum seconds a single plugin may spend
                discovering actions, None for no limit
        """
        self.discovery_timeout = discovery_timeout
        self._actions: Dict[str, Action] = {}
        self._decorators: List[DecoratorFunc] = []

        logger.info("Initialized action Manager", discovery_timeout=discovery_timeout)

    def add_decorators(self, *fns: DecoratorFunc) -> None:
        """Register decorators, applied in registration order."""
        self._decorators.extend(fns)

    def decorate(self, action: Action) -> Action:
        """Apply every registered decorator to an action."""
        if not self._decorators:
            return action
        for fn in self._decorators:
            fn(self, action)
        ACTIONS_DECORATED.inc()
        return action

    def add(self, action: Action) -> None:
        """Store an action, replacing one with the same id."""
        if action.id in self._actions:
            logger.warning("Overriding existing action", action=action.id)
        self._actions[action.id] = action

    def get(self, action_id: str) -> Action:
        """Get an action by id.

        Raises:
            ActionNotFoundError: If the action is not registered
        """
        try:
            return self._actions[action_id]
        except KeyError:
            raise ActionNotFoundError(action_id) from None

    def all(self) -> Dict[str, Action]:
        return dict(self._actions)

    async def _discover_plugin(
        self, plugin: Plugin
    ) -> Tuple[str, List[Action], Optional[BaseException]]:
        discover_actions = plugin.discover_actions
        if discover_actions is None:
            return plugin.name, [], None
        start_time = time.time()
        try:
            if self.discovery_timeout is None:
                actions = await discover_actions()
            else:
                actions = await asyncio.wait_for(
                    discover_actions(), timeout=self.discovery_timeout
                )
        except asyncio.TimeoutError:
            err = TimeoutError(
                f"plugin '{plugin.name}' did not finish discovery "
                f"within {self.discovery_timeout}s"
            )
            logger.error(
                "Action discovery timed out",
                plugin=plugin.name,
                timeout=self.discovery_timeout,
            )
            DISCOVERY_FAILURES.labels(plugin=plugin.name).inc()
            return plugin.name, [], err
        except Exception as e:
            logger.error(
                "Action discovery failed",
                plugin=plugin.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            DISCOVERY_FAILURES.labels(plugin=plugin.name).inc()
            return plugin.name, [], e
        finally:
            DISCOVERY_DURATION.labels(plugin=plugin.name).observe(time.time() - start_time)

        logger.debug("Discovered actions", plugin=plugin.name, count=len(actions))
        return plugin.name, list(actions), None

    async def discover(self, plugins: Iterable[Plugin]) -> DiscoveryResult:
        """Collect actions from plugins, decorate and store them.

        Plugins discover concurrently. A failing plugin does not prevent
        others' actions from being collected. Decoration runs afterwards,
        one action at a time.

        Args:
            plugins: Plugins to query; those without discovery are skipped

        Returns:
            Collected actions and per-plugin errors
        """
        discovering = [p for p in plugins if p.has(PluginCapability.ACTION_DISCOVERY)]
        results = await asyncio.gather(*(self._discover_plugin(p) for p in discovering))

        result = DiscoveryResult()
        for name, actions, err in results:
            if err is not None:
                result.errors[name] = err
                continue
            for action in actions:
                self.decorate(action)
                self.add(action)
                result.actions.append(action)

        logger.info(
            "Action discovery completed",
            plugins=len(discovering),
            actions=len(result.actions),
            failed=sorted(result.errors),
        )
        return result

    async def run(self, action_id: str, input: Optional[Input] = None) -> None:
        """Bind input to an action and execute it.

        Raises:
            ActionNotFoundError: If the action is not registered
            ActionError: If the action cannot be resolved or has no runtime
        """
        action = self.get(action_id)
        action.set_input(input or Input())

        start_time = time.time()
        logger.info("Executing action", action=action_id)
        try:
            await action.execute()
        except Exception as e:
            ACTIONS_EXECUTED.labels(status="failed").inc()
            logger.error(
                "Action execution failed",
                action=action_id,
                error=str(e),
                execution_time=time.time() - start_time,
            )
            raise

        ACTIONS_EXECUTED.labels(status="success").inc()
        logger.info(
            "Action execution completed",
            action=action_id,
            execution_time=time.time() - start_time,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get manager statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "registered_actions": len(self._actions),
            "action_ids": sorted(self._actions),
            "decorators": len(self._decorators),
        }
