"""Application container and startup sequence."""

from typing import Any, Dict, Iterable, Optional, Type, TypeVar

import structlog
from prometheus_client import start_http_server

from .action import DiscoveryError, DiscoveryResult, Input, Manager
from .config import LaunchkitSettings
from .plugins import Plugin, PluginCapability, PluginInitError, PluginRegistry
from .utils import setup_logging


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ServiceNotFoundError(LookupError):
    """No service registered for the requested type."""


class App:
    """Service container shared with plugins.

    Startup order: plugins are registered, ``init()`` freezes the registry
    and runs app-init hooks, ``discover()`` collects and decorates actions.
    """

    def __init__(
        self,
        settings: Optional[LaunchkitSettings] = None,
        registry: Optional[PluginRegistry] = None,
    ) -> None:
        """Initialize the application.

        Args:
            settings: Application settings, read from the environment if omitted
            registry: Plugin registry, empty if omitted
        """
        self.settings = settings or LaunchkitSettings()
        self.registry = registry or PluginRegistry()
        self.manager = Manager(discovery_timeout=self.settings.discovery_timeout)

        self._services: Dict[type, Any] = {}
        self._initialized = False

        self.add_service(self)
        self.add_service(self.settings)
        self.add_service(self.registry)
        self.add_service(self.manager)

    def add_service(self, service: Any, cls: Optional[type] = None) -> None:
        """Register a shared service under its type, or under ``cls``."""
        key = cls or type(service)
        if key in self._services:
            logger.warning("Overriding existing service", service=key.__name__)
        self._services[key] = service

    def get_service(self, cls: Type[T]) -> T:
        """Look up a shared service by type.

        Raises:
            ServiceNotFoundError: If no service of that type is registered
        """
        service = self._services.get(cls)
        if service is None:
            # Allow lookup by a base class
            service = next(
                (s for k, s in self._services.items() if issubclass(k, cls)), None
            )
        if service is None:
            raise ServiceNotFoundError(f"service {cls.__name__} is not registered")
        return service

    def init(self) -> None:
        """Freeze the plugin registry and run app-init hooks.

        Raises:
            PluginInitError: If a plugin hook fails
        """
        if self._initialized:
            return

        self.registry.freeze()

        if self.settings.metrics_enabled:
            start_http_server(self.settings.metrics_port)
            logger.info("Started Prometheus metrics server", port=self.settings.metrics_port)

        # Stable sort keeps registration order for equal weights
        plugins = sorted(
            self.registry.with_capability(PluginCapability.APP_INIT), key=lambda p: p.weight
        )
        for plugin in plugins:
            if plugin.on_app_init is None:
                continue
            try:
                plugin.on_app_init(self)
            except Exception as e:
                logger.error("Plugin initialization failed", plugin=plugin.name, error=str(e))
                raise PluginInitError(plugin.name, e) from e
            logger.debug("Initialized plugin", plugin=plugin.name)

        self._initialized = True
        logger.info("Application initialized", plugins=len(self.registry))

    async def discover(self) -> DiscoveryResult:
        """Collect actions from discovery plugins.

        Raises:
            DiscoveryError: If any plugin failed and
                ``fail_on_discovery_error`` is set
        """
        self.init()
        result = await self.manager.discover(self.registry)
        if result.errors and self.settings.fail_on_discovery_error:
            raise DiscoveryError(result.errors)
        return result

    async def run(self, action_id: str, input: Optional[Input] = None) -> None:
        """Execute a registered action."""
        await self.manager.run(action_id, input)


def create_app(
    plugins: Iterable[Plugin] = (), settings: Optional[LaunchkitSettings] = None
) -> App:
    """Configure logging and build an application with plugins registered.

    Args:
        plugins: Plugins to register, in order
        settings: Application settings, read from the environment if omitted

    Returns:
        Application ready for ``init()``
    """
    settings = settings or LaunchkitSettings()
    setup_logging(settings.log_level, settings.log_format)

    registry = PluginRegistry()
    for plugin in plugins:
        registry.register(plugin)

    return App(settings=settings, registry=registry)
