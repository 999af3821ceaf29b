"""Append-only plugin registry."""

from typing import Iterator, List

import structlog

from .base import Plugin, PluginCapability


logger = structlog.get_logger(__name__)


class PluginError(Exception):
    """Base class for plugin errors."""


class PluginRegistrationError(PluginError):
    """Plugin cannot be registered."""


class RegistryFrozenError(PluginRegistrationError):
    """Registry no longer accepts plugins."""


class PluginInitError(PluginError):
    """Plugin failed to initialize with the application."""

    def __init__(self, plugin: str, cause: BaseException) -> None:
        super().__init__(f"plugin '{plugin}' failed to initialize: {cause}")
        self.plugin = plugin


class PluginRegistry:
    """Ordered plugin list populated during startup.

    Plugins are appended once and never removed. After ``freeze()`` the
    registry is read-only.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._plugins: List[Plugin] = []
        self._frozen = False

    def register(self, plugin: Plugin) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin descriptor

        Raises:
            RegistryFrozenError: If the registry was frozen
            PluginRegistrationError: If a plugin with the same name exists
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"cannot register plugin '{plugin.name}': registry is frozen"
            )
        if any(p.name == plugin.name for p in self._plugins):
            raise PluginRegistrationError(f"plugin '{plugin.name}' is already registered")

        self._plugins.append(plugin)
        logger.debug(
            "Registered plugin",
            plugin=plugin.name,
            capabilities=sorted(c.value for c in plugin.capabilities),
        )

    def freeze(self) -> None:
        """Stop accepting new plugins."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def with_capability(self, capability: PluginCapability) -> List[Plugin]:
        """Plugins providing a capability, in registration order."""
        return [p for p in self._plugins if p.has(capability)]

    def __iter__(self) -> Iterator[Plugin]:
        return iter(list(self._plugins))

    def __len__(self) -> int:
        return len(self._plugins)
