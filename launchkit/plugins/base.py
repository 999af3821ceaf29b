"""Plugin descriptors and capabilities."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable, FrozenSet, List, Optional

if TYPE_CHECKING:
    from ..action.action import Action
    from ..app import App


class PluginCapability(Enum):
    """Capabilities a plugin may provide."""

    INFO = "info"
    ACTION_DISCOVERY = "action_discovery"
    APP_INIT = "app_init"


@dataclass(frozen=True)
class PluginInfo:
    """Static plugin metadata."""

    name: str = ""
    version: str = ""
    description: str = ""
    # Lower weight runs app-init earlier.
    weight: int = 0


DiscoverActionsFn = Callable[[], Awaitable[List["Action"]]]
OnAppInitFn = Callable[["App"], None]


@dataclass(frozen=True)
class Plugin:
    """Plugin registered once at startup.

    Each capability is provided by setting the matching behavior:

    - ``info``: static metadata
    - ``discover_actions``: coroutine function returning contributed actions
    - ``on_app_init``: function receiving the application, typically used to
      register action decorators
    """

    name: str
    info: Optional[PluginInfo] = None
    discover_actions: Optional[DiscoverActionsFn] = None
    on_app_init: Optional[OnAppInitFn] = None

    @property
    def capabilities(self) -> FrozenSet[PluginCapability]:
        caps = set()
        if self.info is not None:
            caps.add(PluginCapability.INFO)
        if self.discover_actions is not None:
            caps.add(PluginCapability.ACTION_DISCOVERY)
        if self.on_app_init is not None:
            caps.add(PluginCapability.APP_INIT)
        return frozenset(caps)

    def has(self, capability: PluginCapability) -> bool:
        return capability in self.capabilities

    @property
    def weight(self) -> int:
        return self.info.weight if self.info is not None else 0
