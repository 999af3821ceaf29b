"""Executable behavior attached to actions."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Callable

import structlog

if TYPE_CHECKING:
    from .action import Action


logger = structlog.get_logger(__name__)

RuntimeFn = Callable[["Action"], Awaitable[None]]


class Runtime(ABC):
    """Base class for action runtimes."""

    @abstractmethod
    async def execute(self, action: "Action") -> None:
        """Execute the action.

        Args:
            action: Action with a resolved definition and bound input

        Raises:
            Exception: Any error raised by the underlying behavior
        """
        pass


class FnRuntime(Runtime):
    """Runtime calling an in-process coroutine function."""

    def __init__(self, fn: RuntimeFn) -> None:
        self.fn = fn

    async def execute(self, action: "Action") -> None:
        logger.debug("Executing function runtime", action=action.id)
        await self.fn(action)

    def __repr__(self) -> str:
        return f"FnRuntime({getattr(self.fn, '__qualname__', self.fn)!r})"
