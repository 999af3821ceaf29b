"""Loaders turning action content into definitions."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import structlog
from prometheus_client import Counter

from .definition import Definition, parse_definition
from .errors import ActionLoadError, ContentError
from .processors import (
    EnvProcessor,
    InputProcessor,
    LoadContext,
    LoadProcessor,
    PipeProcessor,
    TemplateEscapeProcessor,
)


logger = structlog.get_logger(__name__)

# Prometheus metrics
ACTION_LOADS = Counter(
    "launchkit_action_loads_total",
    "Total number of action definition loads",
    ["mode", "result"],
)


def default_pipeline() -> LoadProcessor:
    """Environment expansion followed by input templating."""
    return PipeProcessor(EnvProcessor(), InputProcessor())


def raw_pipeline() -> LoadProcessor:
    """Environment expansion keeping template expressions literal."""
    return PipeProcessor(EnvProcessor(), TemplateEscapeProcessor())


class Loader(ABC):
    """Base class for action definition loaders."""

    def __init__(
        self,
        processor: Optional[LoadProcessor] = None,
        raw_processor: Optional[LoadProcessor] = None,
    ) -> None:
        self.processor = processor or default_pipeline()
        self.raw_processor = raw_processor or raw_pipeline()

    @abstractmethod
    def content(self) -> bytes:
        """Get raw action content.

        Raises:
            ContentError: If the content cannot be read
        """
        pass

    def load(self, ctx: LoadContext) -> Definition:
        """Parse content into a Definition with substituted values.

        Args:
            ctx: Load context carrying the action and its bound input

        Returns:
            Fully-resolved definition

        Raises:
            ActionLoadError: If any stage fails
        """
        return self._load(ctx, self.processor, "resolved")

    def load_raw(self, ctx: Optional[LoadContext] = None) -> Definition:
        """Parse content into a Definition keeping template strings as-is.

        Args:
            ctx: Load context used for environment expansion, none by default
        """
        return self._load(ctx or LoadContext(), self.raw_processor, "raw")

    def _load(self, ctx: LoadContext, processor: LoadProcessor, mode: str) -> Definition:
        action_id = ctx.action.id if ctx.action is not None else None
        try:
            content = processor.process(ctx, self.content())
            definition = parse_definition(content)
        except ActionLoadError as e:
            ACTION_LOADS.labels(mode=mode, result=type(e).__name__).inc()
            logger.debug(
                "Failed to load action definition",
                action=action_id,
                mode=mode,
                error=str(e),
            )
            raise

        ACTION_LOADS.labels(mode=mode, result="success").inc()
        logger.debug("Loaded action definition", action=action_id, mode=mode)
        return definition


class BytesLoader(Loader):
    """Loader for content held in memory, e.g. embedded in a plugin."""

    def __init__(self, data: Union[bytes, str], **kwargs: Optional[LoadProcessor]) -> None:
        super().__init__(**kwargs)
        self._data = data.encode("utf-8") if isinstance(data, str) else bytes(data)

    def content(self) -> bytes:
        return self._data


class FileLoader(Loader):
    """Loader reading content from a file on every load."""

    def __init__(self, path: Union[str, Path], **kwargs: Optional[LoadProcessor]) -> None:
        super().__init__(**kwargs)
        self.path = Path(path)

    def content(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise ContentError(f"failed to read action file {self.path}: {e}") from e
