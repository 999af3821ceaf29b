"""Errors raised while loading, discovering and running actions."""

from typing import Dict, Iterable, Optional


class ActionError(Exception):
    """Base class for action errors."""


class ActionLoadError(ActionError):
    """Failure to turn action content into a Definition.

    Attributes:
        partial: Content as transformed up to the failing stage, if any
    """

    def __init__(self, message: str, partial: Optional[bytes] = None) -> None:
        super().__init__(message)
        self.partial = partial


class ContentError(ActionLoadError):
    """Action content could not be read."""


class TemplateSyntaxError(ActionLoadError):
    """Action content is not a valid template."""


class UndefinedVariableError(ActionLoadError):
    """Template referenced variables that are not defined."""

    def __init__(self, names: Iterable[str], partial: Optional[bytes] = None) -> None:
        self.names = frozenset(names)
        super().__init__(
            "the following variables were used but never defined: "
            f"{sorted(self.names)}",
            partial,
        )


class StructuralParseError(ActionLoadError):
    """Resolved content does not decode into a valid Definition."""


class ActionNotFoundError(ActionError):
    """No action with the given id is registered."""

    def __init__(self, action_id: str) -> None:
        super().__init__(f"action '{action_id}' not found")
        self.action_id = action_id


class RuntimeMissingError(ActionError):
    """Action has no runtime attached."""

    def __init__(self, action_id: str) -> None:
        super().__init__(f"action '{action_id}' has no runtime attached")
        self.action_id = action_id


class DiscoveryError(ActionError):
    """One or more plugins failed to discover actions."""

    def __init__(self, failures: Dict[str, BaseException]) -> None:
        self.failures = dict(failures)
        details = ", ".join(
            f"{name}: {type(err).__name__}: {err}" for name, err in self.failures.items()
        )
        super().__init__(f"action discovery failed for {len(self.failures)} plugin(s): {details}")
