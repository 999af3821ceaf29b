"""Action: identity, definition source, bound input and runtime."""

from pathlib import Path
from typing import Optional, Union

from .definition import Definition
from .errors import RuntimeMissingError
from .input import Input
from .loader import BytesLoader, FileLoader, Loader
from .processors import LoadContext
from .runtime import Runtime


class Action:
    """A nameable, executable unit.

    The raw definition describes declared parameters and is loaded once.
    The resolved definition depends on bound input and is reloaded after
    the input changes.
    """

    def __init__(
        self,
        id: str,
        loader: Loader,
        fpath: Optional[str] = None,
        wd: Optional[str] = None,
        discovery_dir: Optional[str] = None,
    ) -> None:
        self.id = id
        self.loader = loader
        self.fpath = fpath
        self.wd = wd
        self.discovery_dir = discovery_dir

        self._input = Input()
        self._runtime: Optional[Runtime] = None
        self._raw_def: Optional[Definition] = None
        self._def: Optional[Definition] = None

    @classmethod
    def from_yaml(cls, id: str, data: Union[bytes, str]) -> "Action":
        """Create an action from in-memory YAML content."""
        return cls(id, BytesLoader(data))

    @classmethod
    def from_file(
        cls, id: str, path: Union[str, Path], discovery_dir: Optional[str] = None
    ) -> "Action":
        """Create an action from a YAML file."""
        return cls(id, FileLoader(path), fpath=str(path), discovery_dir=discovery_dir)

    @property
    def input(self) -> Input:
        return self._input

    def set_input(self, input: Input) -> None:
        """Bind input values, filling undeclared ones from defaults."""
        self._input = input.apply_defaults(self.raw_definition())
        self._def = None

    @property
    def runtime(self) -> Optional[Runtime]:
        return self._runtime

    def set_runtime(self, runtime: Runtime) -> None:
        self._runtime = runtime

    def raw_definition(self) -> Definition:
        """Definition with template expressions left unresolved.

        Environment tokens are expanded with the action's predefined variables,
        so parameter defaults may use them.
        """
        if self._raw_def is None:
            self._raw_def = self.loader.load_raw(LoadContext(action=self))
        return self._raw_def

    def ensure_loaded(self) -> Definition:
        """Resolve the definition against the bound input."""
        if self._def is None:
            self._def = self.loader.load(LoadContext(action=self))
        return self._def

    def action_def(self) -> Definition:
        """Resolved definition if available, the raw one otherwise."""
        if self._def is not None:
            return self._def
        return self.raw_definition()

    async def execute(self) -> None:
        """Resolve the definition and run the attached runtime.

        Raises:
            RuntimeMissingError: If no runtime is attached
            ActionLoadError: If the definition cannot be resolved
        """
        if self._runtime is None:
            raise RuntimeMissingError(self.id)
        self.ensure_loaded()
        await self._runtime.execute(self)

    def __repr__(self) -> str:
        return f"Action(id={self.id!r}, runtime={self._runtime!r})"
