"""Input values bound to a single action invocation."""

from typing import Dict, Mapping, Optional, Set

from .definition import Definition, ParamValue, ParametersList


class Input:
    """Argument and option values with tracking of explicitly supplied names.

    Values passed to the constructor count as supplied by the caller.
    Values filled from declared defaults do not.
    """

    def __init__(
        self,
        args: Optional[Mapping[str, ParamValue]] = None,
        opts: Optional[Mapping[str, ParamValue]] = None,
    ) -> None:
        self._args: Dict[str, ParamValue] = dict(args or {})
        self._opts: Dict[str, ParamValue] = dict(opts or {})
        self._args_changed: Set[str] = set(self._args)
        self._opts_changed: Set[str] = set(self._opts)

    def args(self) -> Dict[str, ParamValue]:
        return dict(self._args)

    def opts(self) -> Dict[str, ParamValue]:
        return dict(self._opts)

    def arg(self, name: str) -> ParamValue:
        return self._args.get(name)

    def opt(self, name: str) -> ParamValue:
        return self._opts.get(name)

    def set_arg(self, name: str, value: ParamValue) -> None:
        self._args[name] = value
        self._args_changed.add(name)

    def set_opt(self, name: str, value: ParamValue) -> None:
        self._opts[name] = value
        self._opts_changed.add(name)

    def is_arg_changed(self, name: str) -> bool:
        """Check if the argument was explicitly supplied."""
        return name in self._args_changed

    def is_opt_changed(self, name: str) -> bool:
        """Check if the option was explicitly supplied."""
        return name in self._opts_changed

    def apply_defaults(self, definition: Definition) -> "Input":
        """Return a copy with unsupplied parameters set to their defaults."""
        result = Input()
        result._args = _with_defaults(self._args, definition.action.arguments)
        result._opts = _with_defaults(self._opts, definition.action.options)
        result._args_changed = set(self._args_changed)
        result._opts_changed = set(self._opts_changed)
        return result

    def __repr__(self) -> str:
        return f"Input(args={self._args!r}, opts={self._opts!r})"


def _with_defaults(
    values: Dict[str, ParamValue], params: ParametersList
) -> Dict[str, ParamValue]:
    result = {p.name: p.default for p in params}
    result.update(values)
    return result
