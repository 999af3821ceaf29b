"""Action definitions, loading pipeline and management."""

from .action import Action
from .definition import DefAction, DefRuntime, Definition, ParameterDef, ParamValue, parse_definition
from .errors import (
    ActionError,
    ActionLoadError,
    ActionNotFoundError,
    ContentError,
    DiscoveryError,
    RuntimeMissingError,
    StructuralParseError,
    TemplateSyntaxError,
    UndefinedVariableError,
)
from .input import Input
from .loader import BytesLoader, FileLoader, Loader
from .manager import DecoratorFunc, DiscoveryResult, Manager
from .processors import (
    EnvProcessor,
    InputProcessor,
    LoadContext,
    LoadProcessor,
    PipeProcessor,
    TemplateEscapeProcessor,
)
from .runtime import FnRuntime, Runtime

__all__ = [
    "Action",
    "ActionError",
    "ActionLoadError",
    "ActionNotFoundError",
    "BytesLoader",
    "ContentError",
    "DecoratorFunc",
    "DefAction",
    "DefRuntime",
    "Definition",
    "DiscoveryError",
    "DiscoveryResult",
    "EnvProcessor",
    "FileLoader",
    "FnRuntime",
    "Input",
    "InputProcessor",
    "LoadContext",
    "LoadProcessor",
    "Loader",
    "Manager",
    "ParamValue",
    "ParameterDef",
    "PipeProcessor",
    "Runtime",
    "RuntimeMissingError",
    "StructuralParseError",
    "TemplateEscapeProcessor",
    "TemplateSyntaxError",
    "UndefinedVariableError",
    "parse_definition",
]
