"""Action definition models and structural parsing."""

from typing import Any, Dict, List, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import StructuralParseError


logger = structlog.get_logger(__name__)

# Values a parameter default or bound input may take. None means "absent".
ParamValue = Union[bool, int, float, str, List[Any], None]


class ParameterDef(BaseModel):
    """Declaration of a single action argument or option."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, description="Parameter name, unique within its list")
    title: str = Field(default="", description="Short human-readable title")
    description: str = Field(default="", description="Parameter description")
    type: str = Field(default="string", description="Value type")
    default: ParamValue = Field(default=None, description="Value used when not supplied")
    required: bool = Field(default=False, description="Whether the value must be supplied")
    enum: Optional[List[Any]] = Field(default=None, description="Allowed values")

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value not in {"string", "integer", "number", "boolean", "array"}:
            raise ValueError(f"unsupported parameter type '{value}'")
        return value


ParametersList = List[ParameterDef]


def _check_unique(params: ParametersList, kind: str) -> ParametersList:
    seen = set()
    for p in params:
        if p.name in seen:
            raise ValueError(f"duplicate {kind} name '{p.name}'")
        seen.add(p.name)
    return params


class DefAction(BaseModel):
    """Metadata section of an action definition."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    description: str = ""
    aliases: List[str] = Field(default_factory=list)
    arguments: ParametersList = Field(default_factory=list)
    options: ParametersList = Field(default_factory=list)

    @field_validator("arguments")
    @classmethod
    def _unique_arguments(cls, value: ParametersList) -> ParametersList:
        return _check_unique(value, "argument")

    @field_validator("options")
    @classmethod
    def _unique_options(cls, value: ParametersList) -> ParametersList:
        return _check_unique(value, "option")

    def argument(self, name: str) -> Optional[ParameterDef]:
        """Get an argument declaration by name."""
        return next((p for p in self.arguments if p.name == name), None)

    def option(self, name: str) -> Optional[ParameterDef]:
        """Get an option declaration by name."""
        return next((p for p in self.options if p.name == name), None)


class DefRuntime(BaseModel):
    """Runtime section of an action definition.

    Only ``type`` is interpreted here; runtime-specific keys are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _from_shorthand(cls, data: Any) -> Any:
        # "runtime: plugin" is a shorthand for "runtime: {type: plugin}"
        if isinstance(data, str):
            return {"type": data}
        return data

    @property
    def params(self) -> Dict[str, Any]:
        """Runtime-specific keys."""
        return dict(self.model_extra or {})


class Definition(BaseModel):
    """Fully-resolved structural description of an action."""

    model_config = ConfigDict(extra="ignore")

    version: str = "1"
    working_directory: Optional[str] = None
    action: DefAction
    runtime: DefRuntime

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value


def parse_definition(content: bytes) -> Definition:
    """Decode YAML content into a Definition.

    Args:
        content: Fully-substituted action content

    Returns:
        Parsed definition

    Raises:
        StructuralParseError: If content is not valid YAML or not a valid definition
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise StructuralParseError(f"invalid action yaml: {e}", content) from e

    if not isinstance(data, dict):
        raise StructuralParseError(
            f"action definition must be a mapping, got {type(data).__name__}", content
        )

    try:
        return Definition.model_validate(data)
    except ValidationError as e:
        logger.debug("Action definition validation failed", errors=e.error_count())
        raise StructuralParseError(f"invalid action definition: {e}", content) from e
