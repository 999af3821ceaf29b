"""Processors transforming action content before it is parsed."""

import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Set, Type

import jinja2
import jinja2.ext
from jinja2.utils import missing as missing_value
import structlog

from .definition import Definition, ParamValue, ParametersList
from .errors import ActionLoadError, TemplateSyntaxError, UndefinedVariableError
from .input import Input
from .predefined import PredefinedVars

if TYPE_CHECKING:
    from .action import Action


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LoadContext:
    """Data available to processors while loading an action.

    ``action`` is None when content is resolved outside of any bound input.
    """

    action: Optional["Action"] = None


class LoadProcessor(ABC):
    """Base class for content processors."""

    @abstractmethod
    def process(self, ctx: LoadContext, content: bytes) -> bytes:
        """Transform action content.

        Args:
            ctx: Load context
            content: Action content

        Returns:
            Processed content

        Raises:
            ActionLoadError: If the content cannot be processed
        """
        pass


class PipeProcessor(LoadProcessor):
    """Applies several processors one after another."""

    def __init__(self, *processors: LoadProcessor) -> None:
        self.processors = list(processors)

    def process(self, ctx: LoadContext, content: bytes) -> bytes:
        for proc in self.processors:
            try:
                content = proc.process(ctx, content)
            except ActionLoadError as e:
                if e.partial is None:
                    e.partial = content
                raise
        return content


_ENV_TOKEN = re.compile(
    r"\$(?:"
    r"\{(?P<braced>[^}]*)\}"
    r"|(?P<special>[*#$@!?\-0-9])"
    r"|(?P<named>[A-Za-z0-9_]+)"
    r"|(?P<unclosed>\{)"
    r")"
)


def expand_env(text: str, getenv: Any) -> str:
    """Expand ``$NAME`` and ``${NAME}`` tokens the way a POSIX shell does.

    Unknown names expand to an empty string. ``${}`` and an unclosed ``${``
    are dropped. A ``$`` not followed by a name is kept.
    """

    def repl(m: "re.Match[str]") -> str:
        name = m.group("braced")
        if name is None:
            name = m.group("special") or m.group("named")
        if not name:
            return ""
        return getenv(name)

    return _ENV_TOKEN.sub(repl, text)


class EnvProcessor(LoadProcessor):
    """Expands environment variables, predefined variables first."""

    def process(self, ctx: LoadContext, content: bytes) -> bytes:
        pv = PredefinedVars(ctx.action)

        def getenv(key: str) -> str:
            value, ok = pv.getenv(key)
            if ok:
                return value
            return os.environ.get(key, "")

        return expand_env(content.decode("utf-8"), getenv).encode("utf-8")


_TPL_BLOCK = re.compile(r"\{\{-?(.*?)-?\}\}", re.DOTALL)
# A leading-dot reference: ".name" not preceded by a name, a closing bracket or a quote.
_FIELD_REF = re.compile(r"(?<![\w)\]}'\".])\.([A-Za-z_][\w-]*)")

DASH_ERROR_MESSAGE = (
    "unexpected '-' symbol in template variable '{ref}'.\n"
    'Action definition is correct, but dashes are not allowed in templates, '
    'replace "-" with "_" in {{{{ }}}} blocks'
)


class DashInFieldError(jinja2.TemplateSyntaxError):
    """Field reference contains a dash."""


class FieldAccessExtension(jinja2.ext.Extension):
    """Turns ``{{ .name }}`` field references into jinja names.

    Dashes are rejected inside references: hyphenated parameter names are
    reachable through their underscore alias.
    """

    def preprocess(self, source: str, name: Optional[str], filename: Optional[str] = None) -> str:
        def rewrite_block(block: "re.Match[str]") -> str:
            for ref in _FIELD_REF.finditer(block.group(1)):
                if "-" in ref.group(1):
                    lineno = source.count("\n", 0, block.start()) + 1
                    raise DashInFieldError(
                        DASH_ERROR_MESSAGE.format(ref=ref.group(1)), lineno, name, filename
                    )
            start, end = block.span(1)
            inner = _FIELD_REF.sub(r"\1", block.group(1))
            offset = block.start()
            text = block.group(0)
            return text[: start - offset] + inner + text[end - offset:]

        return _TPL_BLOCK.sub(rewrite_block, source)


def _finalize(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


_TEMPLATES = jinja2.Environment(
    extensions=[FieldAccessExtension],
    finalize=_finalize,
    keep_trailing_newline=True,
    autoescape=False,
)


def _field_path(obj: Any, data: Dict[str, Any], prefix: str = "") -> Optional[str]:
    """Find the dotted path under which obj is stored in data."""
    for key, value in data.items():
        if not isinstance(key, str) or "-" in key:
            continue
        if value is obj:
            return prefix + key
        if isinstance(value, dict):
            found = _field_path(obj, value, f"{prefix}{key}.")
            if found:
                return found
    return None


def _tracking_undefined(missing: Set[str], data: Dict[str, Any]) -> Type[jinja2.Undefined]:
    """Create an Undefined type recording names that end up in the output.

    Names are recorded as full dotted paths: ``{{ .x.y }}`` reports ``x.y``
    whether ``x`` itself is undefined or only lacks ``y``.
    """

    class TrackingUndefined(jinja2.ChainableUndefined):
        __slots__ = ()

        def __getattr__(self, name: str) -> Any:
            if isinstance(name, str) and name[:2] == "__":
                raise AttributeError(name)
            return type(self)(name=f"{self._path()}.{name}")

        __getitem__ = __getattr__

        def _path(self) -> str:
            name = self._undefined_name or self._undefined_hint or "<unknown>"
            if self._undefined_obj is not missing_value:
                parent = _field_path(self._undefined_obj, data)
                if parent:
                    return f"{parent}.{name}"
            return name

        @property
        def _undefined_message(self) -> str:
            return f"{self._path()!r} is undefined"

        def __str__(self) -> str:
            missing.add(self._path())
            return ""

    return TrackingUndefined


def _undefined_name(err: jinja2.UndefinedError) -> str:
    # "'x.y' is undefined"
    quoted = re.findall(r"'([^']*)'", err.message or "")
    return quoted[-1] if quoted else str(err)


def replace_dashes(name: str) -> str:
    return name.replace("-", "_")


def collect_input_vars(
    values: Dict[str, ParamValue],
    params: Dict[str, ParamValue],
    changed: Set[str],
    declared: ParametersList,
) -> None:
    """Add declared parameters under their literal and underscore names."""
    for pdef in declared:
        value = params.get(pdef.name) if pdef.name in changed else pdef.default
        values[pdef.name] = value
        values[replace_dashes(pdef.name)] = value


def convert_input_to_tpl_vars(input: Input, definition: Definition) -> Dict[str, ParamValue]:
    """Build template variables from declared parameters and bound input."""
    values: Dict[str, ParamValue] = {}
    args = input.args()
    opts = input.opts()
    collect_input_vars(
        values, args, {k for k in args if input.is_arg_changed(k)}, definition.action.arguments
    )
    collect_input_vars(
        values, opts, {k for k in opts if input.is_opt_changed(k)}, definition.action.options
    )
    return values


def render_template(source: str, data: Dict[str, Any]) -> str:
    """Render field-access template content against data.

    Raises:
        TemplateSyntaxError: If the template cannot be compiled
        UndefinedVariableError: If the template uses undefined variables
    """
    missing: Set[str] = set()
    env = _TEMPLATES.overlay(undefined=_tracking_undefined(missing, data))
    try:
        tpl = env.from_string(source)
    except DashInFieldError as e:
        raise TemplateSyntaxError(e.message or str(e)) from e
    except jinja2.TemplateSyntaxError as e:
        raise TemplateSyntaxError(f"template syntax error at line {e.lineno}: {e.message}") from e

    try:
        result = tpl.render(data)
    except jinja2.UndefinedError as e:
        missing.add(_undefined_name(e))
        raise UndefinedVariableError(missing) from e
    except jinja2.TemplateError as e:
        raise ActionLoadError(f"failed to render template: {e}") from e

    if missing:
        raise UndefinedVariableError(missing)
    return result


class InputProcessor(LoadProcessor):
    """Substitutes bound input values into template expressions."""

    def process(self, ctx: LoadContext, content: bytes) -> bytes:
        if ctx.action is None:
            return content
        action = ctx.action
        data: Dict[str, Any] = convert_input_to_tpl_vars(action.input, action.raw_definition())
        data.update(PredefinedVars(action).template_data())
        logger.debug("Rendering action template", action=action.id, variables=sorted(data))

        rendered = render_template(content.decode("utf-8"), data)
        return rendered.encode("utf-8")


# A YAML scalar value, or sequence item, starting with a template expression,
# optionally followed by a comment.
_TPL_SCALAR = re.compile(
    r"^(?P<prefix>[ \t]*(?:-[ \t]+)?(?:[^\s#'\"{\-][^#\n]*?:[ \t]+)?)"
    r"(?P<value>\{\{.*?)(?P<comment>[ \t]+#.*)?[ \t]*$"
)
# A mapping value or sequence item opening a literal or folded block scalar.
_BLOCK_SCALAR = re.compile(r"(?:^[ \t]*|[:\-][ \t]+)[|>][-+0-9]*[ \t]*(?:#.*)?$")


class TemplateEscapeProcessor(LoadProcessor):
    """Quotes YAML values that start with a template expression.

    Leaves template syntax in place while keeping the content parseable.
    Lines of literal and folded block scalars are kept as they are.
    """

    def process(self, ctx: LoadContext, content: bytes) -> bytes:
        out = []
        block_indent: Optional[int] = None
        for line in content.decode("utf-8").splitlines(keepends=True):
            text = line.rstrip("\r\n")
            indent = len(text) - len(text.lstrip(" \t"))
            if block_indent is not None:
                if not text.strip() or indent > block_indent:
                    out.append(line)
                    continue
                block_indent = None

            m = _TPL_SCALAR.match(text)
            if m:
                value = m.group("value").replace("'", "''")
                comment = m.group("comment") or ""
                line = f"{m.group('prefix')}'{value}'{comment}{line[len(text):]}"
            elif _BLOCK_SCALAR.search(text):
                block_indent = indent
            out.append(line)
        return "".join(out).encode("utf-8")
