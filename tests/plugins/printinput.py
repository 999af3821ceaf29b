"""Test plugin printing the input of matching actions."""

from launchkit.action import Action, FnRuntime, Manager
from launchkit.app import App
from launchkit.plugins import Plugin, PluginInfo

ID_PREFIX = "test-print-input:"


def on_app_init(app: App) -> None:
    am = app.get_service(Manager)
    am.add_decorators(print_input_decorator)


def print_input_decorator(_: Manager, a: Action) -> None:
    if not a.id.startswith(ID_PREFIX):
        return
    a.set_runtime(FnRuntime(print_input))


async def print_input(a: Action) -> None:
    definition = a.action_def()
    for p in definition.action.arguments:
        print_param(p.name, a.input.arg(p.name), a.input.is_arg_changed(p.name))
    for p in definition.action.options:
        print_param(p.name, a.input.opt(p.name), a.input.is_opt_changed(p.name))


def print_param(name: str, val: object, is_changed: bool) -> None:
    print(f"{name}: {val} {type(val).__name__} {str(is_changed).lower()}")


plugin = Plugin(
    name="printinput",
    info=PluginInfo(name="printinput", description="Prints action input"),
    on_app_init=on_app_init,
)
