"""Integration tests for plugin startup, discovery and execution."""

from typing import List

import pytest

from launchkit.action import Action, Input, UndefinedVariableError
from launchkit.app import create_app
from launchkit.plugins import Plugin

from tests.plugins import loglevels, printinput


PRINT_INPUT_YAML = """
runtime: plugin
action:
  title: Print input for {{ .arg1 }}
  arguments:
    - name: arg1
    - name: arg-2
      default: second
  options:
    - name: opt1
      default: one
    - name: opt_int
      type: integer
      default: 0
"""


async def discover_print_input_actions() -> List[Action]:
    return [
        Action.from_yaml("test-print-input:basic", PRINT_INPUT_YAML),
        Action.from_yaml("other:basic", PRINT_INPUT_YAML),
    ]


print_input_actions = Plugin(
    name="print-input-actions", discover_actions=discover_print_input_actions
)


@pytest.fixture
def workflow_app(launchkit_settings):
    """Provide an application with the test plugins registered."""
    return create_app(
        [loglevels.plugin, printinput.plugin, print_input_actions],
        settings=launchkit_settings,
    )


class TestAppWorkflow:
    """Test the complete startup and execution flow."""

    @pytest.mark.asyncio
    async def test_discovery_collects_plugin_actions(self, workflow_app):
        """Test every discovering plugin contributes actions."""
        result = await workflow_app.discover()

        assert result.ok
        assert sorted(a.id for a in result.actions) == [
            "other:basic",
            "test-print-input:basic",
            "testplugin:log-levels",
        ]

    @pytest.mark.asyncio
    async def test_decorator_attaches_runtime_by_prefix(self, workflow_app):
        """Test the print-input decorator only touches matching actions."""
        await workflow_app.discover()

        assert workflow_app.manager.get("test-print-input:basic").runtime is not None
        assert workflow_app.manager.get("other:basic").runtime is None

    @pytest.mark.asyncio
    async def test_print_input(self, workflow_app, capsys):
        """Test input values and supplied flags reach the runtime."""
        await workflow_app.discover()

        await workflow_app.run(
            "test-print-input:basic",
            Input(args={"arg1": "value"}, opts={"opt_int": 5}),
        )

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "arg1: value str true",
            "arg-2: second str false",
            "opt1: one str false",
            "opt_int: 5 int true",
        ]
        action = workflow_app.manager.get("test-print-input:basic")
        assert action.action_def().action.title == "Print input for value"

    @pytest.mark.asyncio
    async def test_missing_argument_value(self, workflow_app):
        """Test a declared argument without value renders empty."""
        await workflow_app.discover()
        await workflow_app.run("test-print-input:basic")

        action = workflow_app.manager.get("test-print-input:basic")
        assert action.action_def().action.title == "Print input for"

    @pytest.mark.asyncio
    async def test_log_levels_plugin_runs(self, workflow_app, capsys):
        """Test a discovered function runtime executes."""
        await workflow_app.discover()
        await workflow_app.run("testplugin:log-levels")

        err = capsys.readouterr().err
        assert "this is DEBUG log" in err
        assert "this is ERROR log" in err

    @pytest.mark.asyncio
    async def test_undefined_variable_at_run(self, launchkit_settings):
        """Test running an action using an undefined variable fails."""

        async def discover():
            return [
                Action.from_yaml(
                    "test-print-input:broken",
                    "runtime: plugin\naction:\n  title: {{ .missing }}\n",
                )
            ]

        app = create_app(
            [printinput.plugin, Plugin(name="broken", discover_actions=discover)],
            settings=launchkit_settings,
        )
        await app.discover()

        with pytest.raises(UndefinedVariableError) as exc_info:
            await app.run("test-print-input:broken")
        assert exc_info.value.names == frozenset({"missing"})
