"""Unit tests for plugin descriptors and registry."""

import pytest

from launchkit.plugins import (
    Plugin,
    PluginCapability,
    PluginInfo,
    PluginRegistrationError,
    PluginRegistry,
    RegistryFrozenError,
)


async def _discover():
    return []


def _init(app):
    pass


class TestPlugin:
    """Test Plugin."""

    def test_no_capabilities(self):
        """Test a bare plugin provides nothing."""
        assert Plugin(name="bare").capabilities == frozenset()

    def test_capabilities_follow_behaviors(self):
        """Test each behavior enables its capability."""
        plugin = Plugin(
            name="full",
            info=PluginInfo(name="full", version="1.0"),
            discover_actions=_discover,
            on_app_init=_init,
        )

        assert plugin.capabilities == frozenset(PluginCapability)
        assert plugin.has(PluginCapability.ACTION_DISCOVERY)

    def test_weight(self):
        """Test weight comes from info."""
        assert Plugin(name="a").weight == 0
        assert Plugin(name="b", info=PluginInfo(weight=-5)).weight == -5


class TestPluginRegistry:
    """Test PluginRegistry."""

    def test_registration_order(self, registry):
        """Test plugins are kept in registration order."""
        for name in ("c", "a", "b"):
            registry.register(Plugin(name=name))

        assert [p.name for p in registry] == ["c", "a", "b"]
        assert len(registry) == 3

    def test_duplicate_name(self, registry):
        """Test names are unique."""
        registry.register(Plugin(name="a"))
        with pytest.raises(PluginRegistrationError):
            registry.register(Plugin(name="a"))

    def test_frozen_registry(self, registry):
        """Test a frozen registry rejects plugins."""
        registry.register(Plugin(name="a"))
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register(Plugin(name="b"))
        assert [p.name for p in registry] == ["a"]

    def test_with_capability(self, registry):
        """Test filtering by capability."""
        registry.register(Plugin(name="init", on_app_init=_init))
        registry.register(Plugin(name="disc", discover_actions=_discover))
        registry.register(Plugin(name="both", discover_actions=_discover, on_app_init=_init))

        found = registry.with_capability(PluginCapability.ACTION_DISCOVERY)
        assert [p.name for p in found] == ["disc", "both"]

    def test_fresh_registries_are_independent(self):
        """Test registries do not share state."""
        first = PluginRegistry()
        first.register(Plugin(name="a"))
        assert len(PluginRegistry()) == 0
