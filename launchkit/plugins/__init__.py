"""Plugin contract and registry."""

from .base import Plugin, PluginCapability, PluginInfo
from .registry import (
    PluginError,
    PluginInitError,
    PluginRegistrationError,
    PluginRegistry,
    RegistryFrozenError,
)

__all__ = [
    "Plugin",
    "PluginCapability",
    "PluginInfo",
    "PluginRegistry",
    "PluginError",
    "PluginInitError",
    "PluginRegistrationError",
    "RegistryFrozenError",
]
