"""Driver plugin loader exports."""

from .loader import DiscoveredPlugin, DriverPluginLoader, LoadedPlugin
from .types import (
    DriverCapability,
    PluginCompatibilityError,
    PluginContext,
    PluginDescriptor,
    PluginError,
)

__all__ = [
    "DiscoveredPlugin",
    "DriverCapability",
    "DriverPluginLoader",
    "LoadedPlugin",
    "PluginCompatibilityError",
    "PluginContext",
    "PluginDescriptor",
    "PluginError",
]
