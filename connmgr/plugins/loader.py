"""Discovers driver plugins and registers their creators."""

from __future__ import annotations

import importlib.metadata as metadata
import inspect
import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from connmgr import __version__ as CORE_VERSION

from .types import (
    DriverCapability,
    PluginCompatibilityError,
    PluginContext,
    PluginDescriptor,
    PluginError,
)

LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "connmgr.drivers"


def _version_key(value: str) -> tuple[int, int, int]:
    """``"1.2"`` -> ``(1, 2, 0)``; non-numeric parts count as zero."""

    numbers = [int(part) if part.isdigit() else 0 for part in value.split(".")[:3]]
    numbers += [0] * (3 - len(numbers))
    return numbers[0], numbers[1], numbers[2]


def _instantiate(obj: PluginDescriptor | type[PluginDescriptor]) -> PluginDescriptor:
    return obj() if inspect.isclass(obj) else obj  # type: ignore[call-arg]


@dataclass(slots=True, frozen=True)
class DiscoveredPlugin:
    """A driver plugin found on an entry point or passed in directly."""

    name: str
    version: str
    min_core: str
    descriptor: PluginDescriptor
    entry_point: metadata.EntryPoint | None = None

    @classmethod
    def from_descriptor(
        cls,
        descriptor: PluginDescriptor,
        entry_point: metadata.EntryPoint | None = None,
    ) -> DiscoveredPlugin:
        return cls(
            name=descriptor.name,
            version=descriptor.version,
            min_core=getattr(descriptor, "min_core", "0.0.0"),
            descriptor=descriptor,
            entry_point=entry_point,
        )


@dataclass(slots=True, frozen=True)
class LoadedPlugin:
    """A plugin whose drivers were registered."""

    plugin: DiscoveredPlugin
    capabilities: Sequence[DriverCapability] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return self.plugin.name

    @property
    def descriptor(self) -> PluginDescriptor:
        return self.plugin.descriptor

    @property
    def drivers(self) -> tuple[str, ...]:
        return tuple(capability.driver for capability in self.capabilities)


class DriverPluginLoader:
    """Loads driver plugins and extends the context's manager with them.

    Entry point plugins win over built-in descriptors of the same name.
    """

    def __init__(
        self,
        ctx: PluginContext,
        *,
        core_version: str = CORE_VERSION,
        entry_point_group: str = ENTRY_POINT_GROUP,
        enabled_plugins: Iterable[str] | None = None,
        builtin_plugins: Iterable[PluginDescriptor | type[PluginDescriptor]] | None = None,
    ) -> None:
        self._ctx = ctx
        self._core_version = _version_key(core_version)
        self._core_version_text = core_version
        self._entry_point_group = entry_point_group
        self._enabled: set[str] | None = set(enabled_plugins) if enabled_plugins is not None else None
        self._builtin_plugins = list(builtin_plugins or [])
        self._discovered: list[DiscoveredPlugin] = []
        self._loaded: dict[str, LoadedPlugin] = {}

    def discover(self) -> list[DiscoveredPlugin]:
        """Collect descriptors from the entry point group and the built-ins."""

        found: dict[str, DiscoveredPlugin] = {}
        entry_points = metadata.entry_points().select(group=self._entry_point_group)
        for entry_point in sorted(entry_points, key=lambda ep: ep.name):
            plugin = DiscoveredPlugin.from_descriptor(_instantiate(entry_point.load()), entry_point)
            found[plugin.name] = plugin
        for builtin in self._builtin_plugins:
            plugin = DiscoveredPlugin.from_descriptor(_instantiate(builtin))
            found.setdefault(plugin.name, plugin)
        self._discovered = list(found.values())
        return self._discovered

    def load(self) -> list[LoadedPlugin]:
        """Register driver creators for every enabled, compatible plugin."""

        if not self._discovered:
            self.discover()

        loaded: list[LoadedPlugin] = []
        for plugin in self._discovered:
            if self._enabled is not None and plugin.name not in self._enabled:
                LOG.debug("Skipping disabled plugin", extra={"plugin": plugin.name})
                continue
            try:
                self._ensure_compatible(plugin)
            except PluginCompatibilityError as exc:
                LOG.warning(str(exc), extra={"plugin": plugin.name, "min_core": plugin.min_core})
                continue
            result = LoadedPlugin(plugin, self._register(plugin))
            LOG.info("Loaded driver plugin", extra={"plugin": plugin.name, "drivers": result.drivers})
            self._loaded[plugin.name] = result
            loaded.append(result)
        return loaded

    async def shutdown(self) -> None:
        """Invoke plugin shutdown hooks."""

        for loaded in self._loaded.values():
            try:
                await loaded.descriptor.on_shutdown()
            except Exception:  # pragma: no cover - defensive logging path
                LOG.exception("Plugin shutdown failed", extra={"plugin": loaded.name})

    @property
    def loaded(self) -> Sequence[LoadedPlugin]:
        return tuple(self._loaded.values())

    def _register(self, plugin: DiscoveredPlugin) -> tuple[DriverCapability, ...]:
        try:
            capabilities = tuple(plugin.descriptor.register(self._ctx))
        except Exception as exc:
            LOG.exception("Plugin registration failed", extra={"plugin": plugin.name})
            raise PluginError(f"Failed to register plugin '{plugin.name}'") from exc
        invalid = [cap for cap in capabilities if not isinstance(cap, DriverCapability)]
        if invalid:
            raise PluginError(
                f"Plugin '{plugin.name}' returned {type(invalid[0]).__name__}, expected DriverCapability"
            )
        manager = self._ctx.manager
        if manager is not None:
            for capability in capabilities:
                manager.extend(capability.driver, capability.creator)
        return capabilities

    def _ensure_compatible(self, plugin: DiscoveredPlugin) -> None:
        if self._core_version < _version_key(plugin.min_core):
            raise PluginCompatibilityError(
                f"Plugin '{plugin.name}' requires core>={plugin.min_core}, found {self._core_version_text}"
            )
