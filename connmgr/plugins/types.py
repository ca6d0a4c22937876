"""Driver plugin contract shared between the loader and extensions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Protocol, Sequence

from connmgr.config import ManagerConfig
from connmgr.creators import Creator, CreatorFunc


class PluginContext(NamedTuple):
    """Runtime dependencies exposed to plugins."""

    manager: Any | None = None
    config: ManagerConfig | None = None


@dataclass(frozen=True, slots=True)
class DriverCapability:
    """A creator contributed for one driver identifier."""

    driver: str
    creator: Creator | CreatorFunc
    description: str = ""


class PluginDescriptor(Protocol):
    """Contract implemented by third-party driver plugins."""

    name: str
    version: str
    min_core: str

    def register(self, ctx: PluginContext) -> Sequence[DriverCapability]: ...

    async def on_shutdown(self) -> None: ...


class PluginError(RuntimeError):
    """Base error for plugin loader failures."""


class PluginCompatibilityError(PluginError):
    """Raised when a plugin does not satisfy the minimum core version."""
