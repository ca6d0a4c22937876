"""Sample driver plugin implementing the contract for manual and automated tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from connmgr.config import ConnectionDefinition
from connmgr.plugins import DriverCapability, PluginContext, PluginDescriptor


@dataclass(frozen=True, slots=True)
class EchoConnection:
    """Connection that just remembers the options it was created with."""

    options: Mapping[str, Any]

    def echo(self, message: str) -> str:
        prefix = self.options.get("prefix", "")
        return f"{prefix}{message}"


class EchoDriverPlugin(PluginDescriptor):
    """Minimal descriptor used to validate the loader pipeline."""

    name = "echo-driver"
    version = "0.0.1"
    min_core = "0.1.0"

    def __init__(self) -> None:
        self.shutdown_called = False
        self.registration_count = 0
        self.last_context: PluginContext | None = None
        self.created = 0

    def register(self, ctx: PluginContext) -> Sequence[DriverCapability]:
        self.registration_count += 1
        self.last_context = ctx
        return [
            DriverCapability(
                driver="echo",
                creator=self._create,
                description="In-process connection that echoes messages back.",
            )
        ]

    async def on_shutdown(self) -> None:
        self.shutdown_called = True

    def _create(self, definition: ConnectionDefinition) -> EchoConnection:
        self.created += 1
        return EchoConnection(options=dict(definition.options))
