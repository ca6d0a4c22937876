"""Declarative configuration for named connections."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidConfigError, UnknownConnectionError


class ConnectionDefinition(BaseModel):
    """Configuration record for one named connection.

    Only ``driver`` is understood by the manager; every other key is kept
    verbatim and handed to the creator.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    driver: str | None = None

    @property
    def options(self) -> Mapping[str, Any]:
        """Driver-specific fields, read-only."""

        return MappingProxyType(dict(self.model_extra or {}))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field by key, including ``driver``."""

        if key == "driver":
            return self.driver if self.driver is not None else default
        return (self.model_extra or {}).get(key, default)

    def as_dict(self) -> dict[str, Any]:
        data = dict(self.model_extra or {})
        if self.driver is not None:
            data["driver"] = self.driver
        return data


class ManagerConfig(BaseModel):
    """Shape of the connection manager configuration."""

    model_config = ConfigDict(frozen=True)

    default: str | None = None
    connections: dict[str, ConnectionDefinition] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ManagerConfig:
        """Validate a plain ``{"default": ..., "connections": {...}}`` mapping."""

        return cls.model_validate(dict(data))

    def with_connection(
        self,
        name: str,
        definition: ConnectionDefinition | Mapping[str, Any],
    ) -> ManagerConfig:
        """Return a copy with the named definition added or replaced."""

        if not isinstance(definition, ConnectionDefinition):
            definition = ConnectionDefinition(**dict(definition))
        connections = dict(self.connections)
        connections[name] = definition
        return self.model_copy(update={"connections": connections})

    def with_default(self, name: str) -> ManagerConfig:
        """Return a copy with the default connection name updated."""

        return self.model_copy(update={"default": name})


class ConfigResolver:
    """Resolves connection names against an immutable config."""

    def __init__(self, config: ManagerConfig) -> None:
        self._config = config

    @property
    def config(self) -> ManagerConfig:
        return self._config

    def names(self) -> tuple[str, ...]:
        """Configured connection names, in declaration order."""

        return tuple(self._config.connections)

    def definition_for(self, name: str) -> ConnectionDefinition:
        try:
            return self._config.connections[name]
        except KeyError:
            raise UnknownConnectionError(name) from None

    def driver_for(self, name: str) -> str:
        driver = self.definition_for(name).driver
        if not driver:
            raise InvalidConfigError(name, "driver")
        return driver


__all__ = ["ConfigResolver", "ConnectionDefinition", "ManagerConfig"]
