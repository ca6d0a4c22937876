"""Creator protocol and the driver registry."""

from __future__ import annotations

from dataclasses import dataclass
import inspect
import logging
import threading
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from .config import ConnectionDefinition
from .errors import UnknownDriverError

LOG = logging.getLogger(__name__)

CreatorFunc = Callable[[ConnectionDefinition], Any]


@runtime_checkable
class Creator(Protocol):
    """Builds a connection from its definition."""

    def create(self, definition: ConnectionDefinition) -> Any:
        """Return a new connection or raise."""


@dataclass(frozen=True, slots=True)
class FunctionCreator:
    """Adapts a plain callable to the ``Creator`` protocol."""

    func: CreatorFunc

    def create(self, definition: ConnectionDefinition) -> Any:
        return self.func(definition)


def as_creator(value: Creator | CreatorFunc) -> Creator:
    """Normalize a creator object or callable into a ``Creator``.

    Classes are always treated as factories, even when they define ``create``.
    """

    if not inspect.isclass(value) and isinstance(value, Creator):
        return value
    if callable(value):
        return FunctionCreator(value)
    raise TypeError(f"Expected a Creator or callable, got {type(value).__name__}")


class CreatorRegistry:
    """Maps driver identifiers to creators.

    Runtime registrations always shadow the built-in table, including ones
    made after connections have already been resolved.
    """

    def __init__(self, builtins: Mapping[str, Creator | CreatorFunc] | None = None) -> None:
        self._builtins: dict[str, Creator] = {
            driver: as_creator(creator) for driver, creator in (builtins or {}).items()
        }
        self._overrides: dict[str, Creator] = {}
        self._lock = threading.Lock()

    def register(self, driver: str, creator: Creator | CreatorFunc) -> None:
        """Install or replace the creator for ``driver``."""

        normalized = as_creator(creator)
        with self._lock:
            replaced = driver in self._overrides
            self._overrides[driver] = normalized
        LOG.debug(
            "Registered creator",
            extra={"driver": driver, "replaced": replaced, "shadows_builtin": driver in self._builtins},
        )

    def unregister(self, driver: str) -> None:
        """Drop a runtime registration; missing drivers are ignored."""

        with self._lock:
            self._overrides.pop(driver, None)

    def resolve(self, driver: str) -> Creator:
        with self._lock:
            creator = self._overrides.get(driver)
            if creator is None:
                creator = self._builtins.get(driver)
        if creator is None:
            raise UnknownDriverError(driver)
        return creator

    def drivers(self) -> tuple[str, ...]:
        """Every driver identifier that currently resolves."""

        with self._lock:
            return tuple(sorted(set(self._builtins) | set(self._overrides)))


__all__ = ["Creator", "CreatorFunc", "CreatorRegistry", "FunctionCreator", "as_creator"]
