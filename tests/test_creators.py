"""Tests for the creator registry."""

from __future__ import annotations

import pytest

from connmgr.config import ConnectionDefinition
from connmgr.creators import Creator, CreatorRegistry, FunctionCreator, as_creator
from connmgr.errors import UnknownDriverError


class _TaggedCreator:
    def __init__(self, tag: str) -> None:
        self.tag = tag

    def create(self, definition: ConnectionDefinition) -> str:
        return self.tag


def test_as_creator_wraps_callables() -> None:
    creator = as_creator(lambda definition: definition.driver)

    assert isinstance(creator, FunctionCreator)
    assert isinstance(creator, Creator)
    assert creator.create(ConnectionDefinition(driver="x")) == "x"


def test_as_creator_keeps_creator_objects() -> None:
    creator = _TaggedCreator("a")

    assert as_creator(creator) is creator


def test_as_creator_rejects_non_callables() -> None:
    with pytest.raises(TypeError):
        as_creator(42)  # type: ignore[arg-type]


def test_resolve_falls_back_to_builtins() -> None:
    registry = CreatorRegistry({"x": _TaggedCreator("builtin")})

    assert registry.resolve("x").create(ConnectionDefinition()) == "builtin"


def test_registered_creator_shadows_builtin() -> None:
    registry = CreatorRegistry({"x": _TaggedCreator("builtin")})

    registry.register("x", _TaggedCreator("override"))

    assert registry.resolve("x").create(ConnectionDefinition()) == "override"


def test_last_registration_wins_and_unregister_restores_builtin() -> None:
    registry = CreatorRegistry({"x": _TaggedCreator("builtin")})
    registry.register("x", _TaggedCreator("first"))
    registry.register("x", _TaggedCreator("second"))

    assert registry.resolve("x").create(ConnectionDefinition()) == "second"
    registry.unregister("x")
    registry.unregister("x")
    assert registry.resolve("x").create(ConnectionDefinition()) == "builtin"


def test_unknown_driver_raises() -> None:
    registry = CreatorRegistry()

    with pytest.raises(UnknownDriverError) as excinfo:
        registry.resolve("mongo")

    assert excinfo.value.driver == "mongo"


def test_drivers_lists_builtins_and_overrides() -> None:
    registry = CreatorRegistry({"b": _TaggedCreator("b")})
    registry.register("a", lambda definition: None)

    assert registry.drivers() == ("a", "b")


class _ClientFactory:
    """Client class whose constructor is the factory; ``create`` is unrelated."""

    def __init__(self, definition: ConnectionDefinition) -> None:
        self.definition = definition

    def create(self, definition: ConnectionDefinition) -> str:
        return "instance method"


def test_as_creator_treats_classes_as_factories() -> None:
    creator = as_creator(_ClientFactory)

    assert isinstance(creator, FunctionCreator)
    conn = creator.create(ConnectionDefinition(driver="x"))
    assert isinstance(conn, _ClientFactory)
    assert conn.definition.driver == "x"


def test_registry_resolves_class_creator() -> None:
    registry = CreatorRegistry()
    registry.register("x", _ClientFactory)

    conn = registry.resolve("x").create(ConnectionDefinition(driver="x", host="db"))

    assert isinstance(conn, _ClientFactory)
    assert conn.definition.get("host") == "db"
