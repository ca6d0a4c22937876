"""Connection manager preloaded with the built-in database drivers."""

from __future__ import annotations

import sqlite3
from typing import ClassVar, Mapping

from .config import ConnectionDefinition
from .connections import MemoryConnection, PostgresConnection, postgres_connect_kwargs
from .creators import Creator, CreatorFunc
from .manager import ConnectionManager


def create_postgres(definition: ConnectionDefinition) -> PostgresConnection:
    """Open an asyncpg-backed connection described by ``definition``."""

    label = str(definition.get("database") or definition.get("host") or "postgres")
    return PostgresConnection(postgres_connect_kwargs(definition), label=label).open()


def create_sqlite(definition: ConnectionDefinition) -> sqlite3.Connection:
    database = str(definition.get("database") or ":memory:")
    timeout = float(definition.get("connect_timeout", 5.0))
    # The manager may hand this connection to any thread.
    return sqlite3.connect(database, timeout=timeout, check_same_thread=False)


def create_memory(definition: ConnectionDefinition) -> MemoryConnection:
    data = definition.get("data")
    if data is not None and not isinstance(data, Mapping):
        raise TypeError("'data' must be a mapping of keys to values")
    return MemoryConnection(data, namespace=definition.get("namespace"))


class DatabaseManager(ConnectionManager):
    """Connection manager that knows the postgres, sqlite and memory drivers."""

    BUILTIN_CREATORS: ClassVar[Mapping[str, Creator | CreatorFunc]] = {
        "postgres": create_postgres,
        "pgsql": create_postgres,
        "sqlite": create_sqlite,
        "memory": create_memory,
    }


__all__ = ["DatabaseManager", "create_memory", "create_postgres", "create_sqlite"]
