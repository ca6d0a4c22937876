"""Concrete connection types shipped with the built-in drivers."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Coroutine, Iterator, Mapping

import asyncpg

from .config import ConnectionDefinition

DEFAULT_CONNECT_TIMEOUT = 5.0


class ConnectionBackendError(RuntimeError):
    """Raised when a backend cannot connect or run a statement."""


def postgres_connect_kwargs(definition: ConnectionDefinition) -> dict[str, object]:
    """Translate a definition into ``asyncpg.connect`` keyword arguments."""

    kwargs: dict[str, object] = {}
    dsn = definition.get("dsn")
    if dsn:
        kwargs["dsn"] = dsn
    else:
        kwargs["host"] = definition.get("host") or "localhost"
        port = definition.get("port")
        if port is not None:
            kwargs["port"] = int(port)
        for key in ("user", "password", "database"):
            value = definition.get(key)
            if value:
                kwargs[key] = value
    kwargs["timeout"] = float(definition.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT))
    return kwargs


class PostgresConnection:
    """Blocking facade over a single asyncpg connection.

    asyncpg is coroutine based, so each instance drives its connection from a
    private event loop running on a daemon thread.
    """

    def __init__(self, connect_kwargs: Mapping[str, object], *, label: str = "postgres") -> None:
        self._connect_kwargs = dict(connect_kwargs)
        self._conn: Any | None = None
        self._loop = asyncio.new_event_loop()
        self._loop_thread = threading.Thread(
            target=self._loop.run_forever,
            name=f"connmgr-asyncpg-{label}",
            daemon=True,
        )
        self._loop_thread.start()

    def open(self) -> PostgresConnection:
        """Establish the underlying connection."""

        try:
            self._conn = self._run(asyncpg.connect(**self._connect_kwargs))
        except Exception as exc:
            self._stop_loop()
            raise ConnectionBackendError(f"Failed to connect to PostgreSQL: {exc}") from exc
        return self

    @property
    def closed(self) -> bool:
        return self._conn is None

    def fetch(self, query: str, *args: object) -> list[Any]:
        return self._call(self._require().fetch(query, *args))

    def fetchval(self, query: str, *args: object) -> Any:
        return self._call(self._require().fetchval(query, *args))

    def execute(self, query: str, *args: object) -> str:
        return self._call(self._require().execute(query, *args))

    def close(self) -> None:
        """Close the connection and stop the background loop."""

        conn, self._conn = self._conn, None
        try:
            if conn is not None:
                self._run(conn.close())
        finally:
            self._stop_loop()

    def __del__(self) -> None:  # pragma: no cover - best effort cleanup
        try:
            self._stop_loop()
        except Exception:
            pass

    def _require(self) -> Any:
        if self._conn is None:
            raise ConnectionBackendError("PostgreSQL connection is closed.")
        return self._conn

    def _call(self, coro: Coroutine[Any, Any, Any]) -> Any:
        try:
            return self._run(coro)
        except Exception as exc:
            raise ConnectionBackendError(str(exc)) from exc

    def _run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    def _stop_loop(self) -> None:
        if not self._loop.is_running():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._loop_thread.join(timeout=1)


class MemoryConnection:
    """Thread-safe in-process key/value store."""

    def __init__(self, data: Mapping[str, Any] | None = None, *, namespace: str | None = None) -> None:
        self._namespace = namespace
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._closed = False
        for key, value in (data or {}).items():
            self._data[self._key(key)] = value

    @property
    def namespace(self) -> str | None:
        return self._namespace

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            self._ensure_open()
            return self._data.get(self._key(key), default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._ensure_open()
            self._data[self._key(key)] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            self._ensure_open()
            return self._data.pop(self._key(key), _MISSING) is not _MISSING

    def keys(self) -> Iterator[str]:
        with self._lock:
            self._ensure_open()
            stored = tuple(self._data)
        prefix = f"{self._namespace}:" if self._namespace else ""
        return iter(key[len(prefix):] for key in stored)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._data.clear()

    def _key(self, key: str) -> str:
        if self._namespace:
            return f"{self._namespace}:{key}"
        return key

    def _ensure_open(self) -> None:
        if self._closed:
            raise ConnectionBackendError("Memory connection is closed.")


_MISSING = object()


__all__ = [
    "ConnectionBackendError",
    "DEFAULT_CONNECT_TIMEOUT",
    "MemoryConnection",
    "PostgresConnection",
    "postgres_connect_kwargs",
]
