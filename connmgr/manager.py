"""Named connection manager: cached, lazily created connections."""

from __future__ import annotations

from concurrent.futures import Future
import logging
import threading
from typing import Any, ClassVar, Mapping

from .cache import ConnectionCache
from .config import ConfigResolver, ConnectionDefinition, ManagerConfig
from .creators import Creator, CreatorFunc, CreatorRegistry
from .errors import ConnectionCreationError, ReentrantConnectionError, UnknownConnectionError

LOG = logging.getLogger(__name__)


class ConnectionManager:
    """Creates connections on first use and hands out the cached instance after.

    Subclasses supply known drivers through ``BUILTIN_CREATORS``; anything
    registered with :meth:`extend` takes precedence over that table.
    """

    BUILTIN_CREATORS: ClassVar[Mapping[str, Creator | CreatorFunc]] = {}

    def __init__(self, config: ManagerConfig | Mapping[str, Any]) -> None:
        if not isinstance(config, ManagerConfig):
            config = ManagerConfig.from_mapping(config)
        self._resolver = ConfigResolver(config)
        self._creators = CreatorRegistry(self.BUILTIN_CREATORS)
        self._cache = ConnectionCache()
        self._pending: dict[str, tuple[Future[Any], int]] = {}
        self._default = config.default
        self._lock = threading.Lock()

    @property
    def config(self) -> ManagerConfig:
        return self._resolver.config

    @property
    def creators(self) -> CreatorRegistry:
        return self._creators

    def connection(self, name: str | None = None) -> Any:
        """Return the live connection for ``name``, creating it on a cache miss.

        Concurrent callers missing on the same name share a single creator
        call and all receive its result (or its error).
        """

        name = self._resolve_name(name)
        with self._lock:
            if self._cache.contains(name):
                LOG.debug("Connection cache hit", extra={"connection": name})
                return self._cache.get(name)
            entry = self._pending.get(name)
            owner = entry is None
            if entry is None:
                pending: Future[Any] = Future()
                self._pending[name] = (pending, threading.get_ident())
            else:
                pending, owner_thread = entry
                if owner_thread == threading.get_ident():
                    # A creator asked for the connection it is building.
                    raise ReentrantConnectionError(name)
        if not owner:
            LOG.debug("Waiting on in-flight connection", extra={"connection": name})
            return pending.result()

        try:
            connection = self._make_connection(name)
        except BaseException as exc:
            with self._lock:
                self._pending.pop(name, None)
            pending.set_exception(exc)
            raise
        with self._lock:
            self._cache.put(name, connection)
            self._pending.pop(name, None)
        pending.set_result(connection)
        return connection

    def reconnect(self, name: str | None = None) -> Any:
        """Create a fresh connection for ``name`` and replace the cached one.

        The replaced instance is not closed.
        """

        name = self._resolve_name(name)
        connection = self._make_connection(name)
        with self._lock:
            replaced = self._cache.contains(name)
            self._cache.put(name, connection)
        LOG.info("Reconnected", extra={"connection": name, "replaced": replaced})
        return connection

    def disconnect(self, name: str | None = None) -> None:
        """Forget the cached connection for ``name``; absent names are a no-op."""

        name = self._resolve_name(name)
        with self._lock:
            removed = self._cache.contains(name)
            self._cache.remove(name)
        if removed:
            LOG.info("Disconnected", extra={"connection": name})

    def has_connection(self, name: str) -> bool:
        with self._lock:
            return self._cache.contains(name)

    def get_connections(self) -> dict[str, Any]:
        """Snapshot of every live connection keyed by name."""

        with self._lock:
            return self._cache.snapshot()

    def get_default_connection(self) -> str | None:
        with self._lock:
            return self._default

    def set_default_connection(self, name: str) -> None:
        """Change the default name; it does not have to be configured yet."""

        with self._lock:
            self._default = name

    def extend(self, driver: str, creator: Creator | CreatorFunc) -> None:
        """Register ``creator`` for ``driver``, shadowing any built-in."""

        self._creators.register(driver, creator)

    def get_connection_config(self, name: str) -> ConnectionDefinition:
        return self._resolver.definition_for(name)

    def _resolve_name(self, name: str | None) -> str:
        if name is None:
            name = self.get_default_connection()
        if name is None:
            raise UnknownConnectionError(None)
        return name

    def _make_connection(self, name: str) -> Any:
        definition = self._resolver.definition_for(name)
        driver = self._resolver.driver_for(name)
        creator = self._creators.resolve(driver)
        try:
            connection = creator.create(definition)
        except Exception as exc:
            LOG.warning(
                "Connection creation failed",
                extra={"connection": name, "driver": driver},
            )
            raise ConnectionCreationError(name, driver, exc) from exc
        LOG.info("Created connection", extra={"connection": name, "driver": driver})
        return connection


__all__ = ["ConnectionManager"]
