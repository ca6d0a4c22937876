"""Name-keyed store of live connections."""

from __future__ import annotations

from typing import Any


class ConnectionCache:
    """Holds at most one live connection per name.

    Not synchronized on its own; the manager serializes access.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def get(self, name: str) -> Any | None:
        return self._entries.get(name)

    def contains(self, name: str) -> bool:
        return name in self._entries

    def put(self, name: str, connection: Any) -> None:
        """Store ``connection``, replacing any previous entry without closing it."""

        self._entries[name] = connection

    def remove(self, name: str) -> Any | None:
        """Drop the entry for ``name`` and return it; absent names are a no-op."""

        return self._entries.pop(name, None)

    def names(self) -> frozenset[str]:
        return frozenset(self._entries)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries


__all__ = ["ConnectionCache"]
