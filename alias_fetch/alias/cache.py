"""In-memory alias cache keyed by logical target path."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

from alias_fetch.transport.models import AliasRecord


logger = structlog.get_logger()


class AliasCache:
    """Maps logical target paths to the aliases created for them.

    Entries are added when an alias is created and removed when the alias
    is found to have expired. Nothing expires proactively and nothing is
    persisted. ``set`` overwrites, so the last writer wins.

    ``lock(path)`` serializes alias creation for a path. Its
    ``asyncio.Lock`` exists only while a caller holds or awaits it, so no
    lock outlives the event loop that used it.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._aliases: dict[str, AliasRecord] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._log = logger.bind(component="alias_cache")

    def get(self, path: str) -> AliasRecord | None:
        """Get the cached alias for a path.

        Args:
            path: Logical target path.

        Returns:
            Cached alias, or None if absent.
        """
        return self._aliases.get(path)

    def set(self, path: str, alias: AliasRecord) -> None:
        """Store the alias for a path, replacing any existing entry.

        Args:
            path: Logical target path.
            alias: Alias created for the path.
        """
        replaced = self._aliases.get(path)
        self._aliases[path] = alias
        self._log.debug(
            "alias_cached",
            alias_id=alias.id,
            replaced_alias_id=replaced.id if replaced else None,
        )

    def delete(
        self, path: str, expected: AliasRecord | None = None
    ) -> AliasRecord | None:
        """Remove the alias for a path.

        Args:
            path: Logical target path.
            expected: When given, only remove the entry if it is still this
                alias, so a replacement stored concurrently survives.

        Returns:
            The removed alias, or None if nothing was removed.
        """
        if expected is not None and self._aliases.get(path) != expected:
            return None
        removed = self._aliases.pop(path, None)
        if removed is not None:
            self._log.debug("alias_evicted", alias_id=removed.id)
        return removed

    @asynccontextmanager
    async def lock(self, path: str) -> AsyncIterator[None]:
        """Hold the lock guarding alias creation for a path.

        Args:
            path: Logical target path.
        """
        lock = self._locks.get(path)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[path] = lock
        self._lock_users[path] = self._lock_users.get(path, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[path] -= 1
            if not self._lock_users[path]:
                del self._lock_users[path]
                del self._locks[path]

    def active_locks(self) -> int:
        """Get the number of paths with a held or awaited lock."""
        return len(self._locks)

    def clear(self) -> None:
        """Remove every cached alias."""
        self._aliases.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)
