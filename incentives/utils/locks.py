"""
Keyed asyncio locks.

Serializes entry points that touch the same ledger records within one
process. Locks for several keys are always taken in sorted order, so two
callers holding overlapping key sets cannot deadlock.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger


# Key serializing every referral registration against the whole forest
REFERRAL_GRAPH_KEY = "referral-graph"

# Key serializing administrative reconfiguration
PROGRAM_SETTINGS_KEY = "program-settings"


class KeyedLockRegistry:
    """
    Registry of one asyncio.Lock per key.

    A key's lock lives only while some caller holds or waits for it, so the
    registry stays bounded by the number of in-flight calls.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, key: str) -> bool:
        """Check whether a key is currently held."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def _checkout(self, key: str) -> asyncio.Lock:
        self._users[key] = self._users.get(key, 0) + 1
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def _checkin(self, key: str) -> None:
        remaining = self._users[key] - 1
        if remaining:
            self._users[key] = remaining
        else:
            # Nobody holds or waits on the key any more
            del self._users[key]
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        """
        Hold the locks of all keys for the duration of the block.

        Usage:
            async with registry.hold(account):
                ...
        """
        ordered = sorted(set(keys))
        locks = [self._checkout(key) for key in ordered]
        acquired: list[asyncio.Lock] = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            logger.trace("Locks acquired", extra={"keys": ordered})
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._checkin(key)
