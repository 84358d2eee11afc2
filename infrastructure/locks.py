"""Per-listing mutual exclusion.

Every read-check-write against a listing's availability or its bookings
runs while holding that listing's lock, so two competing requests for the
same nights are serialized. Different listings never share a lock.

A lock only lives in the registry while some request holds it or waits
for it; the last one out removes it.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict
from uuid import UUID

logger = logging.getLogger(__name__)


class ListingLocks:
    """Registry of one asyncio.Lock per listing id (single process)"""

    def __init__(self):
        self._locks: Dict[UUID, asyncio.Lock] = {}
        self._users: Dict[UUID, int] = {}

    def _lock_for(self, listing_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(listing_id)
        if lock is None:
            lock = self._locks[listing_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, listing_id: UUID) -> AsyncIterator[None]:
        lock = self._lock_for(listing_id)
        self._users[listing_id] = self._users.get(listing_id, 0) + 1
        if lock.locked():
            logger.debug("Waiting for lock on listing %s", listing_id)
        try:
            async with lock:
                yield
        finally:
            self._release(listing_id)

    def _release(self, listing_id: UUID) -> None:
        remaining = self._users[listing_id] - 1
        if remaining:
            self._users[listing_id] = remaining
        else:
            del self._users[listing_id]
            del self._locks[listing_id]

    def is_locked(self, listing_id: UUID) -> bool:
        lock = self._locks.get(listing_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
