"""Per-user serialization of matcher and calculation runs within a process."""

import asyncio
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator


class UserLocks:
    """One asyncio.Lock per user id. Different users never block each other."""

    def __init__(self) -> None:
        self._locks: dict[uuid.UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    def is_locked(self, user_id: uuid.UUID) -> bool:
        lock = self._locks.get(user_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, user_id: uuid.UUID) -> AsyncIterator[None]:
        async with self._locks[user_id]:
            yield


user_locks = UserLocks()
