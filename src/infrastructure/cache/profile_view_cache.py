"""In-process cache of rendered profile payloads."""

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any
from uuid import UUID


class InMemoryProfileViewCache:
    """Per-user TTL cache for the ``GET /profile`` payload.

    - TTL: entries expire ``ttl_seconds`` after they were stored
    - LRU: at most ``maxsize`` entries; the least recently used goes first
    - Expired entries are swept on every ``set``

    Writes through ProfileService invalidate the entry, so a read after a
    successful update always reaches the store.
    """

    def __init__(
        self,
        ttl_seconds: float,
        maxsize: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._maxsize = maxsize
        self._clock = clock
        self._entries: OrderedDict[UUID, tuple[float, Any]] = OrderedDict()

    def get(self, user_id: UUID) -> Any | None:
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        expires_at, payload = entry
        if self._clock() >= expires_at:
            del self._entries[user_id]
            return None
        self._entries.move_to_end(user_id)
        return payload

    def set(self, user_id: UUID, payload: Any) -> None:
        if self._ttl <= 0 or self._maxsize <= 0:
            return
        now = self._clock()
        self._evict_expired(now)
        self._entries[user_id] = (now + self._ttl, payload)
        self._entries.move_to_end(user_id)
        while len(self._entries) > self._maxsize:
            self._entries.popitem(last=False)

    def invalidate(self, user_id: UUID) -> None:
        self._entries.pop(user_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
