"""Profile view cache protocol."""

from typing import Any, Protocol
from uuid import UUID


class IProfileViewCache(Protocol):
    """Cache of rendered profile payloads, keyed by user ID."""

    def get(self, user_id: UUID) -> Any | None:
        """Return the cached payload, or None when missing or stale."""
        ...

    def set(self, user_id: UUID, payload: Any) -> None:
        """Store a rendered payload."""
        ...

    def invalidate(self, user_id: UUID) -> None:
        """Drop the cached payload so the next read hits the store."""
        ...
