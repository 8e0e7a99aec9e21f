"""Profile repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile row."""
        ...

    async def update_fields(
        self, id: UUID, changes: dict[str, str], updated_at: datetime
    ) -> bool:
        """Apply a partial update and stamp updated_at.

        Returns False when no row matched the ID.
        """
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a profile and return success status."""
        ...
