"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass(frozen=True)
class TokenUser:
    """The authenticated principal extracted from a Supabase access token.

    Passed explicitly into profile operations; there is no ambient
    "current user".
    """

    id: UUID
    email: Optional[str] = None
    first_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for a user (local development and tests only)."""
        ...
