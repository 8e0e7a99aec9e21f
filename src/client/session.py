"""The signed-in caller, as seen by the profile editing client."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class AuthSession:
    """Identity handed to the client by Supabase Auth.

    Threaded explicitly into every accessor call instead of being looked up
    from ambient state.
    """

    user_id: UUID
    access_token: str

    @classmethod
    def from_supabase(cls, session: dict[str, Any]) -> "AuthSession":
        """Build from a Supabase session object (``{"access_token", "user": {"id"}}``)."""
        return cls(
            user_id=UUID(session["user"]["id"]),
            access_token=session["access_token"],
        )

    @property
    def authorization(self) -> str:
        return f"Bearer {self.access_token}"
