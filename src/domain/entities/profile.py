"""Profile domain entity and the partial-update payload that edits it."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any
from uuid import UUID

from core.exceptions import ErrorCode

# The only fields the editing flow may change.
EDITABLE_FIELDS: tuple[str, ...] = ("first_name", "avatar_url")


@dataclass
class Profile:
    """Domain entity for a user profile (one row per Supabase auth user)."""

    id: UUID
    first_name: str | None = None
    avatar_url: str | None = None
    email: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True, slots=True)
class ProfileUpdate:
    """Partial update payload. ``None`` means the field is not being changed."""

    first_name: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ProfileUpdate":
        """Build a payload from arbitrary input, dropping non-editable keys."""
        return cls(**{name: data[name] for name in EDITABLE_FIELDS if name in data})

    def changes(self) -> dict[str, str]:
        """Return only the fields present in this payload."""
        values = {name: getattr(self, name) for name in EDITABLE_FIELDS}
        return {name: value for name, value in values.items() if value is not None}

    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True, slots=True)
class ProfileCreate:
    """Insert payload for a new profile row."""

    id: UUID
    email: str | None = None
    first_name: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class MutationResult:
    """Outcome of a write against the profile store.

    Callers that only need a banner read ``success`` and ``error``;
    ``error_code`` keeps the failure kind distinguishable.
    """

    success: bool
    error: str | None = None
    error_code: ErrorCode | None = None
    profile: Profile | None = None

    @classmethod
    def ok(cls, profile: Profile | None = None) -> "MutationResult":
        return cls(success=True, profile=profile)

    @classmethod
    def failed(cls, error_code: ErrorCode, error: str) -> "MutationResult":
        return cls(success=False, error=error, error_code=error_code)


def merge_profile(
    confirmed: Profile, update: ProfileUpdate, now: datetime | None = None
) -> Profile:
    """Overlay the fields present in ``update`` onto ``confirmed``.

    Identity, email and created_at are never touched; updated_at is always
    refreshed, even for an empty payload.
    """
    return replace(
        confirmed,
        **update.changes(),
        updated_at=now or datetime.utcnow(),
    )
