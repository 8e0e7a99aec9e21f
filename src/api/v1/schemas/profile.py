"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from domain.entities.profile import Profile, ProfileUpdate

_url_adapter = TypeAdapter(AnyUrl)


class ProfileFields(BaseModel):
    """Editable profile fields shared by create and update."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    avatar_url: str | None = Field(None, max_length=500)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v: str | None) -> str | None:
        # Empty clears the avatar; anything else must at least parse as a URL
        if v:
            _url_adapter.validate_python(v)
        return v


class ProfileUpdateRequest(ProfileFields):
    """Schema for a partial profile update.

    Unknown keys (including ``email``) are ignored, never forwarded.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "first_name": "Anna",
                "avatar_url": "https://example.com/avatar.jpg",
            }
        },
    )

    def to_domain(self) -> ProfileUpdate:
        return ProfileUpdate(first_name=self.first_name, avatar_url=self.avatar_url)


class ProfileCreateRequest(ProfileFields):
    """Schema for creating the caller's profile (email comes from the token)."""


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "first_name": "Ann",
                "avatar_url": None,
                "email": "a@example.com",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    first_name: str | None
    avatar_url: str | None
    email: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls.model_validate(profile)


class ProfileDetailResponse(BaseModel):
    """Schema for a single Profile."""

    data: ProfileResponse
