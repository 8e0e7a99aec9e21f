"""Profile API routes.

Every route operates on the caller's own profile; the user ID always comes
from the validated access token, never from the request.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service, get_profile_view_cache
from api.v1.schemas.common import ERROR_RESPONSES
from api.v1.schemas.profile import (
    ProfileCreateRequest,
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)
from core.exceptions import (
    AppException,
    ErrorCode,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    ProfileStoreError,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.profile import MutationResult, ProfileCreate
from domain.services.profile_service import ProfileService
from infrastructure.cache.profile_view_cache import InMemoryProfileViewCache

router = APIRouter(prefix="/profile", tags=["profile"])


def _raise_for_result(result: MutationResult, user_id: UUID) -> None:
    """Turn a failed mutation into the matching application exception."""
    if result.success:
        return
    if result.error_code == ErrorCode.PROFILE_NOT_FOUND:
        raise ProfileNotFoundError(str(user_id))
    if result.error_code == ErrorCode.PROFILE_ALREADY_EXISTS:
        raise ProfileAlreadyExistsError(str(user_id))
    if result.error_code in (None, ErrorCode.DATABASE_ERROR):
        raise ProfileStoreError(result.error or "Failed to update profile")
    raise AppException.from_code(result.error_code, result.error or "Request failed")


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get my profile",
    responses={404: ERROR_RESPONSES[404], 401: ERROR_RESPONSES[401]},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
    cache: InMemoryProfileViewCache = Depends(get_profile_view_cache),
) -> ProfileDetailResponse:
    """Get the authenticated user's profile."""
    cached = cache.get(user.id)
    if cached is not None:
        return ProfileDetailResponse(data=cached)

    profile = await service.fetch(user.id)
    if profile is None:
        raise ProfileNotFoundError(str(user.id))

    data = ProfileResponse.from_entity(profile)
    cache.set(user.id, data)
    return ProfileDetailResponse(data=data)


@router.patch(
    "",
    response_model=ProfileDetailResponse,
    summary="Update my profile",
    responses={
        200: {"description": "Profile updated; body holds the stored record"},
        **ERROR_RESPONSES,
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    body: ProfileUpdateRequest,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Apply a partial update to first_name and/or avatar_url."""
    result = await service.update(user.id, body.to_domain())
    _raise_for_result(result, user.id)

    profile = await service.fetch(user.id)
    if profile is None:
        raise ProfileNotFoundError(str(user.id))
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.post(
    "",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create my profile",
    responses={
        201: {"description": "Profile created"},
        409: {"description": "Profile already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_profile(
    request: Request,
    body: ProfileCreateRequest,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Create the caller's profile when the signup trigger did not."""
    result = await service.create(
        ProfileCreate(
            id=user.id,
            email=user.email,
            first_name=body.first_name or user.first_name,
            avatar_url=body.avatar_url,
        )
    )
    _raise_for_result(result, user.id)
    if result.profile is None:
        raise ProfileStoreError("Profile was not returned by the store")
    return ProfileDetailResponse(data=ProfileResponse.from_entity(result.profile))


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete my profile",
    responses={
        204: {"description": "Profile deleted"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> None:
    """Delete the caller's profile."""
    result = await service.delete(user.id)
    _raise_for_result(result, user.id)
    return None
