"""HTTP accessor for the profile API.

Mirrors ``ProfileService``'s contract from the client side: reads collapse
every failure to ``None`` and writes return a ``MutationResult``, so the edit
controller can run against either one.
"""

from typing import Any
from uuid import UUID

import httpx
import structlog
from pydantic import ValidationError

from api.v1.schemas.profile import ProfileResponse
from client.session import AuthSession
from core.config import settings
from core.exceptions import ErrorCode
from domain.entities.profile import MutationResult, Profile, ProfileCreate, ProfileUpdate

logger = structlog.get_logger()

PROFILE_PATH = "/profile"
GENERIC_FAILURE = "Failed to update profile"

# Proxy error pages and drifted payloads surface as one of these
MALFORMED_BODY_ERRORS = (ValueError, KeyError, TypeError, ValidationError)


def _to_profile(body: dict[str, Any]) -> Profile:
    data = ProfileResponse.model_validate(body["data"])
    return Profile(**data.model_dump())


def _failure_from_response(response: httpx.Response) -> MutationResult:
    """Read the standard error envelope, tolerating non-JSON bodies."""
    try:
        body = response.json()
    except ValueError:
        body = {}

    raw_code = body.get("error_code") if isinstance(body, dict) else None
    try:
        code = ErrorCode(raw_code)
    except ValueError:
        code = ErrorCode.INTERNAL_ERROR

    message = body.get("message") if isinstance(body, dict) else None
    return MutationResult.failed(code, message or f"{GENERIC_FAILURE} (HTTP {response.status_code})")


class ProfileApiClient:
    """Calls ``/api/v1/profile`` on behalf of one authenticated session."""

    def __init__(
        self,
        session: AuthSession,
        base_url: str = settings.api_base_url,
        timeout: float = settings.api_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": session.authorization},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ProfileApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, user_id: UUID) -> Profile | None:
        """Get the session user's profile, or None when unavailable."""
        if user_id != self._session.user_id:
            logger.warning("profile_fetch_forbidden", user_id=str(user_id))
            return None

        try:
            response = await self._client.get(PROFILE_PATH)
        except httpx.HTTPError as exc:
            logger.error("profile_fetch_failed", user_id=str(user_id), error=str(exc))
            return None

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "profile_fetch_failed",
                user_id=str(user_id),
                status_code=response.status_code,
            )
            return None
        try:
            return _to_profile(response.json())
        except MALFORMED_BODY_ERRORS as exc:
            logger.error(
                "profile_fetch_failed",
                user_id=str(user_id),
                error=f"malformed response: {exc!r}",
            )
            return None

    async def update(self, user_id: UUID, update: ProfileUpdate) -> MutationResult:
        """Send a partial update; only the fields present are transmitted."""
        if user_id != self._session.user_id:
            return MutationResult.failed(
                ErrorCode.FORBIDDEN, "Cannot edit another user's profile"
            )
        return await self._mutate("PATCH", update.changes(), user_id)

    async def create(self, profile: ProfileCreate) -> MutationResult:
        if profile.id != self._session.user_id:
            return MutationResult.failed(
                ErrorCode.FORBIDDEN, "Cannot create another user's profile"
            )
        body = {
            name: value
            for name, value in (
                ("first_name", profile.first_name),
                ("avatar_url", profile.avatar_url),
            )
            if value is not None
        }
        return await self._mutate("POST", body, profile.id)

    async def delete(self, user_id: UUID) -> MutationResult:
        if user_id != self._session.user_id:
            return MutationResult.failed(
                ErrorCode.FORBIDDEN, "Cannot delete another user's profile"
            )
        return await self._mutate("DELETE", None, user_id)

    async def _mutate(
        self, method: str, body: dict[str, Any] | None, user_id: UUID
    ) -> MutationResult:
        try:
            response = await self._client.request(method, PROFILE_PATH, json=body)
        except httpx.HTTPError as exc:
            logger.error(
                "profile_request_failed",
                method=method,
                user_id=str(user_id),
                error=str(exc),
            )
            return MutationResult.failed(ErrorCode.SERVICE_UNAVAILABLE, GENERIC_FAILURE)

        if response.is_error:
            result = _failure_from_response(response)
            logger.warning(
                "profile_request_rejected",
                method=method,
                user_id=str(user_id),
                status_code=response.status_code,
                error_code=result.error_code,
            )
            return result

        if response.status_code == httpx.codes.NO_CONTENT:
            return MutationResult.ok()
        try:
            profile = _to_profile(response.json())
        except MALFORMED_BODY_ERRORS as exc:
            logger.error(
                "profile_response_malformed",
                method=method,
                user_id=str(user_id),
                error=repr(exc),
            )
            return MutationResult.failed(ErrorCode.INTERNAL_ERROR, GENERIC_FAILURE)
        return MutationResult.ok(profile)
