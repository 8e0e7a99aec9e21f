"""Profile service layer: reads and writes a user's profile record.

Every operation reports failure as a value instead of raising. Reads collapse
"no such row" and "store unreachable" into ``None``; writes return a
``MutationResult`` whose message comes from the store error.
"""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.exceptions import ErrorCode
from domain.entities.profile import MutationResult, Profile, ProfileCreate, ProfileUpdate
from domain.repositories.profile_view_cache import IProfileViewCache
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

# Connection failures surface from the driver as OSError before SQLAlchemy
# gets a chance to wrap them.
STORE_ERRORS = (SQLAlchemyError, OSError)


def _store_message(exc: BaseException) -> str:
    """Best human-readable text for a store failure."""
    orig = getattr(exc, "orig", None)
    return str(orig or exc) or type(exc).__name__


class ProfileService:
    """Service layer for the profile store."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        view_cache: IProfileViewCache | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._view_cache = view_cache

    async def fetch(self, user_id: UUID) -> Profile | None:
        """Get the profile for ``user_id``, or None if it is unavailable."""
        try:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(user_id)
        except STORE_ERRORS as exc:
            logger.error(
                "profile_fetch_failed",
                user_id=str(user_id),
                error=_store_message(exc),
            )
            return None

        if profile is None:
            logger.warning("profile_not_found", user_id=str(user_id))
        return profile

    async def update(self, user_id: UUID, update: ProfileUpdate) -> MutationResult:
        """Apply a partial update restricted to the editable fields.

        ``updated_at`` is stamped even when the payload is empty.
        """
        changes = update.changes()
        try:
            async with self._uow_factory() as uow:
                found = await uow.profiles.update_fields(
                    user_id, changes, datetime.utcnow()
                )
                if not found:
                    logger.warning("profile_update_missing", user_id=str(user_id))
                    return MutationResult.failed(
                        ErrorCode.PROFILE_NOT_FOUND, "Profile not found"
                    )
                await uow.commit()
        except STORE_ERRORS as exc:
            message = _store_message(exc)
            logger.error("profile_update_failed", user_id=str(user_id), error=message)
            return MutationResult.failed(ErrorCode.DATABASE_ERROR, message)

        self._invalidate(user_id)
        logger.info("profile_updated", user_id=str(user_id), fields=sorted(changes))
        return MutationResult.ok()

    async def create(self, profile: ProfileCreate) -> MutationResult:
        """Insert a profile row. Normally done by the auth signup trigger."""
        entity = Profile(
            id=profile.id,
            email=profile.email,
            first_name=profile.first_name,
            avatar_url=profile.avatar_url,
        )
        try:
            async with self._uow_factory() as uow:
                if await uow.profiles.get(profile.id):
                    return MutationResult.failed(
                        ErrorCode.PROFILE_ALREADY_EXISTS,
                        "A profile already exists for this user",
                    )
                created = await uow.profiles.create(entity)
                await uow.commit()
        except IntegrityError as exc:
            message = _store_message(exc)
            logger.warning("profile_create_conflict", user_id=str(profile.id), error=message)
            return MutationResult.failed(ErrorCode.PROFILE_ALREADY_EXISTS, message)
        except STORE_ERRORS as exc:
            message = _store_message(exc)
            logger.error("profile_create_failed", user_id=str(profile.id), error=message)
            return MutationResult.failed(ErrorCode.DATABASE_ERROR, message)

        logger.info("profile_created", user_id=str(profile.id))
        return MutationResult.ok(created)

    async def delete(self, user_id: UUID) -> MutationResult:
        """Delete the profile row for ``user_id``."""
        try:
            async with self._uow_factory() as uow:
                deleted = await uow.profiles.delete(user_id)
                if not deleted:
                    return MutationResult.failed(
                        ErrorCode.PROFILE_NOT_FOUND, "Profile not found"
                    )
                await uow.commit()
        except STORE_ERRORS as exc:
            message = _store_message(exc)
            logger.error("profile_delete_failed", user_id=str(user_id), error=message)
            return MutationResult.failed(ErrorCode.DATABASE_ERROR, message)

        self._invalidate(user_id)
        logger.info("profile_deleted", user_id=str(user_id))
        return MutationResult.ok()

    def _invalidate(self, user_id: UUID) -> None:
        if self._view_cache is not None:
            self._view_cache.invalidate(user_id)
