"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.profile_service import ProfileService
from infrastructure.cache.profile_view_cache import InMemoryProfileViewCache
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_view_cache() -> InMemoryProfileViewCache:
    """Get the process-wide profile view cache."""
    return InMemoryProfileViewCache(
        ttl_seconds=settings.profile_cache_ttl_seconds,
        maxsize=settings.profile_cache_max_entries,
    )


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory(), view_cache=get_profile_view_cache())
