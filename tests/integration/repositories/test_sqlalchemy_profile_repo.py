"""Integration tests for SQLAlchemyProfileRepository and the unit of work."""

from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

LATER = datetime(2026, 10, 17, 12, 0, 0)


@pytest.fixture
def uow(session_factory: async_sessionmaker[AsyncSession]) -> SQLAlchemyUnitOfWork:
    return SQLAlchemyUnitOfWork(session_factory)


class TestSQLAlchemyProfileRepository:
    @pytest.mark.asyncio
    async def test_get_maps_row_to_entity(
        self, uow: SQLAlchemyUnitOfWork, profile_row: ProfileModel
    ):
        async with uow:
            profile = await uow.profiles.get(profile_row.id)

        assert profile == Profile(
            id=profile_row.id,
            first_name="Ann",
            avatar_url=None,
            email="a@x.com",
            created_at=datetime(2026, 1, 28, 10, 0, 0),
            updated_at=datetime(2026, 1, 28, 10, 0, 0),
        )

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, uow: SQLAlchemyUnitOfWork):
        async with uow:
            assert await uow.profiles.get(uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_fields_writes_only_editable_columns(
        self, uow: SQLAlchemyUnitOfWork, profile_row: ProfileModel
    ):
        async with uow:
            found = await uow.profiles.update_fields(
                profile_row.id, {"first_name": "Anna", "email": "b@x.com"}, LATER
            )
            await uow.commit()

        async with uow:
            profile = await uow.profiles.get(profile_row.id)

        assert found
        assert profile is not None
        assert profile.first_name == "Anna"
        assert profile.email == "a@x.com"
        assert profile.updated_at == LATER

    @pytest.mark.asyncio
    async def test_update_fields_missing_row(self, uow: SQLAlchemyUnitOfWork):
        async with uow:
            assert not await uow.profiles.update_fields(uuid4(), {"first_name": "A"}, LATER)

    @pytest.mark.asyncio
    async def test_uncommitted_changes_are_rolled_back(
        self, uow: SQLAlchemyUnitOfWork, profile_row: ProfileModel
    ):
        async with uow:
            await uow.profiles.update_fields(profile_row.id, {"first_name": "Anna"}, LATER)

        async with uow:
            profile = await uow.profiles.get(profile_row.id)

        assert profile is not None
        assert profile.first_name == "Ann"

    @pytest.mark.asyncio
    async def test_create_and_delete(self, uow: SQLAlchemyUnitOfWork):
        user_id = uuid4()

        async with uow:
            created = await uow.profiles.create(Profile(id=user_id, first_name="Bo"))
            await uow.commit()

        async with uow:
            deleted = await uow.profiles.delete(user_id)
            await uow.commit()

        async with uow:
            missing = await uow.profiles.get(user_id)
            deleted_again = await uow.profiles.delete(user_id)

        assert created.id == user_id
        assert created.first_name == "Bo"
        assert deleted
        assert missing is None
        assert not deleted_again

    def test_repository_requires_context(self, uow: SQLAlchemyUnitOfWork):
        with pytest.raises(RuntimeError):
            uow.profiles
