"""Shared fixtures for unit tests."""

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest

from domain.entities.profile import Profile


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked profile repository."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False
        self.entered = 0

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        self.entered += 1
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def view_cache() -> MagicMock:
    """A mock view cache so invalidations can be asserted."""
    return MagicMock()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def confirmed_profile(user_id: UUID) -> Profile:
    """The profile from the example scenario: Ann, no avatar."""
    created = datetime(2026, 1, 28, 10, 0, 0)
    return Profile(
        id=user_id,
        first_name="Ann",
        avatar_url=None,
        email="a@x.com",
        created_at=created,
        updated_at=created,
    )
