"""Unit tests for the profile page loader."""

from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from client.page import (
    ProfileNotFoundView,
    ProfilePageView,
    Redirect,
    load_profile_page,
)
from client.session import AuthSession
from domain.entities.profile import Profile


@pytest.fixture
def session(user_id: UUID) -> AuthSession:
    return AuthSession(user_id=user_id, access_token="token")


class TestLoadProfilePage:
    @pytest.mark.asyncio
    async def test_redirects_without_session(self):
        accessor = AsyncMock()

        page = await load_profile_page(None, accessor, login_path="/login")

        assert page == Redirect("/login")
        accessor.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_profile_shows_not_found(self, session: AuthSession):
        accessor = AsyncMock()
        accessor.fetch.return_value = None

        page = await load_profile_page(session, accessor)

        assert isinstance(page, ProfileNotFoundView)
        assert page.title == "Profile Not Found"
        assert "contact support" in page.message

    @pytest.mark.asyncio
    async def test_renders_form_for_existing_profile(
        self, session: AuthSession, confirmed_profile: Profile
    ):
        accessor = AsyncMock()
        accessor.fetch.return_value = confirmed_profile

        page = await load_profile_page(session, accessor)

        assert isinstance(page, ProfilePageView)
        assert page.title == "Your Profile"
        assert page.controller.confirmed == confirmed_profile
        assert page.form.form_data["first_name"] == "Ann"
        accessor.fetch.assert_awaited_once_with(session.user_id)


class TestAuthSession:
    def test_from_supabase_session(self, user_id: UUID):
        session = AuthSession.from_supabase(
            {"access_token": "abc", "user": {"id": str(user_id)}}
        )

        assert session.user_id == user_id
        assert session.authorization == "Bearer abc"
