"""Unit tests for the profile edit form."""

import asyncio
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from client.optimistic import OptimisticProfileController
from client.profile_form import (
    FAILURE_TEXT,
    MISSING_NAME_TEXT,
    SUCCESS_TEXT,
    Banner,
    ProfileForm,
    ProfileFormView,
)
from core.exceptions import ErrorCode
from domain.entities.profile import MutationResult, Profile, ProfileUpdate


def make_accessor(result: MutationResult) -> AsyncMock:
    accessor = AsyncMock()
    accessor.update.return_value = result
    return accessor


@pytest.fixture
def ok_accessor() -> AsyncMock:
    return make_accessor(MutationResult.ok())


@pytest.fixture
def form(ok_accessor: AsyncMock, confirmed_profile: Profile) -> ProfileForm:
    controller = OptimisticProfileController(ok_accessor, confirmed_profile)
    return ProfileForm(controller, dismiss_after=0.01)


class TestInitialState:
    def test_inputs_start_from_displayed_profile(self, form: ProfileForm):
        assert form.form_data == {"first_name": "Ann", "avatar_url": ""}
        assert form.banner is None

    def test_render_shows_read_only_email(self, form: ProfileForm):
        view = form.render()

        assert view.email == "a@x.com"
        assert view.email_note == "Email cannot be changed"
        assert view.title == "Edit Profile"
        assert view.submit_label == "Update Profile"
        assert not view.submit_disabled

    def test_avatar_fallback_is_first_initial(self, form: ProfileForm):
        view = form.render()

        assert view.avatar_src is None
        assert view.avatar_fallback == "A"

    def test_avatar_fallback_without_name(self, ok_accessor: AsyncMock, user_id: UUID):
        controller = OptimisticProfileController(ok_accessor, Profile(id=user_id))
        form = ProfileForm(controller)

        assert form.render().avatar_fallback == "U"
        assert form.form_data == {"first_name": "", "avatar_url": ""}


class TestSetField:
    def test_updates_input(self, form: ProfileForm):
        form.set_field("avatar_url", "https://example.com/a.png")

        assert form.form_data["avatar_url"] == "https://example.com/a.png"
        assert form.render().avatar_src == "https://example.com/a.png"

    def test_email_is_not_editable(self, form: ProfileForm):
        with pytest.raises(ValueError):
            form.set_field("email", "b@x.com")


class TestSubmit:
    @pytest.mark.asyncio
    async def test_success_shows_banner_then_dismisses(
        self, form: ProfileForm, ok_accessor: AsyncMock, confirmed_profile: Profile
    ):
        form.set_field("first_name", "Anna")

        result = await form.submit()

        assert result is not None and result.success
        assert form.banner == Banner("success", SUCCESS_TEXT)
        ok_accessor.update.assert_awaited_once_with(
            confirmed_profile.id, ProfileUpdate(first_name="Anna", avatar_url="")
        )

        await asyncio.sleep(0.05)
        assert form.banner is None

    @pytest.mark.asyncio
    async def test_failure_banner_persists_with_store_message(
        self, confirmed_profile: Profile
    ):
        accessor = make_accessor(MutationResult.failed(ErrorCode.DATABASE_ERROR, "timeout"))
        controller = OptimisticProfileController(accessor, confirmed_profile)
        form = ProfileForm(controller, dismiss_after=0.01)
        form.set_field("first_name", "Anna")

        await form.submit()
        await asyncio.sleep(0.05)

        assert form.banner == Banner("error", f"{FAILURE_TEXT} (timeout)")
        # No rollback: the form keeps showing the edited name
        assert controller.displayed is not None
        assert controller.displayed.first_name == "Anna"

    @pytest.mark.asyncio
    async def test_blank_first_name_is_rejected(
        self, form: ProfileForm, ok_accessor: AsyncMock
    ):
        form.set_field("first_name", "   ")

        result = await form.submit()

        assert result is None
        assert form.banner == Banner("error", MISSING_NAME_TEXT)
        ok_accessor.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_next_submission_clears_previous_banner(self, confirmed_profile: Profile):
        accessor = make_accessor(MutationResult.failed(ErrorCode.DATABASE_ERROR, "timeout"))
        controller = OptimisticProfileController(accessor, confirmed_profile)
        form = ProfileForm(controller)
        await form.submit()
        assert form.banner is not None and form.banner.kind == "error"

        accessor.update.return_value = MutationResult.ok()
        await form.submit()

        assert form.banner == Banner("success", SUCCESS_TEXT)
        form.close()

    @pytest.mark.asyncio
    async def test_button_shows_updating_while_pending(self, confirmed_profile: Profile):
        release = asyncio.Event()

        async def slow_update(user_id: UUID, update: ProfileUpdate) -> MutationResult:
            await release.wait()
            return MutationResult.ok()

        accessor = AsyncMock()
        accessor.update.side_effect = slow_update
        views: list[ProfileFormView] = []
        controller = OptimisticProfileController(accessor, confirmed_profile)
        form = ProfileForm(controller, on_render=views.append)
        form.set_field("first_name", "Bo")

        submitting = asyncio.ensure_future(form.submit())
        await asyncio.sleep(0)

        pending_view = form.render()
        assert pending_view.submit_label == "Updating..."
        assert pending_view.submit_disabled
        # Initial follows the stored name until the edit settles
        assert pending_view.avatar_fallback == "A"

        release.set()
        await submitting

        assert form.render().submit_label == "Update Profile"
        assert form.render().avatar_fallback == "B"
        assert any(view.submit_disabled for view in views)
        form.close()

    @pytest.mark.asyncio
    async def test_cancelled_submission_reenables_button(self, confirmed_profile: Profile):
        async def hang(user_id: UUID, update: ProfileUpdate) -> MutationResult:
            await asyncio.sleep(3600)
            return MutationResult.ok()

        accessor = AsyncMock()
        accessor.update.side_effect = hang
        controller = OptimisticProfileController(accessor, confirmed_profile)
        form = ProfileForm(controller)
        form.set_field("first_name", "Anna")

        submitting = asyncio.ensure_future(form.submit())
        await asyncio.sleep(0)
        assert form.render().submit_disabled

        submitting.cancel()
        with pytest.raises(asyncio.CancelledError):
            await submitting
        await controller.wait_idle()

        view = form.render()
        assert not view.submit_disabled
        assert view.submit_label == "Update Profile"
        form.close()
