"""Profile edit form bound to an ``OptimisticProfileController``."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from client.optimistic import EditState, OptimisticProfileController
from core.config import settings
from domain.entities.profile import EDITABLE_FIELDS, MutationResult, Profile, ProfileUpdate

SUCCESS_TEXT = "Profile updated successfully!"
FAILURE_TEXT = "Failed to update profile. Please try again."
MISSING_NAME_TEXT = "Please enter your first name."


@dataclass(frozen=True)
class Banner:
    kind: Literal["success", "error"]
    text: str


@dataclass(frozen=True)
class ProfileFormView:
    """Everything needed to draw the form."""

    first_name: str
    avatar_url: str
    email: str
    avatar_src: str | None
    avatar_fallback: str
    banner: Banner | None
    submit_label: str
    submit_disabled: bool
    title: str = "Edit Profile"
    description: str = "Update your profile information"
    email_note: str = "Email cannot be changed"


class ProfileForm:
    """Holds the two editable inputs and the status banner.

    Success banners clear themselves after ``dismiss_after`` seconds;
    failure banners stay until the next submission.
    """

    def __init__(
        self,
        controller: OptimisticProfileController,
        dismiss_after: float = settings.profile_banner_dismiss_seconds,
        on_render: Callable[[ProfileFormView], None] | None = None,
    ) -> None:
        self._controller = controller
        self._dismiss_after = dismiss_after
        self._on_render = on_render
        self._banner: Banner | None = None
        self._dismiss_handle: asyncio.TimerHandle | None = None

        profile = controller.displayed
        self._form_data = {
            name: (getattr(profile, name) or "") if profile else ""
            for name in EDITABLE_FIELDS
        }
        self._unsubscribe = controller.subscribe(self._on_state_change)

    @property
    def banner(self) -> Banner | None:
        return self._banner

    @property
    def form_data(self) -> dict[str, str]:
        return dict(self._form_data)

    def set_field(self, name: str, value: str) -> None:
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"{name} is not editable")
        self._form_data[name] = value
        self._render()

    async def submit(self) -> MutationResult | None:
        """Submit both inputs as one partial update and wait for the store."""
        self._set_banner(None)

        if not self._form_data["first_name"].strip():
            self._set_banner(Banner("error", MISSING_NAME_TEXT))
            return None

        task = self._controller.submit(ProfileUpdate(**self._form_data))
        if task is None:
            self._set_banner(Banner("error", FAILURE_TEXT))
            return None

        result = await task

        if result.success:
            self._set_banner(Banner("success", SUCCESS_TEXT))
            self._schedule_dismiss()
        else:
            text = f"{FAILURE_TEXT} ({result.error})" if result.error else FAILURE_TEXT
            self._set_banner(Banner("error", text))
        return result

    def render(self) -> ProfileFormView:
        profile: Profile | None = self._controller.displayed
        # The initial follows the stored name, not an unsaved edit
        confirmed = self._controller.confirmed
        first_name = confirmed.first_name if confirmed else None
        updating = self._controller.is_pending
        return ProfileFormView(
            first_name=self._form_data["first_name"],
            avatar_url=self._form_data["avatar_url"],
            email=(profile.email if profile else None) or "",
            avatar_src=self._form_data["avatar_url"] or None,
            avatar_fallback=first_name[0].upper() if first_name else "U",
            banner=self._banner,
            submit_label="Updating..." if updating else "Update Profile",
            submit_disabled=updating,
        )

    def close(self) -> None:
        """Detach from the controller and drop any pending dismissal."""
        self._unsubscribe()
        self._cancel_dismiss()

    def _on_state_change(self, state: EditState, displayed: Profile | None) -> None:
        self._render()

    def _set_banner(self, banner: Banner | None) -> None:
        self._cancel_dismiss()
        self._banner = banner
        self._render()

    def _schedule_dismiss(self) -> None:
        loop = asyncio.get_running_loop()
        self._dismiss_handle = loop.call_later(self._dismiss_after, self._set_banner, None)

    def _cancel_dismiss(self) -> None:
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None

    def _render(self) -> None:
        if self._on_render is not None:
            self._on_render(self.render())
