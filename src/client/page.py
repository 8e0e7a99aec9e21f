"""Loader for the profile page."""

from dataclasses import dataclass

from client.optimistic import OptimisticProfileController, ProfileAccessor
from client.profile_form import ProfileForm
from client.session import AuthSession
from core.config import settings


@dataclass(frozen=True)
class Redirect:
    location: str


@dataclass(frozen=True)
class ProfileNotFoundView:
    """Shown when a signed-in user has no profile row. No retry is offered."""

    title: str = "Profile Not Found"
    message: str = "Your profile could not be found. Please contact support."


@dataclass(frozen=True)
class ProfilePageView:
    form: ProfileForm
    controller: OptimisticProfileController
    title: str = "Your Profile"


async def load_profile_page(
    session: AuthSession | None,
    accessor: ProfileAccessor,
    login_path: str = settings.login_path,
) -> Redirect | ProfileNotFoundView | ProfilePageView:
    """Resolve what the profile page should show for ``session``."""
    if session is None:
        return Redirect(login_path)

    profile = await accessor.fetch(session.user_id)
    if profile is None:
        return ProfileNotFoundView()

    controller = OptimisticProfileController(accessor, profile)
    return ProfilePageView(form=ProfileForm(controller), controller=controller)
