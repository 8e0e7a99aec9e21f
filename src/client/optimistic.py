"""Optimistic profile edits.

The controller shows a submitted edit immediately, persists it in the
background and then adopts the edited value as confirmed. There is no
rollback when the write fails and no ordering between overlapping writes:
whichever call settles last decides the confirmed value.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Protocol
from uuid import UUID

import structlog

from core.exceptions import ErrorCode
from domain.entities.profile import MutationResult, Profile, ProfileUpdate, merge_profile

logger = structlog.get_logger()


class EditState(StrEnum):
    """Whether the displayed profile is backed by the store."""

    CONFIRMED = "confirmed"
    DISPLAYING_OPTIMISTIC = "displaying_optimistic"


class ProfileAccessor(Protocol):
    """What the editing flow needs from a profile store accessor."""

    async def fetch(self, user_id: UUID) -> Profile | None: ...

    async def update(self, user_id: UUID, update: ProfileUpdate) -> MutationResult: ...


Listener = Callable[[EditState, Profile | None], None]


@dataclass(eq=False)
class _PendingEdit:
    update: ProfileUpdate
    overlay: Profile


class OptimisticProfileController:
    """State container for one profile being edited.

    Listeners are called on every change of the displayed value, with the
    current state and the profile to display.
    """

    def __init__(
        self,
        accessor: ProfileAccessor,
        initial: Profile | None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._accessor = accessor
        self._confirmed = initial
        self._clock = clock
        self._pending: list[_PendingEdit] = []
        self._tasks: set[asyncio.Task[MutationResult]] = set()
        self._listeners: list[Listener] = []

    @property
    def confirmed(self) -> Profile | None:
        return self._confirmed

    @property
    def displayed(self) -> Profile | None:
        """The newest pending overlay, falling back to the confirmed value."""
        if self._pending:
            return self._pending[-1].overlay
        return self._confirmed

    @property
    def state(self) -> EditState:
        if self._pending:
            return EditState.DISPLAYING_OPTIMISTIC
        return EditState.CONFIRMED

    @property
    def is_pending(self) -> bool:
        return bool(self._pending)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace_confirmed(self, profile: Profile | None) -> None:
        """Adopt a freshly fetched profile as the confirmed value."""
        self._confirmed = profile
        self._notify()

    def submit(self, update: ProfileUpdate) -> "asyncio.Task[MutationResult] | None":
        """Show ``update`` immediately and persist it in the background.

        Must be called from a running event loop. Returns None (and does
        nothing) when there is no profile to edit.
        """
        if self._confirmed is None:
            return None

        base = self._pending[-1].overlay if self._pending else self._confirmed
        edit = _PendingEdit(update=update, overlay=merge_profile(base, update, self._clock()))
        self._pending.append(edit)
        # Listeners see the overlay before the store call is even scheduled
        self._notify()

        task = asyncio.get_running_loop().create_task(
            self._persist(self._confirmed.id, edit)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every in-flight update has settled, cancelled ones included."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _persist(self, user_id: UUID, edit: _PendingEdit) -> MutationResult:
        try:
            result = await self._accessor.update(user_id, edit.update)
        except asyncio.CancelledError:
            # The caller went away; the overlay still has to settle
            logger.warning("profile_update_cancelled", user_id=str(user_id))
            self._settle(edit, None)
            raise
        except Exception as exc:
            logger.exception("profile_update_crashed", user_id=str(user_id))
            result = MutationResult.failed(ErrorCode.INTERNAL_ERROR, str(exc))

        if not result.success:
            logger.error(
                "profile_update_failed",
                user_id=str(user_id),
                error=result.error,
                error_code=result.error_code,
            )

        self._settle(edit, result.profile)
        return result

    def _settle(self, edit: _PendingEdit, stored: Profile | None) -> None:
        self._pending.remove(edit)
        self._confirmed = stored or edit.overlay
        self._notify()

    def _notify(self) -> None:
        state, displayed = self.state, self.displayed
        for listener in list(self._listeners):
            listener(state, displayed)
