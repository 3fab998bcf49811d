"""User service for soft delete and restore orchestration."""

import logging
from typing import List

from ....core.exceptions import UserNotFoundError
from ....utils.time import Clock, utc_now
from ...assignments.entities import CascadeResult
from ...assignments.services import CascadingRevocationService
from ...events.entities import PermissionChangeEvent
from ...storage.entities import UnitOfWork
from ..entities import User

logger = logging.getLogger(__name__)


class UserService:
    """Reads users and drives their soft-delete lifecycle."""

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        cascade: CascadingRevocationService,
        clock: Clock = utc_now,
    ):
        self.unit_of_work = unit_of_work
        self.cascade = cascade
        self._clock = clock

    async def get_user(self, user_id: str) -> User:
        async with self.unit_of_work.transaction() as session:
            user = await session.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def list_users(self) -> List[User]:
        async with self.unit_of_work.transaction() as session:
            return await session.users.list_active()

    async def delete_user(self, user_id: str, deleted_by: str) -> CascadeResult:
        """Revoke everything the user holds, then soft-delete the user.

        Both steps share one unit of work; a failing cascade leaves the user
        untouched.
        """
        async with self.unit_of_work.transaction() as session:
            user = await session.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            result = await self.cascade.apply_user_cascade(session, user_id, deleted_by)

            user.mark_deleted(deleted_by, self._clock())
            await session.users.save(user)
            session.emit(PermissionChangeEvent.user_deleted(user_id, deleted_by))

        logger.info(f"Deleted user {user_id} by {deleted_by}, revoked {result.revoked_rows} rows")
        return result

    async def restore_user(self, user_id: str) -> User:
        """Clear the soft-delete flag. Revoked grants stay revoked."""
        async with self.unit_of_work.transaction() as session:
            user = await session.users.get_by_id_including_deleted(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            user.restore(self._clock())
            await session.users.save(user)
            session.emit(PermissionChangeEvent.user_restored(user_id))

        logger.info(f"Restored user {user_id}")
        return user
