"""Synchronises identity-provider subjects into local users."""

import logging
from typing import Optional

from ....config.constants import DEFAULT_ROLE, SYSTEM_USER_ID, USER_ID_PREFIX
from ....core.exceptions import ConstraintViolationError, DuplicateResourceError
from ....utils.ids import generate_prefixed_id
from ....utils.time import Clock, utc_now
from ...assignments.entities import UserRole
from ...events.entities import PermissionChangeEvent
from ...storage.entities import StorageSession, UnitOfWork
from ..entities import User

logger = logging.getLogger(__name__)


class UserSyncService:
    """Maps an external subject to a local user, creating it on first sight.

    New users receive the default role, granted by the system user, when that
    role exists. A soft-deleted match is restored without its old grants.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        default_role: str = DEFAULT_ROLE,
        system_user_id: str = SYSTEM_USER_ID,
        clock: Clock = utc_now,
    ):
        self.unit_of_work = unit_of_work
        self.default_role = default_role
        self.system_user_id = system_user_id
        self._clock = clock

    async def sync_user(self, external_subject: str, email: str, display_name: Optional[str] = None) -> User:
        async with self.unit_of_work.transaction() as session:
            now = self._clock()
            existing = await session.users.get_by_external_subject(external_subject)
            try:
                if existing is not None:
                    user = await self._update_existing(session, existing, email, display_name, now)
                else:
                    user = await self._create(session, external_subject, email, display_name, now)
            except ConstraintViolationError as e:
                raise DuplicateResourceError("user", "email", email) from e
        return user

    async def _update_existing(
        self, session: StorageSession, user: User, email: str, display_name: Optional[str], now
    ) -> User:
        if user.deleted:
            user.restore(now)
            session.emit(PermissionChangeEvent.user_restored(user.id))
            logger.info(f"Restored soft-deleted user {user.id} on sync")
        user.update_profile(email, display_name, now)
        await session.users.save(user)
        logger.debug(f"Synced existing user {user.id}")
        return user

    async def _create(
        self,
        session: StorageSession,
        external_subject: str,
        email: str,
        display_name: Optional[str],
        now,
    ) -> User:
        user = User(
            id=generate_prefixed_id(USER_ID_PREFIX),
            external_subject=external_subject,
            email=email,
            display_name=display_name,
            created_at=now,
        )
        await session.users.save(user)
        logger.info(f"Created user {user.id} for subject {external_subject}")

        role = await session.roles.get_by_id(self.default_role)
        if role is None:
            logger.warning(f"Default role {self.default_role} missing, user {user.id} created without roles")
            return user

        await session.user_roles.save(
            UserRole(
                user_id=user.id,
                role_id=role.id,
                granted_at=now,
                granted_by=self.system_user_id,
            )
        )
        session.emit(PermissionChangeEvent.role_assigned(user.id, role.id, self.system_user_id))
        return user
