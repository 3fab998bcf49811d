"""Role assignment governor.

Guards every API-driven change to a user's roles: the protected role is
locked out, assigning requires a tier-dependent governance permission and
revoking requires the revoke permission. Each operation runs its checks and
its write in one unit of work.
"""

import logging
from typing import Set

from ....config.constants import RoleTier
from ....config.governance import GovernanceConfig
from ....core.exceptions import (
    AssignmentNotFoundError,
    ConstraintViolationError,
    DuplicateRoleAssignmentError,
    PermissionDeniedError,
    ProtectedRoleError,
    RoleNotFoundError,
    UserNotFoundError,
)
from ....utils.time import Clock, utc_now
from ...events.entities import PermissionChangeEvent
from ...storage.entities import StorageSession, UnitOfWork
from ..entities import UserRole
from .effective_permission_resolver import EffectivePermissionResolver

logger = logging.getLogger(__name__)


_TIER_ERROR_CODES = {
    RoleTier.BASIC: "INSUFFICIENT_PERMISSION_FOR_BASIC_ROLE",
    RoleTier.ELEVATED: "INSUFFICIENT_PERMISSION_FOR_ELEVATED_ROLE",
    RoleTier.CUSTOM: "INSUFFICIENT_PERMISSION_FOR_CUSTOM_ROLE",
}


class RoleAssignmentGovernor:
    """State machine over user-role rows.

    no active row --assign_role--> active row --revoke_role--> revoked row.
    Re-assigning after a revocation inserts a fresh row.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        resolver: EffectivePermissionResolver,
        config: GovernanceConfig,
        clock: Clock = utc_now,
    ):
        self.unit_of_work = unit_of_work
        self.resolver = resolver
        self.config = config
        self._clock = clock

    async def assign_role(self, user_id: str, role_id: str, granted_by: str) -> UserRole:
        """Assign ``role_id`` to ``user_id`` on behalf of ``granted_by``."""
        if self.config.is_protected(role_id):
            logger.warning(f"Rejected assignment of protected role {role_id} to {user_id} by {granted_by}")
            raise ProtectedRoleError(role_id, "assigned")

        async with self.unit_of_work.transaction() as session:
            now = self._clock()
            await self._check_assign_permission(session, granted_by, role_id, now)

            if await session.users.get_by_id(user_id) is None:
                raise UserNotFoundError(user_id)
            if await session.roles.get_by_id(role_id) is None:
                raise RoleNotFoundError(role_id)

            if await session.user_roles.find_unrevoked(user_id, role_id) is not None:
                raise DuplicateRoleAssignmentError(user_id, role_id)

            user_role = UserRole(
                user_id=user_id,
                role_id=role_id,
                granted_at=now,
                granted_by=granted_by,
            )
            try:
                user_role = await session.user_roles.save(user_role)
            except ConstraintViolationError as e:
                # A concurrent writer won the race for the active-row index.
                raise DuplicateRoleAssignmentError(user_id, role_id) from e

            session.emit(PermissionChangeEvent.role_assigned(user_id, role_id, granted_by))

        logger.info(f"Assigned role {role_id} to user {user_id} by {granted_by}")
        return user_role

    async def revoke_role(self, user_id: str, role_id: str, revoked_by: str) -> UserRole:
        """Revoke the active assignment of ``role_id`` from ``user_id``."""
        if self.config.is_protected(role_id):
            logger.warning(f"Rejected revocation of protected role {role_id} from {user_id} by {revoked_by}")
            raise ProtectedRoleError(role_id, "revoked")

        async with self.unit_of_work.transaction() as session:
            now = self._clock()
            held = await self._permissions_of(session, revoked_by, now)
            if self.config.revoke_permission not in held:
                logger.warning(f"User {revoked_by} lacks {self.config.revoke_permission} to revoke {role_id}")
                raise PermissionDeniedError(
                    f"Revoking roles requires {self.config.revoke_permission} permission",
                    error_code="INSUFFICIENT_PERMISSION_FOR_REVOKE",
                    actor_id=revoked_by,
                    required_permission=self.config.revoke_permission,
                    role_id=role_id,
                )

            user_role = await session.user_roles.find_unrevoked(user_id, role_id)
            if user_role is None:
                raise AssignmentNotFoundError(
                    "Active role assignment not found", user_id=user_id, role_id=role_id
                )

            user_role.revoke(revoked_by, now)
            await session.user_roles.save(user_role)
            session.emit(PermissionChangeEvent.role_revoked(user_id, role_id, revoked_by))

        logger.info(f"Revoked role {role_id} from user {user_id} by {revoked_by}")
        return user_role

    async def _permissions_of(self, session: StorageSession, user_id: str, now) -> Set[str]:
        effective = await self.resolver.resolve(session, user_id, now)
        return effective.all_permission_ids()

    async def _check_assign_permission(
        self, session: StorageSession, granted_by: str, role_id: str, now
    ) -> None:
        held = await self._permissions_of(session, granted_by, now)
        tier = self.config.tier_of(role_id)

        if tier == RoleTier.BASIC:
            allowed = (
                self.config.assign_basic_permission in held
                or self.config.assign_elevated_permission in held
            )
            required = self.config.assign_basic_permission
        else:
            allowed = self.config.assign_elevated_permission in held
            required = self.config.assign_elevated_permission

        if not allowed:
            logger.warning(f"User {granted_by} lacks {required} to assign {tier.value} role {role_id}")
            raise PermissionDeniedError(
                f"Assigning {tier.value} role {role_id} requires {required} permission",
                error_code=_TIER_ERROR_CODES[tier],
                actor_id=granted_by,
                required_permission=required,
                role_id=role_id,
                tier=tier.value,
            )
