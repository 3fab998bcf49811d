"""Grants and revokes permissions on roles."""

import logging
from typing import List

from ....core.exceptions import (
    AssignmentNotFoundError,
    ConstraintViolationError,
    DuplicateResourceError,
    PermissionNotFoundError,
    RoleNotFoundError,
)
from ....utils.time import Clock, utc_now
from ...events.entities import PermissionChangeEvent
from ...storage.entities import StorageSession, UnitOfWork
from ..entities import RolePermission

logger = logging.getLogger(__name__)


class RolePermissionService:
    """Maintains the temporal role-permission grants.

    Both operations notify the current holders of the role, since their
    effective permissions change.
    """

    def __init__(self, unit_of_work: UnitOfWork, clock: Clock = utc_now):
        self.unit_of_work = unit_of_work
        self._clock = clock

    async def grant_permission_to_role(
        self, role_id: str, permission_id: str, granted_by: str
    ) -> RolePermission:
        async with self.unit_of_work.transaction() as session:
            if await session.roles.get_by_id(role_id) is None:
                raise RoleNotFoundError(role_id)
            if await session.permissions.get_by_id(permission_id) is None:
                raise PermissionNotFoundError(permission_id)
            if await session.role_permissions.find_unrevoked(role_id, permission_id) is not None:
                raise DuplicateResourceError("role_permission", "permission_id", f"{role_id}/{permission_id}")

            try:
                grant = await session.role_permissions.save(
                    RolePermission(
                        role_id=role_id,
                        permission_id=permission_id,
                        granted_at=self._clock(),
                        granted_by=granted_by,
                    )
                )
            except ConstraintViolationError as e:
                raise DuplicateResourceError(
                    "role_permission", "permission_id", f"{role_id}/{permission_id}"
                ) from e

            holders = await self._holders(session, role_id)
            session.emit(
                PermissionChangeEvent.role_permission_granted(role_id, permission_id, granted_by, holders)
            )

        logger.info(f"Granted permission {permission_id} to role {role_id} by {granted_by}")
        return grant

    async def revoke_permission_from_role(
        self, role_id: str, permission_id: str, revoked_by: str
    ) -> RolePermission:
        async with self.unit_of_work.transaction() as session:
            grant = await session.role_permissions.find_unrevoked(role_id, permission_id)
            if grant is None:
                raise AssignmentNotFoundError(
                    "Active role permission not found", role_id=role_id, permission_id=permission_id
                )

            grant.revoke(revoked_by, self._clock())
            await session.role_permissions.save(grant)

            holders = await self._holders(session, role_id)
            session.emit(
                PermissionChangeEvent.role_permission_revoked(role_id, permission_id, revoked_by, holders)
            )

        logger.info(f"Revoked permission {permission_id} from role {role_id} by {revoked_by}")
        return grant

    async def list_role_permissions(self, role_id: str) -> List[str]:
        async with self.unit_of_work.transaction() as session:
            if await session.roles.get_by_id(role_id) is None:
                raise RoleNotFoundError(role_id)
            grants = await session.role_permissions.find_unrevoked_by_role(role_id)
        return sorted(grant.permission_id for grant in grants)

    async def _holders(self, session: StorageSession, role_id: str) -> List[str]:
        holders = await session.user_roles.find_unrevoked_by_role(role_id)
        return [holder.user_id for holder in holders]
