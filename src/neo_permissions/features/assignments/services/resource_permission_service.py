"""Resource permission service."""

import logging
from datetime import datetime
from typing import List, Optional

from ....core.exceptions import (
    ConstraintViolationError,
    DuplicateResourceError,
    ResourcePermissionNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from ....utils.time import Clock, ensure_utc, utc_now
from ...events.entities import PermissionChangeEvent
from ...storage.entities import UnitOfWork
from ..entities import ResourcePermission

logger = logging.getLogger(__name__)


class ResourcePermissionService:
    """Grants and revokes permissions on individual resource instances."""

    def __init__(self, unit_of_work: UnitOfWork, clock: Clock = utc_now):
        self.unit_of_work = unit_of_work
        self._clock = clock

    async def grant_permission(
        self,
        user_id: str,
        resource_type: str,
        resource_id: str,
        permission: str,
        granted_by: str,
        expires_at: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> ResourcePermission:
        async with self.unit_of_work.transaction() as session:
            now = self._clock()
            if expires_at is not None and ensure_utc(expires_at) <= now:
                raise ValidationError("expires_at must be in the future", field="expires_at")
            if await session.users.get_by_id(user_id) is None:
                raise UserNotFoundError(user_id)

            key = f"{resource_type}/{resource_id}/{permission}"
            if await session.resource_permissions.find_unrevoked(
                user_id, resource_type, resource_id, permission
            ) is not None:
                raise DuplicateResourceError("resource_permission", "resource", key)

            try:
                grant = await session.resource_permissions.save(
                    ResourcePermission(
                        user_id=user_id,
                        resource_type=resource_type,
                        resource_id=resource_id,
                        permission=permission,
                        granted_at=now,
                        granted_by=granted_by,
                        expires_at=ensure_utc(expires_at) if expires_at else None,
                        reason=reason,
                    )
                )
            except ConstraintViolationError as e:
                raise DuplicateResourceError("resource_permission", "resource", key) from e

            session.emit(
                PermissionChangeEvent.resource_permission_granted(
                    user_id, grant.id, resource_type, resource_id, permission
                )
            )

        logger.info(f"Granted {permission} on {resource_type}/{resource_id} to {user_id} by {granted_by}")
        return grant

    async def revoke_permission(self, grant_id: int, revoked_by: str) -> ResourcePermission:
        async with self.unit_of_work.transaction() as session:
            grant = await session.resource_permissions.get_by_id(grant_id)
            if grant is None:
                raise ResourcePermissionNotFoundError(grant_id)

            grant.revoke(revoked_by, self._clock())
            await session.resource_permissions.save(grant)
            session.emit(
                PermissionChangeEvent.resource_permission_revoked(grant.user_id, grant.id, revoked_by)
            )

        logger.info(f"Revoked resource permission {grant_id} by {revoked_by}")
        return grant

    async def get_for_user(self, user_id: str) -> List[ResourcePermission]:
        async with self.unit_of_work.transaction() as session:
            return await session.resource_permissions.find_active_by_user(user_id, self._clock())

    async def has_resource_permission(
        self, user_id: str, resource_type: str, resource_id: str, permission: str
    ) -> bool:
        async with self.unit_of_work.transaction() as session:
            grants = await session.resource_permissions.find_active_for_resource(
                user_id, resource_type, resource_id, self._clock()
            )
        return any(grant.permission == permission for grant in grants)
