"""Permission catalog service."""

import logging
from typing import List, Optional

from ....core.exceptions import (
    DuplicateResourceError,
    PermissionNotFoundError,
    ValidationError,
)
from ....utils.time import Clock, utc_now
from ...assignments.entities import CascadeResult
from ...assignments.services import CascadingRevocationService
from ...storage.entities import UnitOfWork
from ..entities import Permission, split_permission_id

logger = logging.getLogger(__name__)


class PermissionCatalogService:
    """CRUD and soft-delete lifecycle of permissions."""

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        cascade: CascadingRevocationService,
        clock: Clock = utc_now,
    ):
        self.unit_of_work = unit_of_work
        self.cascade = cascade
        self._clock = clock

    async def list_permissions(self, resource_type: Optional[str] = None) -> List[Permission]:
        async with self.unit_of_work.transaction() as session:
            if resource_type:
                return await session.permissions.list_by_resource_type(resource_type)
            return await session.permissions.list_active()

    async def get_permission(self, permission_id: str) -> Permission:
        async with self.unit_of_work.transaction() as session:
            permission = await session.permissions.get_by_id(permission_id)
        if permission is None:
            raise PermissionNotFoundError(permission_id)
        return permission

    async def create_permission(
        self,
        permission_id: str,
        name: str,
        description: Optional[str] = None,
        resource_type: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Permission:
        """Create a permission. Resource type and action default to the ``resource:action`` parts."""
        if not permission_id or not permission_id.strip():
            raise ValidationError("Permission id is required", field="id")

        parsed_resource, parsed_action = split_permission_id(permission_id)
        async with self.unit_of_work.transaction() as session:
            if await session.permissions.get_by_id_including_deleted(permission_id) is not None:
                raise DuplicateResourceError("permission", "id", permission_id)

            permission = Permission(
                id=permission_id,
                name=name,
                description=description,
                resource_type=resource_type or parsed_resource,
                action=action or parsed_action,
                created_at=self._clock(),
            )
            await session.permissions.save(permission)

        logger.info(f"Created permission {permission_id}")
        return permission

    async def delete_permission(self, permission_id: str, deleted_by: str) -> CascadeResult:
        """Revoke the permission from every role, then soft-delete it."""
        async with self.unit_of_work.transaction() as session:
            permission = await session.permissions.get_by_id(permission_id)
            if permission is None:
                raise PermissionNotFoundError(permission_id)

            result = await self.cascade.apply_permission_cascade(session, permission_id, deleted_by)

            permission.mark_deleted(deleted_by, self._clock())
            await session.permissions.save(permission)

        logger.info(
            f"Deleted permission {permission_id} by {deleted_by}, "
            f"affected roles: {sorted(result.affected_role_ids)}"
        )
        return result

    async def restore_permission(self, permission_id: str) -> Permission:
        async with self.unit_of_work.transaction() as session:
            permission = await session.permissions.get_by_id_including_deleted(permission_id)
            if permission is None:
                raise PermissionNotFoundError(permission_id)

            permission.restore(self._clock())
            await session.permissions.save(permission)

        logger.info(f"Restored permission {permission_id}")
        return permission
