"""Permission query facade."""

import logging
from datetime import datetime
from typing import List, Optional

from ....utils.time import Clock, utc_now
from ...assignments.entities import EffectivePermissions, UserRole
from ...assignments.services import EffectivePermissionResolver, RoleAssignmentGovernor
from ...cache.services import PermissionCacheService
from ...storage.entities import UnitOfWork
from ..entities import Role

logger = logging.getLogger(__name__)


class PermissionService:
    """Read side of the permission model plus role assignment entry points.

    ``has_permission`` is served from the permission cache when one is
    configured and populates it on a miss. Writes go through the governor, and
    the unit of work invalidates the cache for affected users after commit.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        resolver: EffectivePermissionResolver,
        governor: RoleAssignmentGovernor,
        cache: Optional[PermissionCacheService] = None,
        clock: Clock = utc_now,
    ):
        self.unit_of_work = unit_of_work
        self.resolver = resolver
        self.governor = governor
        self.cache = cache
        self._clock = clock

    async def get_effective_permissions(self, user_id: str) -> EffectivePermissions:
        return await self.resolver.get_effective_permissions(user_id)

    async def get_permissions_at_point_in_time(
        self, user_id: str, point_in_time: datetime
    ) -> EffectivePermissions:
        return await self.resolver.get_permissions_at_point_in_time(user_id, point_in_time)

    async def get_user_roles(self, user_id: str) -> List[Role]:
        """Roles the user holds right now, skipping soft-deleted roles."""
        async with self.unit_of_work.transaction() as session:
            assignments = await session.user_roles.find_active_by_user(user_id, self._clock())
            roles: List[Role] = []
            for role_id in sorted({assignment.role_id for assignment in assignments}):
                role = await session.roles.get_by_id(role_id)
                if role is not None:
                    roles.append(role)
        return roles

    async def has_permission(self, user_id: str, permission_id: str) -> bool:
        generation = None
        if self.cache is not None:
            cached = await self.cache.get(user_id)
            if cached is not None:
                return permission_id in cached
            generation = self.cache.generation(user_id)

        permissions = await self.resolver.get_effective_permissions(user_id)
        permission_ids = permissions.all_permission_ids()
        if self.cache is not None:
            await self.cache.put(user_id, permission_ids, generation=generation)
        return permission_id in permission_ids

    async def assign_role(self, user_id: str, role_id: str, granted_by: str) -> UserRole:
        return await self.governor.assign_role(user_id, role_id, granted_by)

    async def revoke_role(self, user_id: str, role_id: str, revoked_by: str) -> UserRole:
        return await self.governor.revoke_role(user_id, role_id, revoked_by)
