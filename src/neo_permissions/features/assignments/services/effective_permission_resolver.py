"""Effective permission resolver.

Computes what a user can do now, or could do at a past instant, from the
temporal assignment store.
"""

import logging
from datetime import datetime
from typing import Set

from ....utils.time import Clock, ensure_utc, utc_now
from ...storage.entities import StorageSession, UnitOfWork
from ..entities import EffectivePermissions

logger = logging.getLogger(__name__)


class EffectivePermissionResolver:
    """Resolves effective permissions.

    "Now" results are the union of permission ids granted through active roles,
    plus active resource grants and active received delegations returned as
    rows. Point-in-time results reconstruct role grants with the historical
    window of both the user-role and the role-permission rows, and carry no
    delegations.

    Unknown users resolve to empty results.
    """

    def __init__(self, unit_of_work: UnitOfWork, clock: Clock = utc_now):
        self.unit_of_work = unit_of_work
        self._clock = clock

    async def get_effective_permissions(self, user_id: str) -> EffectivePermissions:
        async with self.unit_of_work.transaction() as session:
            return await self.resolve(session, user_id, self._clock())

    async def get_permissions_at_point_in_time(
        self, user_id: str, point_in_time: datetime
    ) -> EffectivePermissions:
        async with self.unit_of_work.transaction() as session:
            return await self.resolve_at(session, user_id, ensure_utc(point_in_time))

    async def resolve(self, session: StorageSession, user_id: str, now: datetime) -> EffectivePermissions:
        """Resolve current permissions inside an open session."""
        user_roles = await session.user_roles.find_active_by_user(user_id, now)
        role_ids = {user_role.role_id for user_role in user_roles}

        permission_ids: Set[str] = set()
        for role_id in sorted(role_ids):
            grants = await session.role_permissions.find_unrevoked_by_role(role_id)
            permission_ids.update(grant.permission_id for grant in grants)

        resource_permissions = await session.resource_permissions.find_active_by_user(user_id, now)
        delegations = await session.delegations.find_active_for_delegatee(user_id, now)

        logger.debug(
            f"Resolved {len(permission_ids)} role permissions for user {user_id} "
            f"from {len(role_ids)} roles"
        )
        return EffectivePermissions(
            role_permissions=frozenset(permission_ids),
            resource_permissions=resource_permissions,
            delegations=delegations,
        )

    async def resolve_at(
        self, session: StorageSession, user_id: str, point_in_time: datetime
    ) -> EffectivePermissions:
        """Reconstruct permissions held at ``point_in_time`` inside an open session."""
        user_roles = await session.user_roles.find_at_point_in_time(user_id, point_in_time)
        role_ids = {user_role.role_id for user_role in user_roles}

        permission_ids: Set[str] = set()
        for role_id in sorted(role_ids):
            grants = await session.role_permissions.find_by_role_at_point_in_time(role_id, point_in_time)
            permission_ids.update(grant.permission_id for grant in grants)

        resource_permissions = await session.resource_permissions.find_at_point_in_time(
            user_id, point_in_time
        )

        logger.debug(
            f"Reconstructed {len(permission_ids)} role permissions for user {user_id} "
            f"at {point_in_time.isoformat()}"
        )
        return EffectivePermissions(
            role_permissions=frozenset(permission_ids),
            resource_permissions=resource_permissions,
        )
