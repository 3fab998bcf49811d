"""Cascading revocation coordinator.

When a user, role or permission is soft-deleted, every unrevoked temporal row
that depends on it is revoked in the same unit of work, and the users whose
effective permissions changed are collected for cache invalidation.

The ``apply_*`` methods run inside a session the caller already holds, so an
entity service can cascade and then soft-delete atomically. The
``revoke_all_for_*`` methods open their own unit of work.
"""

import logging
from typing import Set

from ....config.constants import CascadeEntityType
from ....utils.time import Clock, utc_now
from ...events.entities import PermissionChangeEvent
from ...storage.entities import StorageSession, UnitOfWork
from ..entities import CascadeResult

logger = logging.getLogger(__name__)


class CascadingRevocationService:
    """Revokes dependent rows of soft-deleted entities."""

    def __init__(self, unit_of_work: UnitOfWork, clock: Clock = utc_now):
        self.unit_of_work = unit_of_work
        self._clock = clock

    async def revoke_all_for_user(self, user_id: str, revoked_by: str) -> CascadeResult:
        async with self.unit_of_work.transaction() as session:
            return await self.apply_user_cascade(session, user_id, revoked_by)

    async def revoke_all_for_role(self, role_id: str, revoked_by: str) -> CascadeResult:
        async with self.unit_of_work.transaction() as session:
            return await self.apply_role_cascade(session, role_id, revoked_by)

    async def revoke_all_for_permission(self, permission_id: str, revoked_by: str) -> CascadeResult:
        async with self.unit_of_work.transaction() as session:
            return await self.apply_permission_cascade(session, permission_id, revoked_by)

    async def apply_user_cascade(
        self, session: StorageSession, user_id: str, revoked_by: str
    ) -> CascadeResult:
        """Revoke the user's roles, resource grants and delegations on either side.

        Delegation counterparties are reported as affected since a received
        delegation is part of their effective permissions.
        """
        now = self._clock()
        affected: Set[str] = {user_id}

        user_roles = await session.user_roles.find_unrevoked_by_user(user_id)
        for user_role in user_roles:
            user_role.revoke(revoked_by, now)
            await session.user_roles.save(user_role)

        grants = await session.resource_permissions.find_unrevoked_by_user(user_id)
        for grant in grants:
            grant.revoke(revoked_by, now)
            await session.resource_permissions.save(grant)

        delegations = await session.delegations.find_unrevoked_by_party(user_id)
        for delegation in delegations:
            delegation.revoke(revoked_by, now)
            await session.delegations.save(delegation)
            affected.add(delegation.delegatee_id)

        session.emit(
            PermissionChangeEvent.cascading_revocation(
                CascadeEntityType.USER, user_id, revoked_by, affected - {user_id}
            )
        )
        logger.info(
            f"Cascading revocation for user {user_id}: {len(user_roles)} roles, "
            f"{len(grants)} resource permissions, {len(delegations)} delegations"
        )
        return CascadeResult(
            entity_type=CascadeEntityType.USER,
            entity_id=user_id,
            revoked_by=revoked_by,
            affected_user_ids=frozenset(affected),
            revoked_user_roles=len(user_roles),
            revoked_resource_permissions=len(grants),
            revoked_delegations=len(delegations),
        )

    async def apply_role_cascade(
        self, session: StorageSession, role_id: str, revoked_by: str
    ) -> CascadeResult:
        """Revoke every holder's assignment of the role and every grant attached to it."""
        now = self._clock()
        affected: Set[str] = set()

        user_roles = await session.user_roles.find_unrevoked_by_role(role_id)
        for user_role in user_roles:
            user_role.revoke(revoked_by, now)
            await session.user_roles.save(user_role)
            affected.add(user_role.user_id)

        grants = await session.role_permissions.find_unrevoked_by_role(role_id)
        for grant in grants:
            grant.revoke(revoked_by, now)
            await session.role_permissions.save(grant)

        session.emit(
            PermissionChangeEvent.cascading_revocation(
                CascadeEntityType.ROLE, role_id, revoked_by, affected
            )
        )
        logger.info(
            f"Cascading revocation for role {role_id}: {len(user_roles)} assignments, "
            f"{len(grants)} permissions, {len(affected)} affected users"
        )
        return CascadeResult(
            entity_type=CascadeEntityType.ROLE,
            entity_id=role_id,
            revoked_by=revoked_by,
            affected_user_ids=frozenset(affected),
            affected_role_ids=frozenset({role_id}),
            revoked_user_roles=len(user_roles),
            revoked_role_permissions=len(grants),
        )

    async def apply_permission_cascade(
        self, session: StorageSession, permission_id: str, revoked_by: str
    ) -> CascadeResult:
        """Revoke the permission from every role, then find the users holding those roles."""
        now = self._clock()
        affected_roles: Set[str] = set()

        grants = await session.role_permissions.find_unrevoked_by_permission(permission_id)
        for grant in grants:
            grant.revoke(revoked_by, now)
            await session.role_permissions.save(grant)
            affected_roles.add(grant.role_id)

        affected_users: Set[str] = set()
        for role_id in sorted(affected_roles):
            holders = await session.user_roles.find_unrevoked_by_role(role_id)
            affected_users.update(
                holder.user_id for holder in holders if holder.is_active(now)
            )

        session.emit(
            PermissionChangeEvent.cascading_revocation(
                CascadeEntityType.PERMISSION, permission_id, revoked_by, affected_users
            )
        )
        logger.info(
            f"Cascading revocation for permission {permission_id}: {len(grants)} role grants, "
            f"{len(affected_roles)} roles, {len(affected_users)} affected users"
        )
        return CascadeResult(
            entity_type=CascadeEntityType.PERMISSION,
            entity_id=permission_id,
            revoked_by=revoked_by,
            affected_user_ids=frozenset(affected_users),
            affected_role_ids=frozenset(affected_roles),
            revoked_role_permissions=len(grants),
        )
