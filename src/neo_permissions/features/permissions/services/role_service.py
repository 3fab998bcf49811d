"""Role service for catalog management."""

import logging
from typing import List, Optional

from ....config.constants import ROLE_ID_PREFIX
from ....config.governance import GovernanceConfig
from ....core.exceptions import (
    ConstraintViolationError,
    DuplicateResourceError,
    ProtectedRoleError,
    RoleNotFoundError,
    ValidationError,
)
from ....utils.ids import generate_prefixed_id
from ....utils.time import Clock, utc_now
from ...assignments.entities import CascadeResult
from ...assignments.services import CascadingRevocationService
from ...storage.entities import StorageSession, UnitOfWork
from ..entities import Role

logger = logging.getLogger(__name__)


class RoleService:
    """CRUD and soft-delete lifecycle of roles."""

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        cascade: CascadingRevocationService,
        config: Optional[GovernanceConfig] = None,
        clock: Clock = utc_now,
    ):
        self.unit_of_work = unit_of_work
        self.cascade = cascade
        self.config = config or GovernanceConfig()
        self._clock = clock

    async def list_roles(self) -> List[Role]:
        async with self.unit_of_work.transaction() as session:
            return await session.roles.list_active()

    async def get_role(self, role_id: str) -> Role:
        async with self.unit_of_work.transaction() as session:
            role = await session.roles.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return role

    async def create_role(
        self,
        name: str,
        description: Optional[str] = None,
        parent_role_id: Optional[str] = None,
    ) -> Role:
        if not name or not name.strip():
            raise ValidationError("Role name is required", field="name")

        async with self.unit_of_work.transaction() as session:
            await self._check_name_available(session, name)
            if parent_role_id is not None and await session.roles.get_by_id(parent_role_id) is None:
                raise RoleNotFoundError(parent_role_id, message=f"Parent role not found: {parent_role_id}")

            role = Role(
                id=generate_prefixed_id(ROLE_ID_PREFIX),
                name=name.strip(),
                description=description,
                parent_role_id=parent_role_id,
                created_at=self._clock(),
            )
            await self._save(session, role)

        logger.info(f"Created role {role.id} ({role.name})")
        return role

    async def update_role(
        self,
        role_id: str,
        name: str,
        description: Optional[str] = None,
        parent_role_id: Optional[str] = None,
    ) -> Role:
        if not name or not name.strip():
            raise ValidationError("Role name is required", field="name")

        async with self.unit_of_work.transaction() as session:
            role = await session.roles.get_by_id(role_id)
            if role is None:
                raise RoleNotFoundError(role_id)
            if name.strip() != role.name:
                await self._check_name_available(session, name.strip())
            if parent_role_id is not None:
                if parent_role_id == role_id:
                    raise ValidationError("A role cannot be its own parent", field="parent_role_id")
                if await session.roles.get_by_id(parent_role_id) is None:
                    raise RoleNotFoundError(parent_role_id, message=f"Parent role not found: {parent_role_id}")

            role.name = name.strip()
            role.description = description
            role.parent_role_id = parent_role_id
            role.updated_at = self._clock()
            await self._save(session, role)

        logger.info(f"Updated role {role_id}")
        return role

    async def delete_role(self, role_id: str, deleted_by: str) -> CascadeResult:
        """Revoke the role from every holder and strip its grants, then soft-delete it."""
        if self.config.is_protected(role_id):
            raise ProtectedRoleError(role_id, "deleted")

        async with self.unit_of_work.transaction() as session:
            role = await session.roles.get_by_id(role_id)
            if role is None:
                raise RoleNotFoundError(role_id)

            result = await self.cascade.apply_role_cascade(session, role_id, deleted_by)

            role.mark_deleted(deleted_by, self._clock())
            await session.roles.save(role)

        logger.info(
            f"Deleted role {role_id} by {deleted_by}, affected users: {sorted(result.affected_user_ids)}"
        )
        return result

    async def restore_role(self, role_id: str) -> Role:
        """Clear the soft-delete flag. Revoked assignments and grants stay revoked."""
        async with self.unit_of_work.transaction() as session:
            role = await session.roles.get_by_id_including_deleted(role_id)
            if role is None:
                raise RoleNotFoundError(role_id)

            role.restore(self._clock())
            await self._check_name_available(session, role.name)
            await self._save(session, role)

        logger.info(f"Restored role {role_id}")
        return role

    async def _check_name_available(self, session: StorageSession, name: str) -> None:
        if await session.roles.get_by_name(name) is not None:
            raise DuplicateResourceError("role", "name", name)

    async def _save(self, session: StorageSession, role: Role) -> None:
        try:
            await session.roles.save(role)
        except ConstraintViolationError as e:
            raise DuplicateResourceError("role", "name", role.name) from e
