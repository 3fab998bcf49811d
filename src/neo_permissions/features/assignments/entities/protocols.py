"""Protocol interfaces for the temporal assignment store.

"Unrevoked" means ``revoked_at IS NULL``. "Active" additionally applies the
row's expiry or validity window against the ``now`` argument. Point-in-time
lookups apply ``granted_at <= t AND (revoked_at IS NULL OR revoked_at > t)``.
"""

from abc import abstractmethod
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from .delegation import Delegation
from .resource_permission import ResourcePermission
from .role_permission import RolePermission
from .user_role import UserRole


@runtime_checkable
class UserRoleRepository(Protocol):
    """Storage contract for user-role assignment rows."""

    @abstractmethod
    async def find_active_by_user(self, user_id: str, now: datetime) -> List[UserRole]:
        ...

    @abstractmethod
    async def find_unrevoked_by_user(self, user_id: str) -> List[UserRole]:
        ...

    @abstractmethod
    async def find_unrevoked_by_role(self, role_id: str) -> List[UserRole]:
        ...

    @abstractmethod
    async def find_unrevoked(
        self, user_id: str, role_id: str, organization_id: Optional[str] = None
    ) -> Optional[UserRole]:
        ...

    @abstractmethod
    async def find_at_point_in_time(self, user_id: str, instant: datetime) -> List[UserRole]:
        ...

    @abstractmethod
    async def save(self, user_role: UserRole) -> UserRole:
        """Insert when ``id`` is None, otherwise update the revocation fields."""
        ...


@runtime_checkable
class RolePermissionRepository(Protocol):
    """Storage contract for role-permission grant rows."""

    @abstractmethod
    async def find_unrevoked_by_role(self, role_id: str) -> List[RolePermission]:
        ...

    @abstractmethod
    async def find_unrevoked_by_permission(self, permission_id: str) -> List[RolePermission]:
        ...

    @abstractmethod
    async def find_unrevoked(self, role_id: str, permission_id: str) -> Optional[RolePermission]:
        ...

    @abstractmethod
    async def find_by_role_at_point_in_time(
        self, role_id: str, instant: datetime
    ) -> List[RolePermission]:
        ...

    @abstractmethod
    async def save(self, role_permission: RolePermission) -> RolePermission:
        ...


@runtime_checkable
class ResourcePermissionRepository(Protocol):
    """Storage contract for resource-level grant rows."""

    @abstractmethod
    async def get_by_id(self, grant_id: int) -> Optional[ResourcePermission]:
        ...

    @abstractmethod
    async def find_active_by_user(self, user_id: str, now: datetime) -> List[ResourcePermission]:
        ...

    @abstractmethod
    async def find_unrevoked_by_user(self, user_id: str) -> List[ResourcePermission]:
        ...

    @abstractmethod
    async def find_active_for_resource(
        self, user_id: str, resource_type: str, resource_id: str, now: datetime
    ) -> List[ResourcePermission]:
        ...

    @abstractmethod
    async def find_unrevoked(
        self, user_id: str, resource_type: str, resource_id: str, permission: str
    ) -> Optional[ResourcePermission]:
        ...

    @abstractmethod
    async def find_at_point_in_time(
        self, user_id: str, instant: datetime
    ) -> List[ResourcePermission]:
        ...

    @abstractmethod
    async def save(self, grant: ResourcePermission) -> ResourcePermission:
        ...


@runtime_checkable
class DelegationRepository(Protocol):
    """Storage contract for delegation rows."""

    @abstractmethod
    async def get_by_id(self, delegation_id: int) -> Optional[Delegation]:
        ...

    @abstractmethod
    async def find_active_for_delegatee(self, user_id: str, now: datetime) -> List[Delegation]:
        ...

    @abstractmethod
    async def find_active_by_delegator(self, user_id: str, now: datetime) -> List[Delegation]:
        ...

    @abstractmethod
    async def find_unrevoked_by_party(self, user_id: str) -> List[Delegation]:
        """Unrevoked rows where the user is delegator or delegatee, future-dated ones included."""
        ...

    @abstractmethod
    async def save(self, delegation: Delegation) -> Delegation:
        ...
