"""Protocol interfaces for the role and permission catalog."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .permission import Permission
from .role import Role


@runtime_checkable
class RoleRepository(Protocol):
    """Storage contract for roles."""

    @abstractmethod
    async def get_by_id(self, role_id: str) -> Optional[Role]:
        """Get a non-deleted role."""
        ...

    @abstractmethod
    async def get_by_id_including_deleted(self, role_id: str) -> Optional[Role]:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get a non-deleted role by name."""
        ...

    @abstractmethod
    async def list_active(self) -> List[Role]:
        ...

    @abstractmethod
    async def list_children(self, parent_role_id: str) -> List[Role]:
        ...

    @abstractmethod
    async def save(self, role: Role) -> Role:
        ...


@runtime_checkable
class PermissionRepository(Protocol):
    """Storage contract for permissions."""

    @abstractmethod
    async def get_by_id(self, permission_id: str) -> Optional[Permission]:
        """Get a non-deleted permission."""
        ...

    @abstractmethod
    async def get_by_id_including_deleted(self, permission_id: str) -> Optional[Permission]:
        ...

    @abstractmethod
    async def list_active(self) -> List[Permission]:
        ...

    @abstractmethod
    async def list_by_resource_type(self, resource_type: str) -> List[Permission]:
        ...

    @abstractmethod
    async def save(self, permission: Permission) -> Permission:
        ...
