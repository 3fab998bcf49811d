"""Role and permission response models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class RoleResponse(BaseModel):
    id: str = Field(..., description="Role ID")
    name: str = Field(..., description="Role name")
    description: Optional[str] = Field(None, description="Role description")
    parent_role_id: Optional[str] = Field(None, description="Parent role ID")
    is_system: bool = Field(False, description="Whether the role was seeded")
    deleted: bool = Field(False, description="Whether the role is soft-deleted")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @classmethod
    def from_entity(cls, role) -> "RoleResponse":
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            parent_role_id=role.parent_role_id,
            is_system=role.is_system,
            deleted=role.deleted,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class PermissionResponse(BaseModel):
    id: str = Field(..., description="Permission ID")
    name: str = Field(..., description="Permission name")
    description: Optional[str] = Field(None, description="Permission description")
    resource_type: Optional[str] = Field(None, description="Resource type")
    action: Optional[str] = Field(None, description="Action")
    deleted: bool = Field(False, description="Whether the permission is soft-deleted")
    created_at: datetime = Field(..., description="Creation timestamp")

    @classmethod
    def from_entity(cls, permission) -> "PermissionResponse":
        return cls(
            id=permission.id,
            name=permission.name,
            description=permission.description,
            resource_type=permission.resource_type,
            action=permission.action,
            deleted=permission.deleted,
            created_at=permission.created_at,
        )


class RolePermissionsResponse(BaseModel):
    role_id: str = Field(..., description="Role ID")
    permission_ids: List[str] = Field(default_factory=list, description="Permissions granted to the role")
