"""Role and permission request models."""

from typing import Optional

from pydantic import BaseModel, Field


class CreateRoleRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Unique role name")
    description: Optional[str] = Field(None, description="Role description")
    parent_role_id: Optional[str] = Field(None, description="Parent role ID")


class UpdateRoleRequest(CreateRoleRequest):
    pass


class CreatePermissionRequest(BaseModel):
    id: str = Field(..., min_length=1, description="Permission id, conventionally resource:action")
    name: str = Field(..., min_length=1, description="Human readable name")
    description: Optional[str] = Field(None, description="Permission description")
    resource_type: Optional[str] = Field(None, description="Defaults to the resource part of the id")
    action: Optional[str] = Field(None, description="Defaults to the action part of the id")


class GrantRolePermissionRequest(BaseModel):
    permission_id: str = Field(..., min_length=1, description="Permission to grant to the role")
