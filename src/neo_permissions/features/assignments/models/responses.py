"""Assignment response models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserRoleResponse(BaseModel):
    id: Optional[int] = Field(None, description="Assignment row ID")
    user_id: str
    role_id: str
    granted_at: datetime
    granted_by: Optional[str] = None
    expires_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None

    @classmethod
    def from_entity(cls, user_role) -> "UserRoleResponse":
        return cls(
            id=user_role.id,
            user_id=user_role.user_id,
            role_id=user_role.role_id,
            granted_at=user_role.granted_at,
            granted_by=user_role.granted_by,
            expires_at=user_role.expires_at,
            revoked_at=user_role.revoked_at,
            revoked_by=user_role.revoked_by,
        )


class RolePermissionResponse(BaseModel):
    id: Optional[int] = None
    role_id: str
    permission_id: str
    granted_at: datetime
    granted_by: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None

    @classmethod
    def from_entity(cls, grant) -> "RolePermissionResponse":
        return cls(
            id=grant.id,
            role_id=grant.role_id,
            permission_id=grant.permission_id,
            granted_at=grant.granted_at,
            granted_by=grant.granted_by,
            revoked_at=grant.revoked_at,
            revoked_by=grant.revoked_by,
        )


class ResourcePermissionResponse(BaseModel):
    id: Optional[int] = None
    user_id: str
    resource_type: str
    resource_id: str
    permission: str
    granted_at: datetime
    granted_by: Optional[str] = None
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None

    @classmethod
    def from_entity(cls, grant) -> "ResourcePermissionResponse":
        return cls(
            id=grant.id,
            user_id=grant.user_id,
            resource_type=grant.resource_type,
            resource_id=grant.resource_id,
            permission=grant.permission,
            granted_at=grant.granted_at,
            granted_by=grant.granted_by,
            expires_at=grant.expires_at,
            reason=grant.reason,
            revoked_at=grant.revoked_at,
            revoked_by=grant.revoked_by,
        )


class DelegationResponse(BaseModel):
    id: Optional[int] = None
    delegator_id: str
    delegatee_id: str
    scope: str
    resource_type: Optional[str] = None
    resource_ids: List[str] = Field(default_factory=list)
    valid_from: datetime
    valid_until: Optional[datetime] = None
    reason: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None

    @classmethod
    def from_entity(cls, delegation) -> "DelegationResponse":
        return cls(
            id=delegation.id,
            delegator_id=delegation.delegator_id,
            delegatee_id=delegation.delegatee_id,
            scope=delegation.scope,
            resource_type=delegation.resource_type,
            resource_ids=list(delegation.resource_ids),
            valid_from=delegation.valid_from,
            valid_until=delegation.valid_until,
            reason=delegation.reason,
            revoked_at=delegation.revoked_at,
            revoked_by=delegation.revoked_by,
        )


class DelegationsSummaryResponse(BaseModel):
    given: List[DelegationResponse] = Field(default_factory=list)
    received: List[DelegationResponse] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary) -> "DelegationsSummaryResponse":
        return cls(
            given=[DelegationResponse.from_entity(d) for d in summary.given],
            received=[DelegationResponse.from_entity(d) for d in summary.received],
        )


class EffectivePermissionsResponse(BaseModel):
    user_id: str
    point_in_time: Optional[datetime] = Field(None, description="Set for historical queries")
    permissions: List[str] = Field(default_factory=list, description="Permission ids granted through roles")
    resource_permissions: List[ResourcePermissionResponse] = Field(default_factory=list)
    delegations: List[DelegationResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, user_id: str, result, point_in_time: Optional[datetime] = None) -> "EffectivePermissionsResponse":
        return cls(
            user_id=user_id,
            point_in_time=point_in_time,
            permissions=sorted(result.role_permissions),
            resource_permissions=[ResourcePermissionResponse.from_entity(g) for g in result.resource_permissions],
            delegations=[DelegationResponse.from_entity(d) for d in result.delegations],
        )


class CascadeResultResponse(BaseModel):
    entity_type: str
    entity_id: str
    revoked_by: str
    affected_user_ids: List[str] = Field(default_factory=list)
    affected_role_ids: List[str] = Field(default_factory=list)
    revoked_user_roles: int = 0
    revoked_role_permissions: int = 0
    revoked_resource_permissions: int = 0
    revoked_delegations: int = 0

    @classmethod
    def from_result(cls, result) -> "CascadeResultResponse":
        return cls(
            entity_type=result.entity_type.value,
            entity_id=result.entity_id,
            revoked_by=result.revoked_by,
            affected_user_ids=sorted(result.affected_user_ids),
            affected_role_ids=sorted(result.affected_role_ids),
            revoked_user_roles=result.revoked_user_roles,
            revoked_role_permissions=result.revoked_role_permissions,
            revoked_resource_permissions=result.revoked_resource_permissions,
            revoked_delegations=result.revoked_delegations,
        )


class AccessCheckResponse(BaseModel):
    user_id: str
    permission: str
    allowed: bool
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
