"""Assignment request models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ....config.constants import DelegationScope


class AssignRoleRequest(BaseModel):
    role_id: str = Field(..., min_length=1, description="Role to assign")


class GrantResourcePermissionRequest(BaseModel):
    user_id: str = Field(..., description="User receiving the grant")
    resource_type: str = Field(..., min_length=1, description="Resource type, e.g. transaction")
    resource_id: str = Field(..., min_length=1, description="Resource instance ID")
    permission: str = Field(..., min_length=1, description="Permission on the instance, e.g. approve")
    expires_at: Optional[datetime] = Field(None, description="Grant expiry; open ended when omitted")
    reason: Optional[str] = Field(None, description="Business reason")


class CreateDelegationRequest(BaseModel):
    """Delegate part of the acting user's access to another user.

    The scope is kept as a string here so an unknown value is rejected by the
    service with a domain validation error.
    """

    delegatee_id: str = Field(..., description="User receiving the delegation")
    scope: str = Field(..., description=f"One of: {', '.join(s.value for s in DelegationScope)}")
    resource_type: Optional[str] = Field(None, description="Resource type the delegation covers")
    resource_ids: List[str] = Field(default_factory=list, description="Specific resource IDs")
    valid_until: Optional[datetime] = Field(None, description="End of the validity window")
    reason: Optional[str] = Field(None, description="Business reason")
