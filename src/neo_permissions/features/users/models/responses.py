"""User response models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: str = Field(..., description="User ID")
    external_subject: str = Field(..., description="Identity provider subject")
    email: str = Field(..., description="Email address")
    display_name: Optional[str] = Field(None, description="Display name")
    deleted: bool = Field(False, description="Whether the user is soft-deleted")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @classmethod
    def from_entity(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            external_subject=user.external_subject,
            email=user.email,
            display_name=user.display_name,
            deleted=user.deleted,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
