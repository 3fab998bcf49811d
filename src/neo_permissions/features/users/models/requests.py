"""User request models."""

from typing import Optional

from pydantic import BaseModel, Field


class SyncUserRequest(BaseModel):
    """Upsert a user from the identity provider."""

    external_subject: str = Field(..., min_length=1, description="Subject id issued by the identity provider")
    email: str = Field(..., min_length=3, description="Email address")
    display_name: Optional[str] = Field(None, description="Display name")
