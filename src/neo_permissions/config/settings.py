"""
Settings for the neo-permissions service.

Loaded from environment variables or a .env file through pydantic-settings.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_PROTECTED_ROLE,
    DEFAULT_BASIC_ROLES,
    DEFAULT_ELEVATED_ROLES,
    DEFAULT_ROLE,
    SYSTEM_USER_ID,
)


def _split_names(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class PermissionSettings(BaseSettings):
    """Application settings for the authorization service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Core Application Settings
    app_name: str = Field(default="neo-permissions", description="Application name")
    environment: str = Field(default="development", description="Environment name")

    # Database Configuration
    database_url: str = Field(default="postgresql://localhost:5432/permissions")
    database_schema: str = Field(default="public")
    db_pool_min_size: int = Field(default=2)
    db_pool_max_size: int = Field(default=10)

    # Redis Cache Configuration
    redis_url: Optional[str] = Field(default=None, description="Permission cache disabled when unset")
    cache_ttl_permissions: int = Field(default=300)  # 5 minutes
    cache_key_prefix: str = Field(default="permissions:")
    cache_invalidation_channel: str = Field(default="permission-invalidation")

    # Governance Configuration
    protected_role: str = Field(default=DEFAULT_PROTECTED_ROLE)
    basic_roles: str = Field(default=",".join(sorted(DEFAULT_BASIC_ROLES)))
    elevated_roles: str = Field(default=",".join(sorted(DEFAULT_ELEVATED_ROLES)))
    default_role: str = Field(default=DEFAULT_ROLE)
    system_user_id: str = Field(default=SYSTEM_USER_ID)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="simple")

    @property
    def basic_role_ids(self) -> List[str]:
        return _split_names(self.basic_roles)

    @property
    def elevated_role_ids(self) -> List[str]:
        return _split_names(self.elevated_roles)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> PermissionSettings:
    """Get cached settings instance."""
    return PermissionSettings()
