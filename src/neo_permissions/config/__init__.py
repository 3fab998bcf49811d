"""Configuration for neo-permissions."""

from .constants import (
    DelegationScope,
    AuditDecision,
    PermissionChangeAction,
    RoleTier,
    CascadeEntityType,
)
from .settings import PermissionSettings, get_settings
from .governance import GovernanceConfig
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    "DelegationScope",
    "AuditDecision",
    "PermissionChangeAction",
    "RoleTier",
    "CascadeEntityType",
    "PermissionSettings",
    "get_settings",
    "GovernanceConfig",
    "LoggingConfig",
    "setup_logging",
]
