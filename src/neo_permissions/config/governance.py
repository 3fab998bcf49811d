"""Governance configuration injected into the role assignment governor."""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .constants import (
    ASSIGN_BASIC_PERMISSION,
    ASSIGN_ELEVATED_PERMISSION,
    REVOKE_ROLE_PERMISSION,
    DEFAULT_PROTECTED_ROLE,
    DEFAULT_BASIC_ROLES,
    DEFAULT_ELEVATED_ROLES,
    RoleTier,
)
from .settings import PermissionSettings


@dataclass(frozen=True)
class GovernanceConfig:
    """Tier tables and governance permission ids.

    A role listed in neither set is a custom role and is governed like an
    elevated one.
    """

    protected_role: str = DEFAULT_PROTECTED_ROLE
    basic_roles: FrozenSet[str] = field(default_factory=lambda: DEFAULT_BASIC_ROLES)
    elevated_roles: FrozenSet[str] = field(default_factory=lambda: DEFAULT_ELEVATED_ROLES)
    assign_basic_permission: str = ASSIGN_BASIC_PERMISSION
    assign_elevated_permission: str = ASSIGN_ELEVATED_PERMISSION
    revoke_permission: str = REVOKE_ROLE_PERMISSION

    def __post_init__(self):
        object.__setattr__(self, "basic_roles", frozenset(self.basic_roles))
        object.__setattr__(self, "elevated_roles", frozenset(self.elevated_roles))
        overlap = self.basic_roles & self.elevated_roles
        if overlap:
            raise ValueError(f"Roles cannot be both basic and elevated: {sorted(overlap)}")

    @classmethod
    def from_settings(cls, settings: Optional[PermissionSettings] = None) -> "GovernanceConfig":
        if settings is None:
            from .settings import get_settings
            settings = get_settings()
        return cls(
            protected_role=settings.protected_role,
            basic_roles=frozenset(settings.basic_role_ids),
            elevated_roles=frozenset(settings.elevated_role_ids),
        )

    def is_protected(self, role_id: str) -> bool:
        return role_id == self.protected_role

    def tier_of(self, role_id: str) -> RoleTier:
        if role_id in self.basic_roles:
            return RoleTier.BASIC
        if role_id in self.elevated_roles:
            return RoleTier.ELEVATED
        return RoleTier.CUSTOM
