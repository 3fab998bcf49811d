"""Assignment services."""

from .effective_permission_resolver import EffectivePermissionResolver
from .role_assignment_governor import RoleAssignmentGovernor
from .cascading_revocation_service import CascadingRevocationService
from .delegation_scope_evaluator import DelegationScopeEvaluator
from .delegation_service import DelegationService
from .resource_permission_service import ResourcePermissionService
from .role_permission_service import RolePermissionService

__all__ = [
    "EffectivePermissionResolver",
    "RoleAssignmentGovernor",
    "CascadingRevocationService",
    "DelegationScopeEvaluator",
    "DelegationService",
    "ResourcePermissionService",
    "RolePermissionService",
]
