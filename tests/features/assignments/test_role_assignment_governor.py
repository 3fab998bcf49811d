"""Tests for the role assignment governor."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from neo_permissions.config.constants import PermissionChangeAction
from neo_permissions.core.exceptions import (
    AssignmentNotFoundError,
    DuplicateRoleAssignmentError,
    PermissionDeniedError,
    ProtectedRoleError,
    RoleNotFoundError,
    UserNotFoundError,
)
from neo_permissions.features.permissions.entities import Role
from neo_permissions.features.storage.adapters.memory_store import MemoryUserRoleRepository


def _unrevoked(store, user_id, role_id):
    return [
        row for row in store.user_roles.values()
        if row.user_id == user_id and row.role_id == role_id and row.revoked_at is None
    ]


class TestAssignRole:
    """Preconditions and effects of assign_role."""

    @pytest.mark.asyncio
    async def test_assign_creates_single_active_row(self, governor, store, make_user, published, clock):
        make_user("usr_1")

        user_role = await governor.assign_role("usr_1", "USER", "usr_org_admin")

        assert user_role.id is not None
        assert user_role.granted_at == clock()
        assert user_role.granted_by == "usr_org_admin"
        assert len(_unrevoked(store, "usr_1", "USER")) == 1
        assert [e.action for e in published] == [PermissionChangeAction.ROLE_ASSIGNED]
        assert published[0].user_id == "usr_1"
        assert published[0].context == {"role_id": "USER", "granted_by": "usr_org_admin"}

    @pytest.mark.asyncio
    async def test_second_assign_is_duplicate(self, governor, store, make_user):
        make_user("usr_1")
        await governor.assign_role("usr_1", "USER", "usr_org_admin")

        with pytest.raises(DuplicateRoleAssignmentError) as exc_info:
            await governor.assign_role("usr_1", "USER", "usr_org_admin")

        assert exc_info.value.details == {"user_id": "usr_1", "role_id": "USER"}
        assert len(_unrevoked(store, "usr_1", "USER")) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("actor", ["usr_admin", "usr_org_admin", "usr_plain"])
    async def test_protected_role_is_locked_regardless_of_caller(self, governor, actor):
        with pytest.raises(ProtectedRoleError) as exc_info:
            await governor.assign_role("usr_plain", "SYSTEM_ADMIN", actor)

        assert exc_info.value.error_code == "PROTECTED_ROLE_VIOLATION"
        assert exc_info.value.details["operation"] == "assigned"

    @pytest.mark.asyncio
    async def test_basic_permission_cannot_assign_elevated_role(self, governor, published):
        with pytest.raises(PermissionDeniedError) as exc_info:
            await governor.assign_role("usr_plain", "MANAGER", "usr_org_admin")

        error = exc_info.value
        assert error.error_code == "INSUFFICIENT_PERMISSION_FOR_ELEVATED_ROLE"
        assert error.required_permission == "user-roles:assign-elevated"
        assert error.details["tier"] == "elevated"
        assert "user-roles:assign-elevated" in error.message
        assert published == []

    @pytest.mark.asyncio
    async def test_no_assign_permission_denies_basic_role(self, governor, make_user):
        make_user("usr_1")

        with pytest.raises(PermissionDeniedError) as exc_info:
            await governor.assign_role("usr_1", "AUDITOR", "usr_plain")

        assert exc_info.value.error_code == "INSUFFICIENT_PERMISSION_FOR_BASIC_ROLE"
        assert exc_info.value.required_permission == "user-roles:assign-basic"

    @pytest.mark.asyncio
    async def test_elevated_permission_can_assign_basic_and_elevated(self, governor, make_user):
        make_user("usr_1")

        await governor.assign_role("usr_1", "AUDITOR", "usr_admin")
        await governor.assign_role("usr_1", "ORG_ADMIN", "usr_admin")

    @pytest.mark.asyncio
    async def test_custom_role_requires_elevated_permission(self, governor, store, make_user):
        make_user("usr_1")
        store.roles["role_custom"] = Role(id="role_custom", name="Custom")

        with pytest.raises(PermissionDeniedError) as exc_info:
            await governor.assign_role("usr_1", "role_custom", "usr_org_admin")
        assert exc_info.value.error_code == "INSUFFICIENT_PERMISSION_FOR_CUSTOM_ROLE"
        assert exc_info.value.required_permission == "user-roles:assign-elevated"

        await governor.assign_role("usr_1", "role_custom", "usr_admin")

    @pytest.mark.asyncio
    async def test_unknown_user(self, governor):
        with pytest.raises(UserNotFoundError) as exc_info:
            await governor.assign_role("usr_missing", "USER", "usr_org_admin")

        assert exc_info.value.error_code == "USER_NOT_FOUND"
        assert exc_info.value.details["entity_id"] == "usr_missing"

    @pytest.mark.asyncio
    async def test_deleted_user_is_not_found(self, governor, store, make_user, clock):
        make_user("usr_1").mark_deleted("usr_admin", clock())

        with pytest.raises(UserNotFoundError):
            await governor.assign_role("usr_1", "USER", "usr_org_admin")

    @pytest.mark.asyncio
    async def test_unknown_role(self, governor, make_user):
        make_user("usr_1")

        with pytest.raises(RoleNotFoundError):
            await governor.assign_role("usr_1", "NO_SUCH_ROLE", "usr_admin")

    @pytest.mark.asyncio
    async def test_scenario_assign_then_revoke_user_role(self, governor, resolver, make_user, give_role):
        """Granting USER exposes its permissions, revoking removes them immediately."""
        give_role("SYSTEM", "ORG_ADMIN")
        make_user("usr_1")

        await governor.assign_role("usr_1", "USER", "SYSTEM")
        granted = await resolver.get_effective_permissions("usr_1")
        await governor.revoke_role("usr_1", "USER", "SYSTEM")
        revoked = await resolver.get_effective_permissions("usr_1")

        assert "transactions:read" in granted.all_permission_ids()
        assert "transactions:read" not in revoked.all_permission_ids()

    @pytest.mark.asyncio
    async def test_reassign_after_revoke_inserts_new_row(self, governor, store, make_user, clock):
        make_user("usr_1")
        first = await governor.assign_role("usr_1", "USER", "usr_org_admin")
        clock.advance(minutes=1)
        await governor.revoke_role("usr_1", "USER", "usr_org_admin")
        clock.advance(minutes=1)

        second = await governor.assign_role("usr_1", "USER", "usr_org_admin")

        assert second.id != first.id
        history = [row for row in store.user_roles.values() if row.user_id == "usr_1"]
        assert len(history) == 2
        assert store.user_roles[first.id].revoked_at is not None
        assert len(_unrevoked(store, "usr_1", "USER")) == 1


class TestConcurrentAssign:
    """Exactly one of two racing assignments wins."""

    @pytest.mark.asyncio
    async def test_concurrent_assign_one_succeeds(self, governor, store, make_user):
        make_user("usr_1")

        results = await asyncio.gather(
            governor.assign_role("usr_1", "USER", "usr_org_admin"),
            governor.assign_role("usr_1", "USER", "usr_org_admin"),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], DuplicateRoleAssignmentError)
        assert len(_unrevoked(store, "usr_1", "USER")) == 1

    @pytest.mark.asyncio
    async def test_storage_constraint_is_translated(self, governor, store, make_user, give_role, published):
        """A uniqueness violation from storage surfaces as a duplicate assignment."""
        make_user("usr_1")
        give_role("usr_1", "USER")

        with patch.object(MemoryUserRoleRepository, "find_unrevoked", AsyncMock(return_value=None)):
            with pytest.raises(DuplicateRoleAssignmentError):
                await governor.assign_role("usr_1", "USER", "usr_org_admin")

        assert len(_unrevoked(store, "usr_1", "USER")) == 1
        assert published == []


class TestRevokeRole:
    """Preconditions and effects of revoke_role."""

    @pytest.mark.asyncio
    async def test_revoke_sets_revocation_fields(self, governor, store, published, clock):
        clock.advance(minutes=5)

        user_role = await governor.revoke_role("usr_plain", "USER", "usr_org_admin")

        stored = store.user_roles[user_role.id]
        assert stored.revoked_at == clock()
        assert stored.revoked_by == "usr_org_admin"
        assert [e.action for e in published] == [PermissionChangeAction.ROLE_REVOKED]

    @pytest.mark.asyncio
    async def test_protected_role_cannot_be_revoked(self, governor):
        with pytest.raises(ProtectedRoleError) as exc_info:
            await governor.revoke_role("usr_admin", "SYSTEM_ADMIN", "usr_admin")

        assert exc_info.value.details["operation"] == "revoked"

    @pytest.mark.asyncio
    async def test_revoke_requires_revoke_permission(self, governor):
        with pytest.raises(PermissionDeniedError) as exc_info:
            await governor.revoke_role("usr_plain", "USER", "usr_a")

        assert exc_info.value.error_code == "INSUFFICIENT_PERMISSION_FOR_REVOKE"
        assert exc_info.value.required_permission == "user-roles:revoke"

    @pytest.mark.asyncio
    async def test_revoke_without_active_row(self, governor):
        with pytest.raises(AssignmentNotFoundError) as exc_info:
            await governor.revoke_role("usr_a", "USER", "usr_org_admin")

        assert exc_info.value.details["user_id"] == "usr_a"
        assert exc_info.value.details["role_id"] == "USER"
