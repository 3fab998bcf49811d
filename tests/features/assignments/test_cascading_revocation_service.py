"""Tests for cascading revocation."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from neo_permissions.config.constants import CascadeEntityType, PermissionChangeAction
from neo_permissions.core.exceptions import DatabaseError
from neo_permissions.features.assignments.entities import Delegation
from neo_permissions.features.storage.adapters.memory_store import MemoryResourcePermissionRepository


def _row_counts(store):
    return {
        table: store.row_count(table)
        for table in ("user_roles", "role_permissions", "resource_permissions", "delegations")
    }


class TestUserCascade:
    """revoke_all_for_user."""

    @pytest.mark.asyncio
    async def test_user_cascade_is_complete(
        self, cascade, store, delegation_service, resource_permission_service, give_role, clock
    ):
        give_role("usr_a", "AUDITOR")
        await resource_permission_service.grant_permission(
            "usr_a", "transaction", "txn_1", "approve", granted_by="usr_admin"
        )
        await delegation_service.create_delegation("usr_a", "usr_b", "read_only")
        await delegation_service.create_delegation("usr_plain", "usr_a", "full")
        counts_before = _row_counts(store)

        result = await cascade.revoke_all_for_user("usr_a", "usr_admin")

        assert not [r for r in store.user_roles.values() if r.user_id == "usr_a" and r.revoked_at is None]
        assert not [
            r for r in store.resource_permissions.values() if r.user_id == "usr_a" and r.revoked_at is None
        ]
        assert not [d for d in store.delegations.values() if d.involves("usr_a") and d.revoked_at is None]
        assert _row_counts(store) == counts_before
        assert result.revoked_user_roles == 2
        assert result.revoked_resource_permissions == 1
        assert result.revoked_delegations == 2
        assert result.affected_user_ids == {"usr_a", "usr_b"}

    @pytest.mark.asyncio
    async def test_rows_not_yet_started_are_revoked(self, cascade, store, clock):
        store.delegations[99] = Delegation(
            id=99,
            delegator_id="usr_a",
            delegatee_id="usr_plain",
            scope="full",
            valid_from=clock() + timedelta(days=3),
        )

        result = await cascade.revoke_all_for_user("usr_a", "usr_admin")

        assert store.delegations[99].revoked_at == clock()
        assert "usr_plain" in result.affected_user_ids

    @pytest.mark.asyncio
    async def test_user_cascade_emits_one_event(self, cascade, published):
        await cascade.revoke_all_for_user("usr_plain", "usr_admin")

        assert len(published) == 1
        event = published[0]
        assert event.action == PermissionChangeAction.CASCADING_REVOCATION
        assert event.user_id == "usr_plain"
        assert event.context["entity_type"] == "user"

    @pytest.mark.asyncio
    async def test_storage_failure_rolls_back_everything(
        self, cascade, store, resource_permission_service, published
    ):
        await resource_permission_service.grant_permission(
            "usr_a", "transaction", "txn_1", "approve", granted_by="usr_admin"
        )
        published.clear()

        failing_save = AsyncMock(side_effect=DatabaseError("connection lost"))
        with patch.object(MemoryResourcePermissionRepository, "save", failing_save):
            with pytest.raises(DatabaseError):
                await cascade.revoke_all_for_user("usr_a", "usr_admin")

        active = [r for r in store.user_roles.values() if r.user_id == "usr_a" and r.revoked_at is None]
        assert len(active) == 1
        assert published == []


class TestRoleCascade:
    """revoke_all_for_role."""

    @pytest.mark.asyncio
    async def test_manager_cascade_reports_both_holders(self, cascade, store, resolver):
        result = await cascade.revoke_all_for_role("MANAGER", "usr_admin")

        assert result.entity_type == CascadeEntityType.ROLE
        assert result.affected_user_ids == {"usr_a", "usr_b"}
        assert result.revoked_user_roles == 2
        assert result.revoked_role_permissions == 6
        assert not [r for r in store.user_roles.values() if r.role_id == "MANAGER" and r.revoked_at is None]
        assert not [
            r for r in store.role_permissions.values() if r.role_id == "MANAGER" and r.revoked_at is None
        ]
        assert (await resolver.get_effective_permissions("usr_a")).role_permissions == frozenset()

    @pytest.mark.asyncio
    async def test_role_event_has_no_subject_user(self, cascade, published):
        await cascade.revoke_all_for_role("MANAGER", "usr_admin")

        event = published[0]
        assert event.user_id is None
        assert event.affected_user_ids == {"usr_a", "usr_b"}
        assert event.invalidation_targets() == {"usr_a", "usr_b"}


class TestPermissionCascade:
    """revoke_all_for_permission: permission to roles to users."""

    @pytest.mark.asyncio
    async def test_two_hop_propagation(self, cascade, store):
        result = await cascade.revoke_all_for_permission("reports:export", "usr_admin")

        assert result.affected_role_ids == {"SYSTEM_ADMIN", "ORG_ADMIN", "MANAGER", "ACCOUNTANT", "AUDITOR"}
        assert result.affected_user_ids == {"usr_admin", "usr_org_admin", "usr_a", "usr_b"}
        assert result.revoked_role_permissions == 5
        assert not [
            r for r in store.role_permissions.values()
            if r.permission_id == "reports:export" and r.revoked_at is None
        ]

    @pytest.mark.asyncio
    async def test_expired_holders_are_not_affected(self, cascade, make_user, give_role, clock):
        make_user("usr_old")
        give_role("usr_old", "AUDITOR", expires_at=clock() - timedelta(days=1))

        result = await cascade.revoke_all_for_permission("audit:read", "usr_admin")

        assert "usr_old" not in result.affected_user_ids
        assert "usr_org_admin" in result.affected_user_ids
