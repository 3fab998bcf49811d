"""Tests for the authorization audit service."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from neo_permissions.config.constants import AuditDecision, CascadeEntityType
from neo_permissions.core.exceptions import DatabaseError
from neo_permissions.features.audit.entities import AuditQueryFilter
from neo_permissions.features.events.entities import PermissionChangeEvent
from neo_permissions.features.storage.adapters.memory_store import MemoryAuditLogRepository


class TestAuditService:

    @pytest.mark.asyncio
    async def test_record_appends_entry(self, audit_service, store, clock):
        entry = await audit_service.record(
            "users:read",
            AuditDecision.DENIED,
            user_id="usr_plain",
            resource_type="user",
            resource_id="usr_a",
            reason="missing permission",
            ip_address="10.0.0.1",
        )

        assert entry.id == 1
        assert entry.timestamp == clock()
        assert store.audit_logs[1].decision == AuditDecision.DENIED

    @pytest.mark.asyncio
    async def test_record_failure_is_swallowed(self, audit_service, store):
        with patch.object(MemoryAuditLogRepository, "append", side_effect=DatabaseError("disk full")):
            entry = await audit_service.record("users:read", AuditDecision.GRANTED, user_id="usr_a")

        assert entry is None
        assert store.audit_logs == {}

    @pytest.mark.asyncio
    async def test_query_newest_first_with_paging(self, audit_service, clock):
        for action in ("first", "second", "third"):
            await audit_service.record(action, AuditDecision.GRANTED, user_id="usr_a")
            clock.advance(minutes=1)

        entries = await audit_service.query(AuditQueryFilter(), limit=2)
        assert [e.action for e in entries] == ["third", "second"]

        entries = await audit_service.query(AuditQueryFilter(), limit=2, offset=2)
        assert [e.action for e in entries] == ["first"]

    @pytest.mark.asyncio
    async def test_user_filter_wins_over_time_range(self, audit_service, clock):
        start = clock()
        await audit_service.record("a", AuditDecision.GRANTED, user_id="usr_a")
        await audit_service.record("b", AuditDecision.GRANTED, user_id="usr_b")

        entries = await audit_service.query(
            AuditQueryFilter(user_id="usr_a", start_time=start - timedelta(days=1), end_time=start)
        )

        assert [e.user_id for e in entries] == ["usr_a"]

    @pytest.mark.asyncio
    async def test_time_range_is_inclusive_and_accepts_naive(self, audit_service, clock):
        start = clock()
        await audit_service.record("inside", AuditDecision.GRANTED)
        clock.advance(hours=2)
        await audit_service.record("outside", AuditDecision.GRANTED)

        entries = await audit_service.query(
            AuditQueryFilter(
                start_time=start.replace(tzinfo=None),
                end_time=(start + timedelta(hours=1)).replace(tzinfo=None),
            )
        )

        assert [e.action for e in entries] == ["inside"]

    @pytest.mark.asyncio
    async def test_half_open_range_lists_everything(self, audit_service, clock):
        await audit_service.record("a", AuditDecision.GRANTED)
        await audit_service.record("b", AuditDecision.DENIED)

        entries = await audit_service.query(AuditQueryFilter(start_time=clock()))

        assert len(entries) == 2

    @pytest.mark.asyncio
    async def test_record_permission_change(self, audit_service, store):
        event = PermissionChangeEvent.cascading_revocation(
            CascadeEntityType.ROLE, "MANAGER", "usr_admin", ["usr_b", "usr_a"]
        )

        await audit_service.record_permission_change(event)

        entry = store.audit_logs[1]
        assert entry.action == "CASCADING_REVOCATION"
        assert entry.decision == AuditDecision.GRANTED
        assert entry.user_id is None
        assert entry.reason == "entity_id=MANAGER, entity_type=role, revoked_by=usr_admin"
        assert entry.additional_context["affected_user_ids"] == ["usr_a", "usr_b"]

    @pytest.mark.asyncio
    async def test_query_by_user(self, audit_service):
        await audit_service.record_permission_change(PermissionChangeEvent.user_restored("usr_a"))

        entries = await audit_service.query_by_user("usr_a")

        assert entries[0].action == "USER_RESTORED"
        assert entries[0].reason is None
