"""Tests for permission change events."""

import pytest

from neo_permissions.config.constants import CascadeEntityType, PermissionChangeAction
from neo_permissions.features.events.entities import PermissionChangeEvent


class TestPermissionChangeEvent:

    def test_invalidation_targets_include_subject_and_affected(self):
        event = PermissionChangeEvent.cascading_revocation(
            CascadeEntityType.USER, "usr_a", "usr_admin", {"usr_b"}
        )

        assert event.user_id == "usr_a"
        assert event.invalidation_targets() == frozenset({"usr_a", "usr_b"})

    def test_role_scoped_cascade_has_no_subject(self):
        event = PermissionChangeEvent.cascading_revocation(
            CascadeEntityType.ROLE, "MANAGER", "usr_admin", ["usr_a", "usr_b"]
        )

        assert event.user_id is None
        assert event.context["entity_type"] == "role"
        assert event.invalidation_targets() == frozenset({"usr_a", "usr_b"})

    def test_context_is_stringified_and_read_only(self):
        event = PermissionChangeEvent.delegation_created("usr_b", 7, "usr_a", "full")

        assert event.context["delegation_id"] == "7"
        with pytest.raises(TypeError):
            event.context["scope"] = "read_only"

    def test_none_values_are_dropped(self):
        event = PermissionChangeEvent(
            action=PermissionChangeAction.ROLE_REVOKED,
            user_id="usr_a",
            context={"role_id": "AUDITOR", "revoked_by": None},
        )

        assert dict(event.context) == {"role_id": "AUDITOR"}

    def test_describe(self):
        event = PermissionChangeEvent.role_assigned("usr_a", "AUDITOR", "usr_org_admin")

        assert event.describe() == "granted_by=usr_org_admin, role_id=AUDITOR"

    def test_user_restored_has_empty_description(self):
        assert PermissionChangeEvent.user_restored("usr_a").describe() == ""
