"""Delegation service."""

import logging
from datetime import datetime
from typing import List, Optional

from ....config.constants import DelegationScope
from ....core.exceptions import DelegationNotFoundError, UserNotFoundError, ValidationError
from ....utils.time import Clock, ensure_utc, utc_now
from ...events.entities import PermissionChangeEvent
from ...storage.entities import UnitOfWork
from ..entities import Delegation, DelegationsSummary
from .delegation_scope_evaluator import DelegationScopeEvaluator

logger = logging.getLogger(__name__)


class DelegationService:
    """Creates, revokes and evaluates user-to-user delegations."""

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        evaluator: Optional[DelegationScopeEvaluator] = None,
        clock: Clock = utc_now,
    ):
        self.unit_of_work = unit_of_work
        self.evaluator = evaluator or DelegationScopeEvaluator()
        self._clock = clock

    async def create_delegation(
        self,
        delegator_id: str,
        delegatee_id: str,
        scope: str,
        resource_type: Optional[str] = None,
        resource_ids: Optional[List[str]] = None,
        valid_until: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> Delegation:
        try:
            scope_value = DelegationScope(scope).value
        except ValueError:
            allowed = ", ".join(s.value for s in DelegationScope)
            raise ValidationError(f"Invalid delegation scope '{scope}', expected one of: {allowed}", field="scope") from None
        if delegator_id == delegatee_id:
            raise ValidationError("Users cannot delegate to themselves", field="delegatee_id")

        async with self.unit_of_work.transaction() as session:
            now = self._clock()
            if valid_until is not None and ensure_utc(valid_until) <= now:
                raise ValidationError("valid_until must be in the future", field="valid_until")
            if await session.users.get_by_id(delegatee_id) is None:
                raise UserNotFoundError(delegatee_id, message=f"Delegatee not found: {delegatee_id}")

            delegation = await session.delegations.save(
                Delegation(
                    delegator_id=delegator_id,
                    delegatee_id=delegatee_id,
                    scope=scope_value,
                    resource_type=resource_type,
                    resource_ids=list(resource_ids or []),
                    valid_from=now,
                    valid_until=ensure_utc(valid_until) if valid_until else None,
                    reason=reason,
                )
            )
            session.emit(
                PermissionChangeEvent.delegation_created(
                    delegatee_id, delegation.id, delegator_id, scope_value
                )
            )

        logger.info(
            f"Created delegation {delegation.id} from {delegator_id} to {delegatee_id} ({scope_value})"
        )
        return delegation

    async def revoke_delegation(self, delegation_id: int, revoked_by: str) -> Delegation:
        async with self.unit_of_work.transaction() as session:
            delegation = await session.delegations.get_by_id(delegation_id)
            if delegation is None:
                raise DelegationNotFoundError(delegation_id)

            delegation.revoke(revoked_by, self._clock())
            await session.delegations.save(delegation)
            session.emit(
                PermissionChangeEvent.delegation_revoked(
                    delegation.delegatee_id, delegation.id, delegation.delegator_id, revoked_by
                )
            )

        logger.info(f"Revoked delegation {delegation_id} by {revoked_by}")
        return delegation

    async def get_delegations_for_user(self, user_id: str) -> DelegationsSummary:
        async with self.unit_of_work.transaction() as session:
            now = self._clock()
            given = await session.delegations.find_active_by_delegator(user_id, now)
            received = await session.delegations.find_active_for_delegatee(user_id, now)
        return DelegationsSummary(given=given, received=received)

    async def has_delegated_access(
        self, delegatee_id: str, resource_type: str, resource_id: str, permission: str
    ) -> bool:
        """True if any active delegation received by ``delegatee_id`` covers the request."""
        async with self.unit_of_work.transaction() as session:
            delegations = await session.delegations.find_active_for_delegatee(
                delegatee_id, self._clock()
            )
        return self.evaluator.any_matches(delegations, resource_type, resource_id, permission)
