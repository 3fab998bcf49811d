"""Delegation scope evaluator."""

from typing import Iterable

from ....config.constants import (
    READ_ONLY_ACTION_SUFFIXES,
    TRANSACTION_RESOURCE_TYPE,
    DelegationScope,
)
from ..entities import Delegation


class DelegationScopeEvaluator:
    """Matches delegations against a requested (resource type, resource id, permission).

    ``transactions_only`` ignores the requested verb. Unknown scopes deny.
    """

    def matches(
        self, delegation: Delegation, resource_type: str, resource_id: str, permission: str
    ) -> bool:
        if delegation.resource_type is not None and delegation.resource_type != resource_type:
            return False
        if delegation.resource_ids and resource_id not in delegation.resource_ids:
            return False
        return self.scope_allows(delegation.scope, resource_type, permission)

    def scope_allows(self, scope: str, resource_type: str, permission: str) -> bool:
        try:
            scope = DelegationScope(scope)
        except ValueError:
            return False

        if scope == DelegationScope.FULL:
            return True
        if scope == DelegationScope.READ_ONLY:
            return permission.endswith(READ_ONLY_ACTION_SUFFIXES)
        if scope == DelegationScope.TRANSACTIONS_ONLY:
            return resource_type == TRANSACTION_RESOURCE_TYPE
        return False

    def any_matches(
        self,
        delegations: Iterable[Delegation],
        resource_type: str,
        resource_id: str,
        permission: str,
    ) -> bool:
        return any(
            self.matches(delegation, resource_type, resource_id, permission)
            for delegation in delegations
        )
