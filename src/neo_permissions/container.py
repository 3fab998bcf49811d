"""Service container.

Builds every service over one unit of work. Permission cache invalidation runs
in the unit of work after commit; the committed-event dispatcher feeds the
audit trail.
"""

import logging
from typing import Any, Dict, Optional

from .config.governance import GovernanceConfig
from .config.settings import PermissionSettings, get_settings
from .core.exceptions import CacheError
from .database.connection import DatabaseManager
from .database.seed import seed_memory_store
from .features.assignments.services import (
    CascadingRevocationService,
    DelegationScopeEvaluator,
    DelegationService,
    EffectivePermissionResolver,
    ResourcePermissionService,
    RoleAssignmentGovernor,
    RolePermissionService,
)
from .features.audit.services import AuditService
from .features.cache.adapters import MemoryPermissionCacheBackend, RedisPermissionCacheBackend
from .features.cache.entities import PermissionCacheBackend
from .features.cache.services import PermissionCacheService
from .features.events.services import EventDispatcherService
from .features.permissions.services import (
    PermissionCatalogService,
    PermissionService,
    RoleService,
)
from .features.storage.adapters import AsyncPGUnitOfWork, InMemoryStore, MemoryUnitOfWork
from .features.storage.services import BaseUnitOfWork
from .features.users.services import UserService, UserSyncService
from .utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Holds the wired services of one application instance."""

    def __init__(
        self,
        unit_of_work: BaseUnitOfWork,
        cache_backend: Optional[PermissionCacheBackend] = None,
        settings: Optional[PermissionSettings] = None,
        governance: Optional[GovernanceConfig] = None,
        clock: Clock = utc_now,
        database: Optional[DatabaseManager] = None,
    ):
        self.settings = settings or get_settings()
        self.governance = governance or GovernanceConfig.from_settings(self.settings)
        self.unit_of_work = unit_of_work
        self.database = database
        self.clock = clock

        self.dispatcher = EventDispatcherService()
        self.unit_of_work.set_publisher(self.dispatcher)

        self.cache_backend = cache_backend
        self.cache: Optional[PermissionCacheService] = None
        if cache_backend is not None:
            self.cache = PermissionCacheService(
                cache_backend,
                ttl=self.settings.cache_ttl_permissions,
                key_prefix=self.settings.cache_key_prefix,
                channel=self.settings.cache_invalidation_channel,
            )

        self.resolver = EffectivePermissionResolver(unit_of_work, clock)
        self.governor = RoleAssignmentGovernor(unit_of_work, self.resolver, self.governance, clock)
        self.cascade = CascadingRevocationService(unit_of_work, clock)
        self.scope_evaluator = DelegationScopeEvaluator()
        self.delegations = DelegationService(unit_of_work, self.scope_evaluator, clock)
        self.resource_permissions = ResourcePermissionService(unit_of_work, clock)
        self.role_permissions = RolePermissionService(unit_of_work, clock)
        self.permissions = PermissionService(
            unit_of_work, self.resolver, self.governor, self.cache, clock
        )
        self.roles = RoleService(unit_of_work, self.cascade, self.governance, clock)
        self.permission_catalog = PermissionCatalogService(unit_of_work, self.cascade, clock)
        self.users = UserService(unit_of_work, self.cascade, clock)
        self.user_sync = UserSyncService(
            unit_of_work,
            default_role=self.settings.default_role,
            system_user_id=self.settings.system_user_id,
            clock=clock,
        )
        self.audit = AuditService(unit_of_work, clock)

        if self.cache is not None:
            self.unit_of_work.set_invalidator(self.cache.invalidate_users)
        self.dispatcher.subscribe(self.audit.record_permission_change)

    @classmethod
    def in_memory(
        cls,
        store: Optional[InMemoryStore] = None,
        settings: Optional[PermissionSettings] = None,
        clock: Clock = utc_now,
        seed: bool = True,
    ) -> "ServiceContainer":
        """Container over the in-memory store with a process-local cache."""
        if store is None:
            store = InMemoryStore()
            if seed:
                seed_memory_store(store, at=clock())
        return cls(
            MemoryUnitOfWork(store),
            cache_backend=MemoryPermissionCacheBackend(),
            settings=settings,
            clock=clock,
        )

    @classmethod
    def from_settings(cls, settings: Optional[PermissionSettings] = None) -> "ServiceContainer":
        """Container over PostgreSQL, with Redis caching when a Redis URL is configured."""
        settings = settings or get_settings()
        database = DatabaseManager.from_settings(settings)
        cache_backend = None
        if settings.redis_url:
            cache_backend = RedisPermissionCacheBackend.from_url(settings.redis_url)
        return cls(
            AsyncPGUnitOfWork(database, settings.database_schema),
            cache_backend=cache_backend,
            settings=settings,
            database=database,
        )

    async def startup(self) -> None:
        if self.database is not None:
            await self.database.create_pool()
        listen = getattr(self.cache_backend, "listen", None)
        if self.cache is not None and listen is not None:
            try:
                await listen(self.cache.channel, self.cache.evict_local)
            except CacheError as e:
                logger.error(
                    f"Cache invalidation listener unavailable, continuing without it: {e}"
                )
        await self.dispatcher.start()
        logger.info(f"{self.settings.app_name} services started")

    async def shutdown(self) -> None:
        await self.dispatcher.stop()
        close = getattr(self.cache_backend, "close", None)
        if close is not None:
            await close()
        if self.database is not None:
            await self.database.close_pool()
        logger.info(f"{self.settings.app_name} services stopped")

    async def health(self) -> Dict[str, Any]:
        """Status of the backing services this container was built with."""
        status: Dict[str, Any] = {"status": "ok"}
        if self.database is not None:
            database_ok = await self.database.health_check()
            status["database"] = "ok" if database_ok else "unavailable"
            if not database_ok:
                status["status"] = "degraded"
        return status
