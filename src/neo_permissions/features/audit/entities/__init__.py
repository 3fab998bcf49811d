"""Audit entities and protocols."""

from .audit_log import AuthorizationAuditLog, AuditQueryFilter
from .protocols import AuditLogRepository

__all__ = ["AuthorizationAuditLog", "AuditQueryFilter", "AuditLogRepository"]
