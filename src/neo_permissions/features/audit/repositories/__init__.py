"""Audit repositories."""

from .audit_log_repository import AsyncPGAuditLogRepository

__all__ = ["AsyncPGAuditLogRepository"]
