"""Audit API models."""

from .responses import AuditLogResponse, AuditLogListResponse

__all__ = ["AuditLogResponse", "AuditLogListResponse"]
