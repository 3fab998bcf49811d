"""Audit routers."""

from .audit_router import audit_router

__all__ = ["audit_router"]
