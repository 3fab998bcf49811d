"""Database access: connection pool, repository plumbing, schema and seed data."""

from pathlib import Path

from .connection import DatabaseManager
from .base_repository import AsyncPGRepository

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

__all__ = ["DatabaseManager", "AsyncPGRepository", "MIGRATIONS_DIR"]
