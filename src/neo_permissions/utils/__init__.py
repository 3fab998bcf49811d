"""Utility helpers."""

from .ids import generate_prefixed_id
from .time import Clock, utc_now, ensure_utc

__all__ = ["generate_prefixed_id", "Clock", "utc_now", "ensure_utc"]
