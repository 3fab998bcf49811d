"""Identifier generation helpers."""

import uuid


def generate_prefixed_id(prefix: str, length: int = 12) -> str:
    """Generate an opaque id such as ``usr_1a2b3c4d5e6f``."""
    return f"{prefix}{uuid.uuid4().hex[:length]}"
