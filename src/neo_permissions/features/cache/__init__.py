"""Permission cache feature."""
