"""FastAPI surface for neo-permissions.

Import ``create_app`` from ``neo_permissions.api.app``.
"""
