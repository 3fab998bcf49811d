"""Temporal assignment feature: user roles, role grants, resource grants and delegations."""
