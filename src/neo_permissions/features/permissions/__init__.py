"""Role and permission catalog feature."""
