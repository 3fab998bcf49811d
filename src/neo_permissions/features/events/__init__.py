"""Permission change events feature."""
