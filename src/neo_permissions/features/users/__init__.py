"""User directory feature."""
