"""Authorization audit feature."""
