"""Transactional storage feature."""
