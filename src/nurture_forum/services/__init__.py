"""Service layer for the forum."""
