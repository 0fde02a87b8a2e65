"""Service layer for the repository adapter."""
