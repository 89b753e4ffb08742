"""Database Package — declarative Base shared by all ORM models."""
