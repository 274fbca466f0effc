"""Database connection and session management."""

from .connection import DatabaseManager, get_db

__all__ = ["DatabaseManager", "get_db"]
