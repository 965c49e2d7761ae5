"""Profile storage for the matching service."""

from .user_repository import UserRepository, InMemoryUserRepository
from .sqlite_store import SQLiteUserRepository

__all__ = [
    "UserRepository",
    "InMemoryUserRepository",
    "SQLiteUserRepository",
]
