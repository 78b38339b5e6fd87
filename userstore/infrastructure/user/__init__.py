"""User repository implementations."""

from .in_memory_user_repository import InMemoryUserRepository
from .mongo_user_repository import UserRepository

__all__ = ["InMemoryUserRepository", "UserRepository"]
