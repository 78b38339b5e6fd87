"""User domain ports."""

from .user_repository import IUserRepository

__all__ = ["IUserRepository"]
