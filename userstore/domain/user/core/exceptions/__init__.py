"""User domain exceptions."""

from .user_errors import UserDomainError, UserNotFoundError

__all__ = ["UserDomainError", "UserNotFoundError"]
