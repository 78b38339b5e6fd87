"""User entities."""

from .user import UPDATABLE_FIELDS, User

__all__ = ["UPDATABLE_FIELDS", "User"]
