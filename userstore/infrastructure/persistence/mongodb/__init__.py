"""MongoDB repository support."""

from .base import MongoBaseRepository

__all__ = ["MongoBaseRepository"]
