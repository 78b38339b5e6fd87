"""User repository factory for environment-based selection.

This factory creates the appropriate repository implementation based on
the USER_REPOSITORY environment variable:
- "inmemory": InMemoryUserRepository (for testing)
- "mongodb": UserRepository (for production)

Default: inmemory
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from userstore.domain.user.core.ports.user_repository import IUserRepository
from userstore.infrastructure.config import (
    get_mongodb_database,
    get_mongodb_uri,
    get_user_repository_backend,
)
from userstore.infrastructure.user.in_memory_user_repository import (
    InMemoryUserRepository,
)
from userstore.infrastructure.user.mongo_user_repository import UserRepository

logger = logging.getLogger(__name__)


def create_user_repository() -> IUserRepository:
    """Create user repository based on environment configuration.

    Returns:
        IUserRepository: The configured repository implementation

    Raises:
        ValueError: If USER_REPOSITORY is unknown, or is "mongodb" without
            MONGODB_URI

    Environment Variables:
        USER_REPOSITORY: "inmemory" | "mongodb" (default: inmemory)
        MONGODB_URI: MongoDB connection string (required for mongodb)
        MONGODB_DATABASE: Database name (default: userstore)
    """
    repo_type = get_user_repository_backend()

    if repo_type == "mongodb":
        mongo_uri = get_mongodb_uri()
        if not mongo_uri:
            raise ValueError(
                "MONGODB_URI environment variable is required "
                "when USER_REPOSITORY=mongodb"
            )

        db_name = get_mongodb_database()
        client: AsyncIOMotorClient = AsyncIOMotorClient(mongo_uri)  # type: ignore
        logger.info(f"Using MongoDB user repository (database '{db_name}')")
        return UserRepository(client[db_name])

    elif repo_type == "inmemory":
        logger.info("Using in-memory user repository")
        return InMemoryUserRepository()

    else:
        raise ValueError(
            f"Invalid USER_REPOSITORY value: {repo_type}. "
            "Expected 'inmemory' or 'mongodb'"
        )


# Singleton instance
_user_repository: Optional[IUserRepository] = None


def get_user_repository() -> IUserRepository:
    """Get singleton user repository instance.

    Returns:
        IUserRepository: The singleton repository
    """
    global _user_repository

    if _user_repository is None:
        _user_repository = create_user_repository()

    return _user_repository


def reset_user_repository() -> None:
    """Reset the singleton (for testing purposes)."""
    global _user_repository
    _user_repository = None
