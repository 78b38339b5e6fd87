"""Base MongoDB repository with reusable patterns.

Provides common functionality for MongoDB repositories:
- Collection handle from an injected database
- Document mapping (domain ↔ MongoDB)
- Error logging (errors are re-raised unchanged)

Concrete MongoDB repositories inherit from MongoBaseRepository.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar
import logging

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument


TEntity = TypeVar("TEntity")  # Domain entity type

logger = logging.getLogger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB repositories.

    The database handle is passed in by the caller; the repository does not
    own the client and never closes it.

    Subclasses must implement:
    - collection_name: Name of MongoDB collection
    - to_document(): Convert domain entity to MongoDB document
    - from_document(): Convert MongoDB document to domain entity

    Example:
        class UserRepository(MongoBaseRepository[User]):
            @property
            def collection_name(self) -> str:
                return "users"
            ...
    """

    def __init__(self, db: AsyncIOMotorDatabase[Dict[str, Any]]):
        """
        Initialize repository with a database handle.

        Args:
            db: Motor database the collection lives in
        """
        self._db = db
        self._collection = db[self.collection_name]

        logger.info(
            f"Initialized {self.__class__.__name__} " f"for collection '{self.collection_name}'"
        )

    # ============================================================
    # Abstract Properties/Methods (must be implemented)
    # ============================================================

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """MongoDB collection name."""
        pass

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """
        Convert domain entity to MongoDB document.

        Args:
            entity: Domain entity

        Returns:
            MongoDB document (dict)
        """
        pass

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Convert MongoDB document to domain entity.

        Args:
            doc: MongoDB document

        Returns:
            Domain entity
        """
        pass

    # ============================================================
    # Protected Utility Methods (for subclasses)
    # ============================================================

    @property
    def collection(self) -> AsyncIOMotorCollection[Dict[str, Any]]:
        """Get MongoDB collection handle."""
        return self._collection

    async def _find_one(self, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Find single document.

        Args:
            filter_dict: MongoDB filter

        Returns:
            Document dict or None if not found

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            return await self._collection.find_one(filter_dict)
        except Exception as e:
            logger.error(
                f"Error in find_one: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise

    async def _find_many(self, filter_dict: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Find multiple documents.

        Args:
            filter_dict: MongoDB filter

        Returns:
            List of document dicts in natural order

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            cursor = self._collection.find(filter_dict)
            return await cursor.to_list(length=None)
        except Exception as e:
            logger.error(
                f"Error in find_many: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise

    async def _insert_one(self, document: Dict[str, Any]) -> Any:
        """
        Insert single document.

        Args:
            document: MongoDB document to insert

        Returns:
            The generated ``_id``

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            result = await self._collection.insert_one(document)
            return result.inserted_id
        except Exception as e:
            logger.error(f"Error in insert_one: collection={self.collection_name}, " f"error={e}")
            raise

    async def _find_one_and_update(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Update single document and return it as stored after the update.

        Args:
            filter_dict: MongoDB filter
            update_dict: Update operations (e.g., {"$set": {...}})

        Returns:
            Updated document, or None if nothing matched

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            return await self._collection.find_one_and_update(
                filter_dict, update_dict, return_document=ReturnDocument.AFTER
            )
        except Exception as e:
            logger.error(
                f"Error in find_one_and_update: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise

    async def _find_one_and_delete(self, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Delete single document.

        Args:
            filter_dict: MongoDB filter

        Returns:
            The deleted document, or None if nothing matched

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            return await self._collection.find_one_and_delete(filter_dict)
        except Exception as e:
            logger.error(
                f"Error in find_one_and_delete: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise
