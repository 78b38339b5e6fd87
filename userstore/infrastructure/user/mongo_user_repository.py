"""MongoDB User Repository implementation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from userstore.domain.user.core.entities.user import User
from userstore.domain.user.core.exceptions.user_errors import UserNotFoundError
from userstore.domain.user.core.ports.user_repository import IUserRepository
from userstore.infrastructure.persistence.mongodb.base import MongoBaseRepository
from userstore.infrastructure.user.user_document import (
    EXTERNAL_ID_KEY,
    FIELD_TO_KEY,
    from_document,
    to_document,
    to_update_fields,
)

logger = logging.getLogger(__name__)


def _id_filter(id: str) -> Optional[Dict[str, Any]]:
    """Filter on ``_id``, or None when ``id`` cannot be an ObjectId."""
    if not ObjectId.is_valid(id):
        return None
    return {"_id": ObjectId(id)}


class UserRepository(MongoBaseRepository[User], IUserRepository):
    """MongoDB implementation of User repository.

    Documents live in the ``users`` collection (see user_document for the
    stored shape). Every call issues one storage operation; nothing is
    cached between calls.

    Avatar mutations address users by their application-level ``userId``
    and raise UserNotFoundError when it does not resolve.

    Examples:
        >>> client = AsyncIOMotorClient("mongodb://localhost:27017")
        >>> repo = UserRepository(client["userstore"])
        >>> user = await repo.create(User.create("Ada", "Lovelace", "ada@example.com"))
        >>> found = await repo.find_by_id(user.id)
    """

    def __init__(self, db: AsyncIOMotorDatabase[Dict[str, Any]]) -> None:
        super().__init__(db)
        self._indexes_created = False

    @property
    def collection_name(self) -> str:
        return "users"

    def to_document(self, entity: User) -> Dict[str, Any]:
        return to_document(entity)

    def from_document(self, doc: Dict[str, Any]) -> User:
        return from_document(doc)

    async def ensure_indexes(self) -> None:
        """Create lookup indexes if not already created.

        Indexes:
        - email
        - userId (sparse)
        - externalId (sparse)
        """
        if self._indexes_created:
            return

        await self.collection.create_index("email", name="idx_email")
        await self.collection.create_index(
            FIELD_TO_KEY["user_id"], sparse=True, name="idx_user_id"
        )
        await self.collection.create_index(
            EXTERNAL_ID_KEY, sparse=True, name="idx_external_id"
        )

        self._indexes_created = True
        logger.info(f"Ensured indexes for collection '{self.collection_name}'")

    async def create(self, user: User) -> User:
        document = self.to_document(user)
        inserted_id = await self._insert_one(document)
        logger.debug(f"Created user {inserted_id}")
        return self.from_document({**document, "_id": inserted_id})

    async def find_all(self) -> List[User]:
        documents = await self._find_many({})
        return [self.from_document(doc) for doc in documents]

    async def find_by_id(self, id: str) -> Optional[User]:
        filter_dict = _id_filter(id)
        if filter_dict is None:
            return None

        document = await self._find_one(filter_dict)
        return self.from_document(document) if document else None

    async def update(self, id: str, changes: Mapping[str, Any]) -> Optional[User]:
        """Apply a partial update and return the stored result.

        An empty ``changes`` mapping reads the current state instead, since
        MongoDB rejects an empty ``$set``.
        """
        fields = to_update_fields(changes)
        if not fields:
            return await self.find_by_id(id)

        filter_dict = _id_filter(id)
        if filter_dict is None:
            return None

        document = await self._find_one_and_update(filter_dict, {"$set": fields})
        return self.from_document(document) if document else None

    async def update_avatar(self, user_id: str, avatar_hash: str, avatar_base64: str) -> User:
        return await self._update_by_user_id(
            user_id,
            {
                "$set": {
                    FIELD_TO_KEY["avatar_hash"]: avatar_hash,
                    FIELD_TO_KEY["avatar_base64"]: avatar_base64,
                }
            },
        )

    async def update_avatar_hash(self, user_id: str, avatar_hash: str) -> User:
        # avatarBase64 stays as stored, even if it no longer matches the hash.
        return await self._update_by_user_id(
            user_id, {"$set": {FIELD_TO_KEY["avatar_hash"]: avatar_hash}}
        )

    async def remove_avatar(self, user_id: str) -> User:
        return await self._update_by_user_id(
            user_id,
            {
                "$unset": {
                    FIELD_TO_KEY["avatar_hash"]: "",
                    FIELD_TO_KEY["avatar_base64"]: "",
                }
            },
        )

    async def find_by_user_id(self, user_id: str) -> Optional[User]:
        return await self._find_by_key(FIELD_TO_KEY["user_id"], user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_by_key(FIELD_TO_KEY["email"], email)

    async def find_by_external_id(self, external_id: str) -> Optional[User]:
        return await self._find_by_key(EXTERNAL_ID_KEY, external_id)

    async def delete(self, id: str) -> None:
        filter_dict = _id_filter(id)
        if filter_dict is None:
            return

        deleted = await self._find_one_and_delete(filter_dict)
        if deleted:
            logger.debug(f"Deleted user {id}")

    async def _find_by_key(self, key: str, value: str) -> Optional[User]:
        document = await self._find_one({key: value})
        return self.from_document(document) if document else None

    async def _update_by_user_id(self, user_id: str, update_dict: Dict[str, Any]) -> User:
        document = await self._find_one_and_update(
            {FIELD_TO_KEY["user_id"]: user_id}, update_dict
        )
        if not document:
            raise UserNotFoundError(user_id)

        return self.from_document(document)
