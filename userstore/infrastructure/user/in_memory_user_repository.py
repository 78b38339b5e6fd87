"""In-memory User Repository for testing."""

from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId

from userstore.domain.user.core.entities.user import User
from userstore.domain.user.core.exceptions.user_errors import UserNotFoundError
from userstore.domain.user.core.ports.user_repository import IUserRepository
from userstore.infrastructure.user.user_document import (
    EXTERNAL_ID_KEY,
    FIELD_TO_KEY,
    from_document,
    to_document,
    to_update_fields,
)


class InMemoryUserRepository(IUserRepository):
    """In-memory implementation of User repository for testing.

    Stores the same documents the MongoDB repository would (camelCase keys,
    ObjectId ``_id``) keyed by id string, in insertion order.
    Useful for unit tests and local runs without MongoDB.

    Examples:
        >>> repo = InMemoryUserRepository()
        >>> user = await repo.create(User.create("Ada", "Lovelace", "ada@example.com"))
        >>> found = await repo.find_by_email("ada@example.com")
    """

    def __init__(self) -> None:
        """Initialize empty in-memory storage."""
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def create(self, user: User) -> User:
        document = to_document(user)
        document["_id"] = ObjectId()
        self._documents[str(document["_id"])] = document
        return from_document(document)

    async def find_all(self) -> List[User]:
        return [from_document(doc) for doc in self._documents.values()]

    async def find_by_id(self, id: str) -> Optional[User]:
        document = self._documents.get(id)
        return from_document(document) if document else None

    async def update(self, id: str, changes: Mapping[str, Any]) -> Optional[User]:
        fields = to_update_fields(changes)
        document = self._documents.get(id)
        if document is None:
            return None

        document.update(fields)
        return from_document(document)

    async def update_avatar(self, user_id: str, avatar_hash: str, avatar_base64: str) -> User:
        document = self._require_by_user_id(user_id)
        document[FIELD_TO_KEY["avatar_hash"]] = avatar_hash
        document[FIELD_TO_KEY["avatar_base64"]] = avatar_base64
        return from_document(document)

    async def update_avatar_hash(self, user_id: str, avatar_hash: str) -> User:
        document = self._require_by_user_id(user_id)
        document[FIELD_TO_KEY["avatar_hash"]] = avatar_hash
        return from_document(document)

    async def remove_avatar(self, user_id: str) -> User:
        document = self._require_by_user_id(user_id)
        document.pop(FIELD_TO_KEY["avatar_hash"], None)
        document.pop(FIELD_TO_KEY["avatar_base64"], None)
        return from_document(document)

    async def find_by_user_id(self, user_id: str) -> Optional[User]:
        return self._find_by_key(FIELD_TO_KEY["user_id"], user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        return self._find_by_key(FIELD_TO_KEY["email"], email)

    async def find_by_external_id(self, external_id: str) -> Optional[User]:
        return self._find_by_key(EXTERNAL_ID_KEY, external_id)

    async def delete(self, id: str) -> None:
        self._documents.pop(id, None)

    def link_external_id(self, id: str, external_id: str) -> None:
        """Store an identity-provider id on a document.

        The entity has no such field, so this stands in for whatever
        provisioning process writes ``externalId`` in a real collection.

        Raises:
            UserNotFoundError: If ``id`` is unknown
        """
        if id not in self._documents:
            raise UserNotFoundError(id)
        self._documents[id][EXTERNAL_ID_KEY] = external_id

    def clear(self) -> None:
        """Clear all users from memory.

        Useful for test cleanup.
        """
        self._documents.clear()

    def count(self) -> int:
        """Get total number of users in memory."""
        return len(self._documents)

    def _find_by_key(self, key: str, value: str) -> Optional[User]:
        for document in self._documents.values():
            if document.get(key) == value:
                return from_document(document)
        return None

    def _require_by_user_id(self, user_id: str) -> Dict[str, Any]:
        for document in self._documents.values():
            if document.get(FIELD_TO_KEY["user_id"]) == user_id:
                return document
        raise UserNotFoundError(user_id)
