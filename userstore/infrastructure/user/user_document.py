"""Mapping between the User entity and its MongoDB document.

Documents use camelCase keys:

    {
        "_id": ObjectId(...),
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "avatar": None,
        "avatarHash": None,
        "avatarBase64": None,
        "userId": "u1",
        "externalId": "idp|42",   # store-only, never mapped to the entity
    }
"""

from typing import Any, Dict, Mapping, Optional

from userstore.domain.user.core.entities.user import UPDATABLE_FIELDS, User

# Entity field -> document key
FIELD_TO_KEY: Dict[str, str] = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "avatar": "avatar",
    "avatar_hash": "avatarHash",
    "avatar_base64": "avatarBase64",
    "user_id": "userId",
}

EXTERNAL_ID_KEY = "externalId"


def _or_none(value: Any) -> Optional[Any]:
    return value or None


def to_document(user: User) -> Dict[str, Any]:
    """Build the document for a new user (no ``_id``; the store assigns it)."""
    return {key: getattr(user, name) for name, key in FIELD_TO_KEY.items()}


def from_document(doc: Mapping[str, Any]) -> User:
    """Convert a stored document to a User.

    Absent or empty avatar, avatarHash, avatarBase64 and userId become None.
    """
    return User(
        id=str(doc["_id"]),
        first_name=doc["firstName"],
        last_name=doc["lastName"],
        email=doc["email"],
        avatar=_or_none(doc.get("avatar")),
        avatar_hash=_or_none(doc.get("avatarHash")),
        avatar_base64=_or_none(doc.get("avatarBase64")),
        user_id=_or_none(doc.get("userId")),
    )


def to_update_fields(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate entity field names in a partial update to document keys.

    Raises:
        ValueError: If a name is not an updatable User field
    """
    unknown = sorted(set(changes) - UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update user fields: {', '.join(unknown)}")
    return {FIELD_TO_KEY[name]: value for name, value in changes.items()}
