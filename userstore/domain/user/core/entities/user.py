"""User entity."""

from dataclasses import dataclass, fields
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class User:
    """Application user.

    Immutable value handed between the service layer and the repositories.
    ``id`` is assigned by the persistence layer on create and never changes;
    an entity built before it is persisted carries ``id=None``.

    ``user_id`` is the stable application-level key (used for avatar
    lookups). It is distinct from ``id``, the store-generated identifier.

    Avatar data:
    - avatar: reference/URL of the avatar image
    - avatar_hash: content fingerprint of the avatar image
    - avatar_base64: inline image payload

    Examples:
        >>> user = User.create("Ada", "Lovelace", "ada@example.com", user_id="u1")
        >>> user.id is None
        True
        >>> user.avatar_hash is None
        True
    """

    id: Optional[str]
    first_name: str
    last_name: str
    email: str
    avatar: Optional[str] = None
    avatar_hash: Optional[str] = None
    avatar_base64: Optional[str] = None
    user_id: Optional[str] = None

    @staticmethod
    def create(
        first_name: str,
        last_name: str,
        email: str,
        avatar: Optional[str] = None,
        avatar_hash: Optional[str] = None,
        avatar_base64: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> "User":
        """Factory method for a user that has not been persisted yet.

        Returns:
            New User instance with ``id=None``
        """
        return User(
            id=None,
            first_name=first_name,
            last_name=last_name,
            email=email,
            avatar=avatar,
            avatar_hash=avatar_hash,
            avatar_base64=avatar_base64,
            user_id=user_id,
        )

    @property
    def has_avatar_data(self) -> bool:
        """True when a hash or inline payload is stored for the avatar."""
        return self.avatar_hash is not None or self.avatar_base64 is not None


# Fields a partial update may change (everything but the store identifier).
UPDATABLE_FIELDS: FrozenSet[str] = frozenset(f.name for f in fields(User) if f.name != "id")
