"""User repository port (interface)."""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from userstore.domain.user.core.entities.user import User


class IUserRepository(ABC):
    """Repository interface for the User entity.

    Defines contract for user persistence operations.
    Implementations must handle User entity serialization/deserialization.

    Lookups (``find_*``) and ``update`` signal "not found" with ``None``.
    The avatar mutations raise ``UserNotFoundError`` instead.
    Storage failures propagate unchanged.
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user.

        Args:
            user: User entity to persist (``id`` is ignored)

        Returns:
            Stored user with the identifier assigned by the store
        """
        pass

    @abstractmethod
    async def find_all(self) -> List[User]:
        """Return every stored user, in the order the store returns them."""
        pass

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[User]:
        """Find user by store identifier.

        Args:
            id: Store-assigned identifier

        Returns:
            User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, id: str, changes: Mapping[str, Any]) -> Optional[User]:
        """Apply a partial update.

        Args:
            id: Store-assigned identifier
            changes: Entity field names mapped to their new values

        Returns:
            User as stored after the update, None if ``id`` is unknown

        Raises:
            ValueError: If ``changes`` names a field that cannot be updated
        """
        pass

    @abstractmethod
    async def update_avatar(self, user_id: str, avatar_hash: str, avatar_base64: str) -> User:
        """Set avatar hash and base64 payload together.

        Raises:
            UserNotFoundError: If no user has this ``user_id``
        """
        pass

    @abstractmethod
    async def update_avatar_hash(self, user_id: str, avatar_hash: str) -> User:
        """Set the avatar hash only. The base64 payload is left as stored.

        Raises:
            UserNotFoundError: If no user has this ``user_id``
        """
        pass

    @abstractmethod
    async def remove_avatar(self, user_id: str) -> User:
        """Clear avatar hash and base64 payload.

        Raises:
            UserNotFoundError: If no user has this ``user_id``
        """
        pass

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> Optional[User]:
        """Find user by application-level user_id."""
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find user by email address."""
        pass

    @abstractmethod
    async def find_by_external_id(self, external_id: str) -> Optional[User]:
        """Find user by identity-provider identifier.

        Note:
            ``externalId`` lives on the stored document only, it is not
            an entity field.
        """
        pass

    @abstractmethod
    async def delete(self, id: str) -> None:
        """Delete user by store identifier.

        Deleting an unknown identifier is a no-op.
        """
        pass
