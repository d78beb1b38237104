"""
Repository interfaces (ports) for domain entities.

These interfaces define the contract for persistence operations
without specifying the implementation details.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID

from ...domain.entities.principal import Principal


class PrincipalRepository(ABC):
    """
    Store for principals and their session state.

    Implementations raise ``DuplicateEntityException`` on uniqueness
    violations and ``StoreUnavailableException`` when the backing store
    cannot be reached. They never retry.
    """

    @abstractmethod
    async def get_by_id(self, id: UUID) -> Optional[Principal]:
        """
        Get principal by ID.

        Args:
            id: Principal UUID

        Returns:
            Principal if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Principal]:
        """Get principal by exact email address."""
        pass

    @abstractmethod
    async def add(self, principal: Principal) -> Principal:
        """
        Add new principal.

        Args:
            principal: Principal to add, without an id

        Returns:
            Stored principal with generated ID and timestamps
        """
        pass

    @abstractmethod
    async def set_refresh_token_hash(self, id: UUID, refresh_token_hash: Optional[str]) -> bool:
        """
        Overwrite the stored refresh token hash unconditionally.

        ``None`` clears the session. Returns False if the principal does not exist.
        """
        pass

    @abstractmethod
    async def swap_refresh_token_hash(
        self,
        id: UUID,
        expected_hash: str,
        new_hash: str,
    ) -> bool:
        """
        Compare-and-set the refresh token hash.

        Writes ``new_hash`` only if the stored hash still equals
        ``expected_hash``. Returns True if the write happened.
        """
        pass

    @abstractmethod
    async def set_password_hash(self, id: UUID, password_hash: str) -> bool:
        """
        Replace the password hash and clear the refresh token hash in one write.

        Returns False if the principal does not exist.
        """
        pass

    @abstractmethod
    async def update_profile(self, id: UUID, changes: Dict[str, Any]) -> Optional[Principal]:
        """Apply profile field changes. Returns None if the principal does not exist."""
        pass

    @abstractmethod
    async def delete(self, id: UUID) -> bool:
        """
        Delete principal by ID.

        Args:
            id: Principal UUID

        Returns:
            True if deleted, False if not found
        """
        pass
