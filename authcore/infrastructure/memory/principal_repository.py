"""
In-process implementation of PrincipalRepository.

Useful for tests and single-process deployments. All mutations are
serialized by one asyncio lock, which gives the compare-and-set the
same guarantees as the database's conditional UPDATE.
"""
import asyncio
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from ...application.interfaces.repositories import PrincipalRepository
from ...domain.entities.base import utc_now
from ...domain.entities.principal import Principal
from ...domain.exceptions import DuplicateEntityException


class InMemoryPrincipalRepository(PrincipalRepository):
    """Dictionary-backed principal store."""

    def __init__(self) -> None:
        self._principals: Dict[UUID, Principal] = {}
        self._ids_by_email: Dict[str, UUID] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._principals)

    async def get_by_id(self, id: UUID) -> Optional[Principal]:
        principal = self._principals.get(id)
        return principal.copy() if principal else None

    async def get_by_email(self, email: str) -> Optional[Principal]:
        principal_id = self._ids_by_email.get(email)
        if principal_id is None:
            return None
        return await self.get_by_id(principal_id)

    async def add(self, principal: Principal) -> Principal:
        async with self._lock:
            if principal.email in self._ids_by_email:
                raise DuplicateEntityException("Principal", "email")

            stored = principal.copy()
            stored.id = principal.id or uuid4()
            stored.created_at = utc_now()
            stored.updated_at = None

            self._principals[stored.id] = stored
            self._ids_by_email[stored.email] = stored.id
            return stored.copy()

    async def set_refresh_token_hash(self, id: UUID, refresh_token_hash: Optional[str]) -> bool:
        async with self._lock:
            principal = self._principals.get(id)
            if principal is None:
                return False
            principal.refresh_token_hash = refresh_token_hash
            principal.mark_updated()
            return True

    async def swap_refresh_token_hash(
        self,
        id: UUID,
        expected_hash: str,
        new_hash: str,
    ) -> bool:
        async with self._lock:
            principal = self._principals.get(id)
            if principal is None or principal.refresh_token_hash != expected_hash:
                return False
            principal.refresh_token_hash = new_hash
            principal.mark_updated()
            return True

    async def set_password_hash(self, id: UUID, password_hash: str) -> bool:
        async with self._lock:
            principal = self._principals.get(id)
            if principal is None:
                return False
            principal.password_hash = password_hash
            principal.refresh_token_hash = None
            principal.mark_updated()
            return True

    async def update_profile(self, id: UUID, changes: Dict[str, Any]) -> Optional[Principal]:
        async with self._lock:
            principal = self._principals.get(id)
            if principal is None:
                return None

            new_email = changes.get('email')
            if new_email is not None and new_email != principal.email:
                if new_email in self._ids_by_email:
                    raise DuplicateEntityException("Principal", "email")

            updated = principal.with_changes(changes)
            updated.mark_updated()

            if updated.email != principal.email:
                del self._ids_by_email[principal.email]
                self._ids_by_email[updated.email] = id
            self._principals[id] = updated
            return updated.copy()

    async def delete(self, id: UUID) -> bool:
        async with self._lock:
            principal = self._principals.pop(id, None)
            if principal is None:
                return False
            del self._ids_by_email[principal.email]
            return True
