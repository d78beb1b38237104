"""
SQLAlchemy implementation of PrincipalRepository.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ....application.interfaces.repositories import PrincipalRepository
from ....domain.entities.principal import Principal
from ....domain.exceptions import DuplicateEntityException, StoreUnavailableException
from ..models.principal_model import PrincipalModel

logger = logging.getLogger(__name__)


class SQLAlchemyPrincipalRepository(PrincipalRepository):
    """
    SQLAlchemy implementation of principal repository.

    Every method runs in its own transaction, so each call is atomic and
    visible to other callers as soon as it returns.
    """

    STORE_NAME = "database"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except IntegrityError as e:
            # email is the only unique column besides the primary key
            logger.debug("Integrity error on principals: %s", e.orig)
            raise DuplicateEntityException("Principal", "email")
        except (OperationalError, InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.error("Principal store unavailable: %s", type(e).__name__)
            raise StoreUnavailableException(
                store=self.STORE_NAME,
                message="database operation failed",
                original_error=type(e).__name__,
            )

    async def get_by_id(self, id: UUID) -> Optional[Principal]:
        """Get principal by ID."""
        async with self._transaction() as session:
            model = await session.get(PrincipalModel, id)
            return model.to_domain() if model else None

    async def get_by_email(self, email: str) -> Optional[Principal]:
        """Get principal by exact email address."""
        async with self._transaction() as session:
            result = await session.execute(
                select(PrincipalModel).where(PrincipalModel.email == email)
            )
            model = result.scalar_one_or_none()
            return model.to_domain() if model else None

    async def add(self, principal: Principal) -> Principal:
        """Add new principal."""
        async with self._transaction() as session:
            model = PrincipalModel.from_domain(principal)
            session.add(model)
            await session.flush()
            return model.to_domain()

    async def set_refresh_token_hash(self, id: UUID, refresh_token_hash: Optional[str]) -> bool:
        """Overwrite the refresh token hash."""
        async with self._transaction() as session:
            result = await session.execute(
                update(PrincipalModel)
                .where(PrincipalModel.id == id)
                .values(refresh_token_hash=refresh_token_hash)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

    async def swap_refresh_token_hash(
        self,
        id: UUID,
        expected_hash: str,
        new_hash: str,
    ) -> bool:
        """Replace the refresh token hash only if it still equals expected_hash."""
        async with self._transaction() as session:
            result = await session.execute(
                update(PrincipalModel)
                .where(
                    PrincipalModel.id == id,
                    PrincipalModel.refresh_token_hash == expected_hash,
                )
                .values(refresh_token_hash=new_hash)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    async def set_password_hash(self, id: UUID, password_hash: str) -> bool:
        """Replace the password hash and end the session."""
        async with self._transaction() as session:
            result = await session.execute(
                update(PrincipalModel)
                .where(PrincipalModel.id == id)
                .values(password_hash=password_hash, refresh_token_hash=None)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

    async def update_profile(self, id: UUID, changes: Dict[str, Any]) -> Optional[Principal]:
        """Apply profile changes."""
        async with self._transaction() as session:
            model = await session.get(PrincipalModel, id, with_for_update=True)
            if model is None:
                return None
            principal = model.to_domain().with_changes(changes)
            model.update_profile_from_domain(principal)
            await session.flush()
            return model.to_domain()

    async def delete(self, id: UUID) -> bool:
        """Delete principal by ID."""
        async with self._transaction() as session:
            result = await session.execute(
                delete(PrincipalModel)
                .where(PrincipalModel.id == id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0
