"""
Unit tests for SQLAlchemyPrincipalRepository.

Tests the conditional updates behind session rotation and the mapping
of database errors onto domain exceptions.
"""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, OperationalError

from authcore.domain.exceptions import DuplicateEntityException, StoreUnavailableException
from authcore.infrastructure.database.models import PrincipalModel
from authcore.infrastructure.database.repositories import SQLAlchemyPrincipalRepository

from tests.factories import PrincipalFactory


class _AsyncContext:
    """Async context manager yielding a fixed value."""

    def __init__(self, value=None):
        self._value = value

    async def __aenter__(self):
        return self._value

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def mock_session():
    """Create a mock database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.add = MagicMock()
    session.begin = MagicMock(return_value=_AsyncContext())
    return session


@pytest.fixture
def session_factory(mock_session):
    """Session factory handing out the mock session."""
    return MagicMock(side_effect=lambda: _AsyncContext(mock_session))


@pytest.fixture
def repository(session_factory):
    """Create a repository over the mock session factory."""
    return SQLAlchemyPrincipalRepository(session_factory)


@pytest.fixture
def principal_model():
    """Stored principal row."""
    model = PrincipalModel(
        email="ada@authcore.io",
        name="Ada Lovelace",
        phone=None,
        password_hash="$2b$04$storedhashstoredhashstoredhashstoredhashstore",
        refresh_token_hash=None,
    )
    model.id = uuid4()
    model.created_at = datetime.now(timezone.utc)
    return model


def rowcount(n):
    result = MagicMock()
    result.rowcount = n
    return result


class TestGetById:
    """Test lookup by ID."""

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, repository):
        """Test returns None when the principal does not exist."""
        assert await repository.get_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_returns_domain_entity(self, repository, mock_session, principal_model):
        """Test the row is converted to a Principal."""
        mock_session.get = AsyncMock(return_value=principal_model)

        principal = await repository.get_by_id(principal_model.id)

        assert principal.id == principal_model.id
        assert principal.email == "ada@authcore.io"
        assert principal.has_active_session is False


class TestGetByEmail:
    """Test lookup by email."""

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, repository, mock_session):
        """Test returns None for an unknown email."""
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute = AsyncMock(return_value=result)

        assert await repository.get_by_email("nobody@authcore.io") is None

    @pytest.mark.asyncio
    async def test_returns_principal(self, repository, mock_session, principal_model):
        """Test a matching row is returned."""
        result = MagicMock()
        result.scalar_one_or_none.return_value = principal_model
        mock_session.execute = AsyncMock(return_value=result)

        principal = await repository.get_by_email("ada@authcore.io")

        assert principal.id == principal_model.id


class TestAdd:
    """Test inserting principals."""

    @pytest.mark.asyncio
    async def test_add_flushes_model(self, repository, mock_session):
        """Test the principal is added and flushed."""
        principal = PrincipalFactory(id=None)

        saved = await repository.add(principal)

        mock_session.add.assert_called_once()
        mock_session.flush.assert_awaited_once()
        assert saved.email == principal.email

    @pytest.mark.asyncio
    async def test_duplicate_email_raises(self, repository, mock_session):
        """Test a unique violation becomes DuplicateEntityException."""
        mock_session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
        )

        with pytest.raises(DuplicateEntityException) as exc_info:
            await repository.add(PrincipalFactory(id=None))

        assert exc_info.value.field == "email"


class TestRefreshTokenHash:
    """Test session state updates."""

    @pytest.mark.asyncio
    async def test_set_hash_reports_row_found(self, repository, mock_session):
        """Test set returns True when a row was updated."""
        mock_session.execute = AsyncMock(return_value=rowcount(1))
        assert await repository.set_refresh_token_hash(uuid4(), "hash") is True

    @pytest.mark.asyncio
    async def test_set_hash_reports_missing_row(self, repository, mock_session):
        """Test set returns False for an unknown principal."""
        mock_session.execute = AsyncMock(return_value=rowcount(0))
        assert await repository.set_refresh_token_hash(uuid4(), None) is False

    @pytest.mark.asyncio
    async def test_swap_succeeds_when_hash_matches(self, repository, mock_session):
        """Test the compare-and-set wins when one row matched."""
        mock_session.execute = AsyncMock(return_value=rowcount(1))
        assert await repository.swap_refresh_token_hash(uuid4(), "old", "new") is True

    @pytest.mark.asyncio
    async def test_swap_loses_when_hash_changed(self, repository, mock_session):
        """Test the compare-and-set loses when no row matched."""
        mock_session.execute = AsyncMock(return_value=rowcount(0))
        assert await repository.swap_refresh_token_hash(uuid4(), "old", "new") is False

    @pytest.mark.asyncio
    async def test_swap_is_conditional_on_expected_hash(self, repository, mock_session):
        """Test the UPDATE filters on the expected hash."""
        mock_session.execute = AsyncMock(return_value=rowcount(1))

        await repository.swap_refresh_token_hash(uuid4(), "old", "new")

        statement = mock_session.execute.call_args.args[0]
        compiled = statement.compile()
        assert "refresh_token_hash" in str(statement.whereclause)
        assert "old" in compiled.params.values()
        assert "new" in compiled.params.values()

    @pytest.mark.asyncio
    async def test_set_password_clears_session(self, repository, mock_session):
        """Test the password update also nulls the refresh hash."""
        mock_session.execute = AsyncMock(return_value=rowcount(1))

        assert await repository.set_password_hash(uuid4(), "new-hash") is True

        statement = mock_session.execute.call_args.args[0]
        params = statement.compile().params
        assert params["password_hash"] == "new-hash"
        assert "refresh_token_hash" in str(statement)
        assert params.get("refresh_token_hash") is None


class TestUpdateProfile:
    """Test profile updates."""

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, repository):
        """Test None for an unknown principal."""
        assert await repository.update_profile(uuid4(), {"name": "X"}) is None

    @pytest.mark.asyncio
    async def test_update_changes_profile_only(self, repository, mock_session, principal_model):
        """Test profile fields change and credentials do not."""
        principal_model.refresh_token_hash = "session-hash"
        mock_session.get = AsyncMock(return_value=principal_model)

        updated = await repository.update_profile(principal_model.id, {"name": "Grace", "phone": "+1"})

        assert updated.name == "Grace"
        assert updated.phone == "+1"
        assert updated.refresh_token_hash == "session-hash"
        assert mock_session.get.call_args.kwargs["with_for_update"] is True

    @pytest.mark.asyncio
    async def test_update_duplicate_email_raises(self, repository, mock_session, principal_model):
        """Test an email collision becomes DuplicateEntityException."""
        mock_session.get = AsyncMock(return_value=principal_model)
        mock_session.flush = AsyncMock(
            side_effect=IntegrityError("UPDATE", {}, Exception("duplicate key"))
        )

        with pytest.raises(DuplicateEntityException):
            await repository.update_profile(principal_model.id, {"email": "taken@authcore.io"})


class TestDelete:
    """Test deletion."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, repository, mock_session):
        """Test True when a row was removed."""
        mock_session.execute = AsyncMock(return_value=rowcount(1))
        assert await repository.delete(uuid4()) is True

    @pytest.mark.asyncio
    async def test_delete_missing(self, repository, mock_session):
        """Test False when nothing matched."""
        mock_session.execute = AsyncMock(return_value=rowcount(0))
        assert await repository.delete(uuid4()) is False


class TestStoreFailures:
    """Test connectivity errors surface as StoreUnavailableException."""

    @pytest.mark.asyncio
    async def test_operational_error(self, repository, mock_session):
        """Test a dropped connection is reported as unavailable."""
        mock_session.get = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )

        with pytest.raises(StoreUnavailableException) as exc_info:
            await repository.get_by_id(uuid4())

        assert exc_info.value.store == "database"
        assert exc_info.value.details["original_error"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_connect_failure(self, repository, session_factory):
        """Test failure to open a session is reported as unavailable."""
        session_factory.side_effect = ConnectionRefusedError()

        with pytest.raises(StoreUnavailableException):
            await repository.set_refresh_token_hash(uuid4(), None)
