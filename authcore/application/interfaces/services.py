"""
External service interfaces (ports).

These interfaces define contracts for the services the
authentication workflow depends on.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from uuid import UUID


ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    """Verified token claims."""
    sub: str  # Subject (principal ID)
    email: str
    exp: datetime  # Expiration time
    iat: datetime  # Issued at time
    jti: str  # JWT ID (unique identifier)
    type: str  # Token type (access/refresh)

    @property
    def principal_id(self) -> UUID:
        return UUID(self.sub)


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str
    access_token_expires_at: datetime
    refresh_token_expires_at: datetime
    token_type: str = "Bearer"


class PasswordHasher(ABC):
    """Interface for one-way secret hashing."""

    @abstractmethod
    def hash(self, secret: str) -> str:
        """Hash a plain text secret with a fresh salt."""
        pass

    @abstractmethod
    def verify(self, secret: str, hashed: str) -> bool:
        """Verify a secret against its hash. Never raises on mismatch."""
        pass

    @property
    @abstractmethod
    def decoy_hash(self) -> str:
        """
        Hash of a throwaway secret, fixed for the hasher's lifetime.

        Verified against when there is no real hash to check, so the
        failure costs the same as a mismatch.
        """
        pass


class TokenService(ABC):
    """Interface for signed token issuing and verification."""

    @abstractmethod
    def create_token_pair(self, principal_id: UUID, email: str) -> TokenPair:
        """Create an access token and a refresh token for the same claims."""
        pass

    @abstractmethod
    def verify_token(self, token: str, token_type: str) -> Optional[TokenPayload]:
        """Check signature and expiry with the secret for ``token_type``."""
        pass


class EventPublisher(ABC):
    """Interface for publishing domain events."""

    @abstractmethod
    async def publish(self, event: Any) -> None:
        """Publish a single domain event."""
        pass
