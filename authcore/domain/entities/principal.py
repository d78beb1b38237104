"""
Principal domain entity and its public projection.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from .base import utc_now
from ..exceptions import ValidationException


MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 254


@dataclass(frozen=True)
class PrincipalProfile:
    """
    Public view of a principal.

    Deliberately has no password or refresh token attributes; this is the
    only shape of a principal that leaves the auth core.
    """
    id: UUID
    email: str
    name: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            'id': str(self.id),
            'email': self.email,
            'name': self.name,
            'phone': self.phone,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class ProfileUpdate:
    """Mutable profile fields; ``None`` means leave unchanged."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def as_changes(self) -> Dict[str, str]:
        """Return only the fields that were supplied."""
        changes = {
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
        }
        return {key: value for key, value in changes.items() if value is not None}

    @property
    def is_empty(self) -> bool:
        return not self.as_changes()


@dataclass
class Principal:
    """
    An account that can authenticate.

    ``password_hash`` is always a hash. ``refresh_token_hash`` holds the hash
    of the single refresh token currently honoured for this principal, or
    ``None`` when no session is active.
    """
    email: str
    name: str
    password_hash: str
    id: Optional[UUID] = None
    phone: Optional[str] = None
    refresh_token_hash: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate principal data on construction."""
        self._validate()

    def _validate(self) -> None:
        errors = {}

        if not self.email or not self.email.strip():
            errors['email'] = ['Email is required']
        elif len(self.email) > MAX_EMAIL_LENGTH:
            errors['email'] = [f'Email cannot exceed {MAX_EMAIL_LENGTH} characters']

        if not self.name or not self.name.strip():
            errors['name'] = ['Name is required']
        elif len(self.name) > MAX_NAME_LENGTH:
            errors['name'] = [f'Name cannot exceed {MAX_NAME_LENGTH} characters']

        if not self.password_hash:
            errors['password_hash'] = ['Password hash is required']

        if errors:
            raise ValidationException(
                message="Invalid principal data",
                errors=errors
            )

    @property
    def has_active_session(self) -> bool:
        """True while a refresh token hash is stored."""
        return self.refresh_token_hash is not None

    def mark_updated(self) -> None:
        self.updated_at = utc_now()

    def with_changes(self, changes: Dict[str, Any]) -> 'Principal':
        """Return a validated copy with the given profile fields replaced."""
        return replace(self, **changes)

    def copy(self) -> 'Principal':
        return replace(self)

    def to_profile(self) -> PrincipalProfile:
        """Project to the public profile, dropping secret fields."""
        if self.id is None:
            raise ValueError("Principal has not been persisted yet")
        return PrincipalProfile(
            id=self.id,
            email=self.email,
            name=self.name,
            phone=self.phone,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def create(
        cls,
        email: str,
        name: str,
        password_hash: str,
        phone: Optional[str] = None,
    ) -> 'Principal':
        """
        Factory method for a principal that has not been stored yet.

        Args:
            email: Login email, kept exactly as given
            name: Display name
            password_hash: Output of the password hasher, never plaintext
            phone: Optional phone number

        Returns:
            New Principal without an id; the store assigns one on add
        """
        return cls(
            email=email,
            name=name.strip(),
            password_hash=password_hash,
            phone=phone,
        )
