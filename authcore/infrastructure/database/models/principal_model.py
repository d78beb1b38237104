"""
SQLAlchemy model for Principal entity.
"""
from sqlalchemy import Column, String

from .base import BaseModel
from ....domain.entities.principal import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH, Principal


class PrincipalModel(BaseModel):
    """SQLAlchemy model for principals table."""

    __tablename__ = 'principals'

    # Authentication
    email = Column(String(MAX_EMAIL_LENGTH), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Session
    refresh_token_hash = Column(String(255), nullable=True)

    # Profile
    name = Column(String(MAX_NAME_LENGTH), nullable=False)
    phone = Column(String(32), nullable=True)

    def to_domain(self) -> Principal:
        """Convert ORM model to domain entity."""
        return Principal(
            id=self.id,
            email=self.email,
            name=self.name,
            phone=self.phone,
            password_hash=self.password_hash,
            refresh_token_hash=self.refresh_token_hash,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, principal: Principal) -> 'PrincipalModel':
        """Create ORM model from domain entity."""
        model = cls(
            email=principal.email,
            name=principal.name,
            phone=principal.phone,
            password_hash=principal.password_hash,
            refresh_token_hash=principal.refresh_token_hash,
        )
        # Unsaved principals get their id from the column default.
        if principal.id is not None:
            model.id = principal.id
        return model

    def update_profile_from_domain(self, principal: Principal) -> None:
        """Copy profile fields only; credentials and session state are left alone."""
        self.email = principal.email
        self.name = principal.name
        self.phone = principal.phone
