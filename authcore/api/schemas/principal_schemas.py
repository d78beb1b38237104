"""
Pydantic schemas for profile endpoints.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .auth_schemas import LoginEmail
from ...domain.entities.principal import MAX_NAME_LENGTH, ProfileUpdate


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields stay unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    email: Optional[LoginEmail] = None
    phone: Optional[str] = Field(None, max_length=32)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        cleaned = v.strip()
        if not cleaned:
            raise ValueError('Name cannot be empty')
        return cleaned

    def to_update(self) -> ProfileUpdate:
        return ProfileUpdate(
            name=self.name,
            email=self.email,
            phone=self.phone,
        )
