"""
Pydantic schemas for authentication endpoints.
"""
from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator

from ...application.interfaces.services import TokenPair
from ...domain.entities.principal import MAX_NAME_LENGTH, PrincipalProfile

_email_adapter = TypeAdapter(EmailStr)


def _check_email(value: str) -> str:
    """Validate the format with EmailStr but keep the address exactly as sent."""
    try:
        _email_adapter.validate_python(value)
    except ValueError:
        raise ValueError("value is not a valid email address") from None
    return value


# Emails are matched case-sensitively, so the domain part is not lowercased.
LoginEmail = Annotated[str, AfterValidator(_check_email)]


class SignupRequest(BaseModel):
    """Principal registration request."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH, description="Display name")
    email: LoginEmail = Field(..., description="Login email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")
    phone: Optional[str] = Field(None, max_length=32, description="Phone number")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the name."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError('Name cannot be empty')
        return cleaned


class SigninRequest(BaseModel):
    """Signin request."""

    email: LoginEmail = Field(..., description="Login email address")
    password: str = Field(..., min_length=1, description="Password")


class ChangePasswordRequest(BaseModel):
    """Change password request."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=1, max_length=128, description="New password")


class TokenResponse(BaseModel):
    """Token pair returned by signin and refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="Bearer", description="Token type")
    access_token_expires_at: datetime
    refresh_token_expires_at: datetime

    @classmethod
    def from_pair(cls, tokens: TokenPair) -> 'TokenResponse':
        return cls(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            access_token_expires_at=tokens.access_token_expires_at,
            refresh_token_expires_at=tokens.refresh_token_expires_at,
        )


class PrincipalResponse(BaseModel):
    """Public principal profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    phone: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_profile(cls, profile: PrincipalProfile) -> 'PrincipalResponse':
        return cls.model_validate(profile)


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: Optional[str] = None
    success: bool = False
