"""
API request and response schemas.
"""
from .auth_schemas import (
    ChangePasswordRequest,
    ErrorResponse,
    MessageResponse,
    PrincipalResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
)
from .principal_schemas import ProfileUpdateRequest

__all__ = [
    'ChangePasswordRequest',
    'ErrorResponse',
    'MessageResponse',
    'PrincipalResponse',
    'ProfileUpdateRequest',
    'SigninRequest',
    'SignupRequest',
    'TokenResponse',
]
