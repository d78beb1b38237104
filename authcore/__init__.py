"""
authcore - password authentication with rotating refresh-token sessions.

The core is ``AuthService``; it is built explicitly from a principal
repository, a password hasher and a token service.
"""
from .application.services.auth_service import (
    AuthError,
    AuthErrorKind,
    AuthResult,
    AuthService,
    FailureReason,
    SigninRequest,
    SignupRequest,
)
from .domain.entities.principal import Principal, PrincipalProfile, ProfileUpdate

__version__ = "1.0.0"

__all__ = [
    'AuthError',
    'AuthErrorKind',
    'AuthResult',
    'AuthService',
    'FailureReason',
    'Principal',
    'PrincipalProfile',
    'ProfileUpdate',
    'SigninRequest',
    'SignupRequest',
]
