"""
Application services - orchestration and cross-cutting concerns.
"""
from .auth_service import (
    AuthError,
    AuthErrorKind,
    AuthResult,
    AuthService,
    FailureReason,
    SigninRequest,
    SignupRequest,
)

__all__ = [
    'AuthError',
    'AuthErrorKind',
    'AuthResult',
    'AuthService',
    'FailureReason',
    'SigninRequest',
    'SignupRequest',
]
