"""
Application ports.
"""
from .repositories import PrincipalRepository
from .services import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    EventPublisher,
    PasswordHasher,
    TokenPair,
    TokenPayload,
    TokenService,
)

__all__ = [
    'ACCESS_TOKEN',
    'REFRESH_TOKEN',
    'EventPublisher',
    'PasswordHasher',
    'PrincipalRepository',
    'TokenPair',
    'TokenPayload',
    'TokenService',
]
