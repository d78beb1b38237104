"""
SQLAlchemy repository implementations.
"""
from .principal_repository import SQLAlchemyPrincipalRepository

__all__ = [
    'SQLAlchemyPrincipalRepository',
]
