"""
In-process adapters.
"""
from .principal_repository import InMemoryPrincipalRepository

__all__ = [
    'InMemoryPrincipalRepository',
]
