"""
Database infrastructure: ORM models, repositories and connection management.
"""
from .connection import DatabaseManager, health_check, init_db
from .repositories import SQLAlchemyPrincipalRepository

__all__ = [
    'DatabaseManager',
    'SQLAlchemyPrincipalRepository',
    'health_check',
    'init_db',
]
