"""
SQLAlchemy ORM models.
"""
from .base import Base, BaseModel, TimestampMixin, UUIDMixin
from .principal_model import PrincipalModel

__all__ = [
    'Base',
    'BaseModel',
    'TimestampMixin',
    'UUIDMixin',
    'PrincipalModel',
]
