# Domain Exceptions
from .domain_exceptions import (
    DomainException,
    DuplicateEntityException,
    StoreUnavailableException,
    ValidationException,
)

__all__ = [
    'DomainException',
    'DuplicateEntityException',
    'StoreUnavailableException',
    'ValidationException',
]
