# Domain Entities
from .base import DomainEvent, utc_now
from .principal import Principal, PrincipalProfile, ProfileUpdate

__all__ = [
    'DomainEvent',
    'Principal',
    'PrincipalProfile',
    'ProfileUpdate',
    'utc_now',
]
