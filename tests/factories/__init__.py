"""
Test data factories.
"""
from .principal_factory import (
    ActivePrincipalFactory,
    PrincipalFactory,
    SignupRequestFactory,
)

__all__ = [
    "ActivePrincipalFactory",
    "PrincipalFactory",
    "SignupRequestFactory",
]
