# Domain Events
from .principal_events import (
    AuthenticationRejected,
    PrincipalDeleted,
    PrincipalLoggedOut,
    PrincipalPasswordChanged,
    PrincipalProfileUpdated,
    PrincipalRegistered,
    PrincipalSignedIn,
    SessionRefreshed,
)

__all__ = [
    'AuthenticationRejected',
    'PrincipalDeleted',
    'PrincipalLoggedOut',
    'PrincipalPasswordChanged',
    'PrincipalProfileUpdated',
    'PrincipalRegistered',
    'PrincipalSignedIn',
    'SessionRefreshed',
]
