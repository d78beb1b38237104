"""
Principal and session domain events.

Published to the optional event publisher after the state change they
describe has been stored.
"""
from dataclasses import dataclass
from typing import Tuple

from ..entities.base import DomainEvent


@dataclass(kw_only=True)
class PrincipalRegistered(DomainEvent):
    """A new principal signed up."""
    EVENT_TYPE = "principal.registered"

    email: str


@dataclass(kw_only=True)
class PrincipalSignedIn(DomainEvent):
    """Credentials checked out and a session started."""
    EVENT_TYPE = "principal.signed_in"


@dataclass(kw_only=True)
class SessionRefreshed(DomainEvent):
    """The refresh token was rotated."""
    EVENT_TYPE = "session.refreshed"


@dataclass(kw_only=True)
class PrincipalLoggedOut(DomainEvent):
    EVENT_TYPE = "principal.logged_out"


@dataclass(kw_only=True)
class PrincipalPasswordChanged(DomainEvent):
    """Password replaced; the session ended with it."""
    EVENT_TYPE = "principal.password_changed"


@dataclass(kw_only=True)
class PrincipalProfileUpdated(DomainEvent):
    EVENT_TYPE = "principal.profile_updated"

    fields: Tuple[str, ...] = ()


@dataclass(kw_only=True)
class PrincipalDeleted(DomainEvent):
    EVENT_TYPE = "principal.deleted"


@dataclass(kw_only=True)
class AuthenticationRejected(DomainEvent):
    """
    A credential check failed.

    Carries the internal reason that the public error message hides.
    ``principal_id`` is unset when the presented email matched nobody.
    """
    EVENT_TYPE = "auth.rejected"

    kind: str
    reason: str
