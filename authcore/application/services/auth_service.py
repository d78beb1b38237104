"""
Authentication application service.

Orchestrates signup, signin, refresh-token rotation, logout and profile
management on top of the hasher, token and repository ports.
"""
import asyncio
import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import UUID

from ..interfaces.repositories import PrincipalRepository
from ..interfaces.services import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    EventPublisher,
    PasswordHasher,
    TokenPair,
    TokenPayload,
    TokenService,
)
from ...domain.entities.principal import Principal, PrincipalProfile, ProfileUpdate
from ...domain.events.principal_events import (
    AuthenticationRejected,
    PrincipalDeleted,
    PrincipalLoggedOut,
    PrincipalPasswordChanged,
    PrincipalProfileUpdated,
    PrincipalRegistered,
    PrincipalSignedIn,
    SessionRefreshed,
)
from ...domain.exceptions import (
    DuplicateEntityException,
    StoreUnavailableException,
    ValidationException,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


class AuthErrorKind(str, Enum):
    """Failure categories visible to callers."""
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    TRANSIENT = "transient"


class FailureReason(str, Enum):
    """Internal cause of a failure, for diagnostics only."""
    DUPLICATE_FIELD = "duplicate_field"
    INVALID_FIELD = "invalid_field"
    UNKNOWN_EMAIL = "unknown_email"
    PASSWORD_MISMATCH = "password_mismatch"
    PRINCIPAL_NOT_FOUND = "principal_not_found"
    NO_ACTIVE_SESSION = "no_active_session"
    REFRESH_TOKEN_INVALID = "refresh_token_invalid"
    REFRESH_TOKEN_MISMATCH = "refresh_token_mismatch"
    SUBJECT_MISMATCH = "subject_mismatch"
    ROTATION_CONFLICT = "rotation_conflict"
    ACCESS_TOKEN_INVALID = "access_token_invalid"
    STORE_UNAVAILABLE = "store_unavailable"


PUBLIC_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIALS: "Wrong Credentials",
    AuthErrorKind.ACCESS_DENIED: "Access Denied",
    AuthErrorKind.NOT_FOUND: "Principal not found",
    AuthErrorKind.TRANSIENT: "Service temporarily unavailable, try again",
}

# Credential failures share one public message per kind and are reported
# through the rejection event.
CREDENTIAL_FAILURES = (AuthErrorKind.INVALID_CREDENTIALS, AuthErrorKind.ACCESS_DENIED)


@dataclass(frozen=True)
class AuthError:
    """Typed failure returned by the auth service."""
    kind: AuthErrorKind
    message: str
    reason: FailureReason
    field: Optional[str] = None


@dataclass
class AuthResult:
    """Result of authentication operations."""
    success: bool
    profile: Optional[PrincipalProfile] = None
    tokens: Optional[TokenPair] = None
    claims: Optional[TokenPayload] = None
    message: Optional[str] = None
    error: Optional[AuthError] = None

    @property
    def error_kind(self) -> Optional[AuthErrorKind]:
        return self.error.kind if self.error else None

    @classmethod
    def failure(
        cls,
        kind: AuthErrorKind,
        reason: FailureReason,
        field: Optional[str] = None,
    ) -> 'AuthResult':
        if kind in (AuthErrorKind.CONFLICT, AuthErrorKind.INVALID_INPUT):
            message = f"Invalid {field}"
        else:
            message = PUBLIC_MESSAGES[kind]
        return cls(
            success=False,
            error=AuthError(kind=kind, message=message, reason=reason, field=field),
        )


@dataclass
class SignupRequest:
    """Principal registration request data."""
    name: str
    email: str
    password: str
    phone: Optional[str] = None


@dataclass
class SigninRequest:
    """Signin request data."""
    email: str
    password: str


def _invalid_input(error: ValidationException) -> AuthResult:
    """Report the first field that failed entity validation."""
    field = next(iter(error.errors), None)
    return AuthResult.failure(AuthErrorKind.INVALID_INPUT, FailureReason.INVALID_FIELD, field=field)


def _transient_on_store_failure(
    method: Callable[..., Awaitable[AuthResult]],
) -> Callable[..., Awaitable[AuthResult]]:
    """Turn a store outage anywhere in an operation into a TRANSIENT result."""

    @functools.wraps(method)
    async def wrapper(self: 'AuthService', *args: Any, **kwargs: Any) -> AuthResult:
        try:
            return await method(self, *args, **kwargs)
        except StoreUnavailableException as e:
            logger.warning("%s aborted, store unavailable: %s", method.__name__, e.message)
            return AuthResult.failure(AuthErrorKind.TRANSIENT, FailureReason.STORE_UNAVAILABLE)

    return wrapper


class AuthService:
    """
    Authentication service handling principal registration, signin and
    the refresh token session lifecycle.

    Each principal holds at most one refresh token hash. Signin and refresh
    replace it, logout and password change clear it, so only the most
    recently issued refresh token is ever accepted.
    """

    def __init__(
        self,
        principal_repository: PrincipalRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        event_publisher: Optional[EventPublisher] = None,
        store_timeout_seconds: Optional[float] = None,
    ):
        """
        Initialize the service.

        Args:
            principal_repository: Store for principals and session state
            password_hasher: Salted one-way hasher for passwords and refresh tokens
            token_service: Issuer and verifier of access/refresh tokens
            event_publisher: Optional sink for domain events
            store_timeout_seconds: Optional bound on every store call
        """
        self._principal_repository = principal_repository
        self._password_hasher = password_hasher
        self._token_service = token_service
        self._event_publisher = event_publisher
        self._store_timeout_seconds = store_timeout_seconds

    @_transient_on_store_failure
    async def signup(self, request: SignupRequest) -> AuthResult:
        """
        Register a new principal.

        Args:
            request: Registration data

        Returns:
            AuthResult with the stored profile, a CONFLICT naming the field
            whose uniqueness was violated, or INVALID_INPUT naming a field
            the principal cannot hold
        """
        password_hash = await self._hash(request.password)
        try:
            principal = Principal.create(
                email=request.email,
                name=request.name,
                password_hash=password_hash,
                phone=request.phone,
            )
        except ValidationException as e:
            return _invalid_input(e)

        try:
            saved = await self._store(self._principal_repository.add(principal))
        except DuplicateEntityException as e:
            logger.info("Signup rejected, duplicate %s", e.field)
            return AuthResult.failure(
                AuthErrorKind.CONFLICT,
                FailureReason.DUPLICATE_FIELD,
                field=e.field,
            )

        logger.info("Registered principal %s", saved.id)
        await self._publish(PrincipalRegistered(principal_id=saved.id, email=saved.email))

        return AuthResult(success=True, profile=saved.to_profile())

    @_transient_on_store_failure
    async def signin(self, request: SigninRequest) -> AuthResult:
        """
        Authenticate by email and password and start a new session.

        Unknown email and wrong password produce the same error so the
        response cannot be used to probe which emails are registered.

        Args:
            request: Signin credentials

        Returns:
            AuthResult with a fresh token pair on success
        """
        principal = await self._store(self._principal_repository.get_by_email(request.email))

        if principal is None:
            # Spend the same hashing work as a real check so timing does not
            # reveal whether the email exists.
            await self._verify(request.password, self._password_hasher.decoy_hash)
            return await self._reject(
                AuthErrorKind.INVALID_CREDENTIALS,
                FailureReason.UNKNOWN_EMAIL,
            )

        if not await self._verify(request.password, principal.password_hash):
            return await self._reject(
                AuthErrorKind.INVALID_CREDENTIALS,
                FailureReason.PASSWORD_MISMATCH,
                principal_id=principal.id,
            )

        tokens = await self._start_session(principal)
        if tokens is None:
            return await self._reject(
                AuthErrorKind.INVALID_CREDENTIALS,
                FailureReason.PRINCIPAL_NOT_FOUND,
                principal_id=principal.id,
            )

        logger.info("Principal %s signed in", principal.id)
        await self._publish(PrincipalSignedIn(principal_id=principal.id))

        return AuthResult(success=True, profile=principal.to_profile(), tokens=tokens)

    @_transient_on_store_failure
    async def refresh(self, principal_id: UUID, refresh_token: str) -> AuthResult:
        """
        Exchange the current refresh token for a new token pair.

        The stored hash is swapped from the observed value to the new one,
        so the presented token stops working the moment this succeeds and
        a concurrent refresh with the same token loses the swap.

        Args:
            principal_id: Principal the token was issued to
            refresh_token: Refresh token presented by the client

        Returns:
            AuthResult with the rotated token pair, or ACCESS_DENIED
        """
        payload = self._token_service.verify_token(refresh_token, REFRESH_TOKEN)
        if payload is None:
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.REFRESH_TOKEN_INVALID,
                principal_id=principal_id,
            )

        if payload.sub != str(principal_id):
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.SUBJECT_MISMATCH,
                principal_id=principal_id,
            )

        principal = await self._store(self._principal_repository.get_by_id(principal_id))
        if principal is None:
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.PRINCIPAL_NOT_FOUND,
                principal_id=principal_id,
            )

        current_hash = principal.refresh_token_hash
        if current_hash is None:
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.NO_ACTIVE_SESSION,
                principal_id=principal_id,
            )

        if not await self._verify(refresh_token, current_hash):
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.REFRESH_TOKEN_MISMATCH,
                principal_id=principal_id,
            )

        tokens = self._token_service.create_token_pair(principal.id, principal.email)
        new_hash = await self._hash(tokens.refresh_token)

        swapped = await self._store(
            self._principal_repository.swap_refresh_token_hash(principal.id, current_hash, new_hash)
        )
        if not swapped:
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.ROTATION_CONFLICT,
                principal_id=principal_id,
            )

        logger.debug("Rotated refresh token for principal %s", principal.id)
        await self._publish(SessionRefreshed(principal_id=principal.id))

        return AuthResult(success=True, profile=principal.to_profile(), tokens=tokens)

    @_transient_on_store_failure
    async def logout(self, principal_id: UUID) -> AuthResult:
        """
        End the principal's session.

        Idempotent: logging out twice, or logging out an unknown id,
        succeeds and leaves no session behind.
        """
        await self._store(self._principal_repository.set_refresh_token_hash(principal_id, None))

        logger.info("Principal %s logged out", principal_id)
        await self._publish(PrincipalLoggedOut(principal_id=principal_id))

        return AuthResult(success=True, message="Principal is logged out")

    @_transient_on_store_failure
    async def change_password(
        self,
        principal_id: UUID,
        current_password: str,
        new_password: str,
    ) -> AuthResult:
        """
        Change a principal's password and revoke the active session.

        Args:
            principal_id: Principal ID
            current_password: Current password for verification
            new_password: New password to set

        Returns:
            AuthResult with success status
        """
        principal = await self._store(self._principal_repository.get_by_id(principal_id))
        if principal is None:
            return AuthResult.failure(AuthErrorKind.NOT_FOUND, FailureReason.PRINCIPAL_NOT_FOUND)

        if not await self._verify(current_password, principal.password_hash):
            return await self._reject(
                AuthErrorKind.INVALID_CREDENTIALS,
                FailureReason.PASSWORD_MISMATCH,
                principal_id=principal_id,
            )

        new_hash = await self._hash(new_password)
        updated = await self._store(
            self._principal_repository.set_password_hash(principal_id, new_hash)
        )
        if not updated:
            return AuthResult.failure(AuthErrorKind.NOT_FOUND, FailureReason.PRINCIPAL_NOT_FOUND)

        logger.info("Principal %s changed password", principal_id)
        await self._publish(PrincipalPasswordChanged(principal_id=principal_id))

        return AuthResult(success=True, message="Password changed")

    @_transient_on_store_failure
    async def authenticate(self, access_token: str) -> AuthResult:
        """
        Resolve an access token to the principal it was issued to.

        Args:
            access_token: Bearer access token

        Returns:
            AuthResult with profile and verified claims, or ACCESS_DENIED
        """
        payload = self._token_service.verify_token(access_token, ACCESS_TOKEN)
        if payload is None:
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.ACCESS_TOKEN_INVALID,
            )

        try:
            principal_id = payload.principal_id
        except ValueError:
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.ACCESS_TOKEN_INVALID,
            )

        principal = await self._store(self._principal_repository.get_by_id(principal_id))
        if principal is None:
            return await self._reject(
                AuthErrorKind.ACCESS_DENIED,
                FailureReason.PRINCIPAL_NOT_FOUND,
                principal_id=principal_id,
            )

        return AuthResult(success=True, profile=principal.to_profile(), claims=payload)

    @_transient_on_store_failure
    async def get_profile(self, principal_id: UUID) -> AuthResult:
        """Return the public profile of a principal."""
        principal = await self._store(self._principal_repository.get_by_id(principal_id))
        if principal is None:
            return AuthResult.failure(AuthErrorKind.NOT_FOUND, FailureReason.PRINCIPAL_NOT_FOUND)
        return AuthResult(success=True, profile=principal.to_profile())

    @_transient_on_store_failure
    async def update_profile(self, principal_id: UUID, update: ProfileUpdate) -> AuthResult:
        """
        Change profile fields.

        Credentials and session state are never touched here.
        """
        if update.is_empty:
            return await self.get_profile(principal_id)
        changes = update.as_changes()

        try:
            principal = await self._store(
                self._principal_repository.update_profile(principal_id, changes)
            )
        except DuplicateEntityException as e:
            return AuthResult.failure(
                AuthErrorKind.CONFLICT,
                FailureReason.DUPLICATE_FIELD,
                field=e.field,
            )
        except ValidationException as e:
            return _invalid_input(e)

        if principal is None:
            return AuthResult.failure(AuthErrorKind.NOT_FOUND, FailureReason.PRINCIPAL_NOT_FOUND)

        await self._publish(PrincipalProfileUpdated(
            principal_id=principal_id,
            fields=tuple(sorted(changes)),
        ))

        return AuthResult(success=True, profile=principal.to_profile())

    @_transient_on_store_failure
    async def delete_principal(self, principal_id: UUID) -> AuthResult:
        """Remove a principal immediately. There is no soft delete."""
        deleted = await self._store(self._principal_repository.delete(principal_id))
        if not deleted:
            return AuthResult.failure(AuthErrorKind.NOT_FOUND, FailureReason.PRINCIPAL_NOT_FOUND)

        logger.info("Deleted principal %s", principal_id)
        await self._publish(PrincipalDeleted(principal_id=principal_id))

        return AuthResult(success=True, message="Principal deleted")

    async def _start_session(self, principal: Principal) -> Optional[TokenPair]:
        """Issue a token pair and persist its refresh hash, replacing any prior one."""
        tokens = self._token_service.create_token_pair(principal.id, principal.email)
        refresh_hash = await self._hash(tokens.refresh_token)

        stored = await self._store(
            self._principal_repository.set_refresh_token_hash(principal.id, refresh_hash)
        )
        return tokens if stored else None

    async def _store(self, operation: Awaitable[T]) -> T:
        """Await a repository call, bounded by the configured timeout."""
        if self._store_timeout_seconds is None:
            return await operation
        try:
            return await asyncio.wait_for(operation, timeout=self._store_timeout_seconds)
        except asyncio.TimeoutError:
            raise StoreUnavailableException(
                store="principal_repository",
                message=f"operation timed out after {self._store_timeout_seconds}s",
            )

    async def _hash(self, secret: str) -> str:
        return await asyncio.to_thread(self._password_hasher.hash, secret)

    async def _verify(self, secret: str, hashed: str) -> bool:
        return await asyncio.to_thread(self._password_hasher.verify, secret, hashed)

    async def _reject(
        self,
        kind: AuthErrorKind,
        reason: FailureReason,
        principal_id: Optional[UUID] = None,
    ) -> AuthResult:
        """Build a credential failure and report its internal reason."""
        logger.info(
            "Rejected %s: %s (principal=%s)",
            kind.value,
            reason.value,
            principal_id,
        )
        if kind in CREDENTIAL_FAILURES:
            await self._publish(AuthenticationRejected(
                kind=kind.value,
                reason=reason.value,
                principal_id=principal_id,
            ))
        return AuthResult.failure(kind, reason)

    async def _publish(self, event: Any) -> None:
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception:
            logger.warning("Failed to publish %s", event.event_type, exc_info=True)
