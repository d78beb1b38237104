"""
FastAPI dependency injection providers.

The auth service itself is built explicitly from its collaborators; these
providers only decide which concrete adapters the HTTP layer hands it.
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..application.interfaces.repositories import PrincipalRepository
from ..application.interfaces.services import REFRESH_TOKEN, TokenPayload
from ..application.services.auth_service import AuthError, AuthErrorKind, AuthService
from ..config import get_settings
from ..domain.entities.principal import PrincipalProfile
from ..infrastructure.database.connection import DatabaseManager
from ..infrastructure.database.repositories import SQLAlchemyPrincipalRepository
from ..infrastructure.security import BcryptPasswordHasher, JWTHandler

# Security scheme
bearer_scheme = HTTPBearer(auto_error=False)


STATUS_BY_KIND = {
    AuthErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    AuthErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    AuthErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorKind.INVALID_INPUT: 422,
    AuthErrorKind.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


# Singleton instances for services
_password_hasher: Optional[BcryptPasswordHasher] = None
_jwt_handler: Optional[JWTHandler] = None
_principal_repository: Optional[PrincipalRepository] = None


def http_error(error: AuthError, status_code: Optional[int] = None) -> HTTPException:
    """Translate a service failure into an HTTP error."""
    code = status_code or STATUS_BY_KIND[error.kind]
    headers = None
    if code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    elif code == status.HTTP_503_SERVICE_UNAVAILABLE:
        headers = {"Retry-After": "1"}
    return HTTPException(status_code=code, detail=error.message, headers=headers)


def get_password_hasher() -> BcryptPasswordHasher:
    """Get password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher(rounds=get_settings().hasher.bcrypt_rounds)
    return _password_hasher


def get_jwt_handler() -> JWTHandler:
    """Get JWT handler instance."""
    global _jwt_handler
    if _jwt_handler is None:
        tokens = get_settings().tokens
        _jwt_handler = JWTHandler(
            access_secret=tokens.access_token_secret.get_secret_value(),
            refresh_secret=tokens.refresh_token_secret.get_secret_value(),
            algorithm=tokens.token_algorithm,
            access_token_expire_minutes=tokens.access_token_expire_minutes,
            refresh_token_expire_days=tokens.refresh_token_expire_days,
            issuer=tokens.token_issuer,
            audience=tokens.token_audience,
        )
    return _jwt_handler


def get_principal_repository() -> PrincipalRepository:
    """Get the database-backed principal repository."""
    global _principal_repository
    if _principal_repository is None:
        _principal_repository = SQLAlchemyPrincipalRepository(
            DatabaseManager.get_session_factory()
        )
    return _principal_repository


def get_auth_service(
    principal_repository: PrincipalRepository = Depends(get_principal_repository),
    password_hasher: BcryptPasswordHasher = Depends(get_password_hasher),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
) -> AuthService:
    """Get authentication service instance."""
    return AuthService(
        principal_repository=principal_repository,
        password_hasher=password_hasher,
        token_service=jwt_handler,
        store_timeout_seconds=get_settings().store_timeout_seconds,
    )


@dataclass(frozen=True)
class CurrentPrincipal:
    """Principal resolved from a valid access token."""
    profile: PrincipalProfile
    claims: TokenPayload

    @property
    def id(self) -> UUID:
        return self.profile.id


@dataclass(frozen=True)
class RefreshCredentials:
    """Refresh token presented as a bearer credential, with its subject."""
    principal_id: UUID
    refresh_token: str


def _unauthenticated(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> CurrentPrincipal:
    """
    Resolve the bearer access token to a principal.

    Raises HTTPException if not authenticated.
    """
    if credentials is None:
        raise _unauthenticated()

    result = await auth_service.authenticate(credentials.credentials)

    if not result.success:
        if result.error_kind == AuthErrorKind.TRANSIENT:
            raise http_error(result.error)
        raise http_error(result.error, status.HTTP_401_UNAUTHORIZED)

    return CurrentPrincipal(profile=result.profile, claims=result.claims)


async def get_refresh_credentials(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
) -> RefreshCredentials:
    """
    Read the refresh token from the Authorization header.

    Only the signature and expiry are checked here, to learn the subject;
    the auth service decides whether the token is still the current one.
    """
    if credentials is None:
        raise _unauthenticated()

    payload = jwt_handler.verify_token(credentials.credentials, REFRESH_TOKEN)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Denied")

    try:
        principal_id = payload.principal_id
    except ValueError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Denied")

    return RefreshCredentials(principal_id=principal_id, refresh_token=credentials.credentials)


def reset_singletons() -> None:
    """Forget cached adapters, e.g. after settings change in tests."""
    global _password_hasher, _jwt_handler, _principal_repository
    _password_hasher = None
    _jwt_handler = None
    _principal_repository = None
