"""
JWT token handling implementation.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import jwt

from ...application.interfaces.services import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    TokenPair,
    TokenPayload,
    TokenService,
)


class JWTHandler(TokenService):
    """
    JWT token service implementation.

    Access and refresh tokens are signed with different secrets, so a leaked
    access secret cannot be used to mint refresh tokens and vice versa.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
        refresh_token_expire_days: int = 7,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        """
        Initialize JWT handler.

        Args:
            access_secret: Secret key for signing access tokens
            refresh_secret: Secret key for signing refresh tokens, must differ
            algorithm: JWT signing algorithm
            access_token_expire_minutes: Access token validity period
            refresh_token_expire_days: Refresh token validity period
            issuer: Token issuer claim
            audience: Token audience claim
        """
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh token secrets are required")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh token secrets must differ")
        if timedelta(minutes=access_token_expire_minutes) >= timedelta(days=refresh_token_expire_days):
            raise ValueError("Access tokens must expire before refresh tokens")

        self._secrets = {
            ACCESS_TOKEN: access_secret,
            REFRESH_TOKEN: refresh_secret,
        }
        self._lifetimes = {
            ACCESS_TOKEN: timedelta(minutes=access_token_expire_minutes),
            REFRESH_TOKEN: timedelta(days=refresh_token_expire_days),
        }
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience

    @property
    def access_token_lifetime(self) -> timedelta:
        return self._lifetimes[ACCESS_TOKEN]

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return self._lifetimes[REFRESH_TOKEN]

    def create_token_pair(self, principal_id: UUID, email: str) -> TokenPair:
        """Create both access and refresh tokens."""
        now = datetime.now(timezone.utc)

        access_token, access_expires = self._encode(ACCESS_TOKEN, principal_id, email, now)
        refresh_token, refresh_expires = self._encode(REFRESH_TOKEN, principal_id, email, now)

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_token_expires_at=access_expires,
            refresh_token_expires_at=refresh_expires,
        )

    def verify_token(self, token: str, token_type: str) -> Optional[TokenPayload]:
        """Verify and decode a token of the given type."""
        secret = self._secrets.get(token_type)
        if secret is None:
            raise ValueError(f"Unknown token type: {token_type}")

        try:
            options: Dict[str, Any] = {}
            if self._audience:
                options["audience"] = self._audience
            if self._issuer:
                options["issuer"] = self._issuer

            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat", "jti"]},
                **options
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None

        if payload.get("type") != token_type:
            return None

        return TokenPayload(
            sub=payload["sub"],
            email=payload.get("email", ""),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            jti=payload["jti"],
            type=payload["type"],
        )

    def _encode(
        self,
        token_type: str,
        principal_id: UUID,
        email: str,
        now: datetime,
    ) -> tuple:
        expires = now + self._lifetimes[token_type]

        payload = {
            "sub": str(principal_id),
            "email": email,
            "exp": expires,
            "iat": now,
            "jti": self._generate_jti(),
            "type": token_type,
        }

        if self._issuer:
            payload["iss"] = self._issuer
        if self._audience:
            payload["aud"] = self._audience

        token = jwt.encode(payload, self._secrets[token_type], algorithm=self._algorithm)
        return token, expires

    def _generate_jti(self) -> str:
        """Generate unique JWT ID."""
        return str(uuid.uuid4())
