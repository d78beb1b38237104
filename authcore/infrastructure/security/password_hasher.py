"""
Secret hashing implementation using bcrypt.
"""
import base64
import hashlib
import secrets

import bcrypt

from ...application.interfaces.services import PasswordHasher


class BcryptPasswordHasher(PasswordHasher):
    """
    Bcrypt implementation of the secret hasher.

    bcrypt only reads the first 72 bytes of its input. Refresh tokens are
    longer than that and tokens for the same principal share a prefix, so
    every secret is first reduced to a base64 SHA-256 digest (44 bytes) and
    that digest is what bcrypt salts and hashes.

    The decoy hash is made at construction, so even the first signin for
    an unknown email costs exactly one verification.
    """

    MIN_ROUNDS = 4
    MAX_ROUNDS = 31

    def __init__(self, rounds: int = 12):
        """
        Initialize hasher with work factor.

        Args:
            rounds: Number of bcrypt rounds (default 12, good balance of security/speed)
        """
        if not self.MIN_ROUNDS <= rounds <= self.MAX_ROUNDS:
            raise ValueError(
                f"bcrypt rounds must be between {self.MIN_ROUNDS} and {self.MAX_ROUNDS}"
            )
        self._rounds = rounds
        self._decoy_hash = self.hash(secrets.token_urlsafe(32))

    @property
    def rounds(self) -> int:
        return self._rounds

    @property
    def decoy_hash(self) -> str:
        return self._decoy_hash

    def hash(self, secret: str) -> str:
        """Hash a secret using bcrypt."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(self._digest(secret), salt)
        return hashed.decode('utf-8')

    def verify(self, secret: str, hashed: str) -> bool:
        """Verify a secret against a hash."""
        try:
            return bcrypt.checkpw(self._digest(secret), hashed.encode('utf-8'))
        except (ValueError, TypeError, AttributeError):
            return False

    @staticmethod
    def _digest(secret: str) -> bytes:
        return base64.b64encode(hashlib.sha256(secret.encode('utf-8')).digest())
