"""
Configuration management for the auth core.

Uses Pydantic settings for validation and environment variable support.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TokenSettings(BaseSettings):
    """Token signing configuration. Both secrets are required and must differ."""

    model_config = SettingsConfigDict(
        env_file='.env',
        extra='ignore'
    )

    access_token_secret: SecretStr = Field(..., description='Secret for signing access tokens')
    refresh_token_secret: SecretStr = Field(..., description='Secret for signing refresh tokens')
    token_algorithm: str = Field(default='HS256', description='JWT algorithm')
    access_token_expire_minutes: int = Field(
        default=60,
        gt=0,
        description='Access token expiration in minutes'
    )
    refresh_token_expire_days: int = Field(
        default=7,
        gt=0,
        description='Refresh token expiration in days'
    )
    token_issuer: Optional[str] = Field(default=None, description='JWT token issuer')
    token_audience: Optional[str] = Field(default=None, description='JWT token audience')

    @model_validator(mode='after')
    def check_secrets_differ(self) -> 'TokenSettings':
        """Refuse configurations where one secret could sign both token kinds."""
        if self.access_token_secret.get_secret_value() == self.refresh_token_secret.get_secret_value():
            raise ValueError('ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ')
        return self


class HasherSettings(BaseSettings):
    """Password hashing configuration."""

    model_config = SettingsConfigDict(
        env_prefix='HASHER_',
        env_file='.env',
        extra='ignore'
    )

    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description='bcrypt work factor')


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_prefix='DB_',
        env_file='.env',
        extra='ignore'
    )

    dsn: Optional[str] = Field(default=None, description='Full async database URL, overrides the parts below')
    host: str = Field(default='localhost', description='Database host')
    port: int = Field(default=5432, description='Database port')
    name: str = Field(default='authcore', description='Database name')
    user: str = Field(default='postgres', description='Database user')
    password: str = Field(default='postgres', description='Database password')
    pool_size: int = Field(default=5, description='Connection pool size')
    max_overflow: int = Field(default=10, description='Max overflow connections')
    pool_timeout: float = Field(default=10.0, description='Seconds to wait for a pooled connection')
    echo_sql: bool = Field(default=False, description='Echo SQL queries')

    @property
    def url(self) -> str:
        """Build database URL."""
        if self.dsn:
            return self.dsn
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Application
    app_name: str = Field(default='authcore')
    app_version: str = Field(default='1.0.0')
    debug: bool = Field(default=False)
    environment: str = Field(default='development')  # development, staging, production, test

    # API
    api_prefix: str = Field(default='/api')

    # Logging
    log_level: str = Field(default='INFO')
    log_format: str = Field(default='text')  # json or text

    # Store calls slower than this fail as transient errors
    store_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    # Sub-settings
    tokens: TokenSettings = Field(default_factory=TokenSettings)
    hasher: HasherSettings = Field(default_factory=HasherSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ('json', 'text'):
            raise ValueError('log_format must be "json" or "text"')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == 'production'


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings.

    Uses LRU cache to avoid re-reading environment variables on every access.
    """
    return AppSettings()
