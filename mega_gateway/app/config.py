"""
Configuration module for the Mega gateway.

This module uses Pydantic Settings to load and validate environment variables
for session verification, the internal Mega API address, CORS and logging.

Environment variables are loaded from .env file or system environment.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The only setting the comment proxy strictly needs is MEGA_INTERNAL_HOST;
    everything else configures the session verifier and the server itself.
    """

    # =========================================================================
    # Internal Mega API
    # =========================================================================

    MEGA_INTERNAL_HOST: str = Field(
        ...,
        description="Base address of the internal Mega API (e.g., http://mega:8000)",
        min_length=1,
    )

    MEGA_INTERNAL_TIMEOUT_SECONDS: Optional[float] = Field(
        default=None,
        description="Timeout for calls to the internal API (unset means wait indefinitely)",
        gt=0,
    )

    # =========================================================================
    # Session JWT Configuration
    # =========================================================================

    SESSION_JWT_SECRET: str = Field(
        ...,
        description="Secret key used to sign and verify session JWTs",
        min_length=32,
    )

    SESSION_JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm (HS256, HS384, or HS512)",
    )

    SESSION_JWT_ISSUER: Optional[str] = Field(
        default=None,
        description="Expected 'iss' claim; not checked when unset",
    )

    SESSION_JWT_EXPIRY_MINUTES: int = Field(
        default=60,
        description="Lifetime of issued session JWTs in minutes",
        ge=5,
        le=1440,  # Max 24 hours
    )

    SESSION_COOKIE_NAME: str = Field(
        default="session",
        description="Name of the cookie carrying the session JWT",
        min_length=1,
    )

    # =========================================================================
    # Gateway Server Configuration
    # =========================================================================

    GATEWAY_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the gateway server",
    )

    GATEWAY_PORT: int = Field(
        default=8080,
        description="Port to bind the gateway server",
        ge=1,
        le=65535,
    )

    ALLOWED_ORIGINS: Optional[str] = Field(
        None,
        description="Comma-separated list of allowed CORS origins (leave empty for no CORS)",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origin URLs, or empty list if not configured.
        """
        if not self.ALLOWED_ORIGINS:
            return []

        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("MEGA_INTERNAL_HOST")
    @classmethod
    def validate_internal_host(cls, v: str) -> str:
        """
        Require an absolute http(s) base address.

        The value is kept verbatim: outbound URLs are built by plain
        concatenation, so a trailing slash is the operator's choice.

        Raises:
            ValueError: If the scheme is missing or not http/https
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"MEGA_INTERNAL_HOST must start with http:// or https://, got: {v}"
            )
        return v

    @field_validator("SESSION_JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """
        Validate JWT algorithm is one of the supported HMAC algorithms.

        Raises:
            ValueError: If algorithm is not supported
        """
        allowed_algorithms = ["HS256", "HS384", "HS512"]

        if v not in allowed_algorithms:
            raise ValueError(
                f"JWT algorithm must be one of {allowed_algorithms}, got: {v}"
            )

        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the settings are loaded only once
    during the application lifecycle.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If required environment variables are missing
                        or invalid.

    Example:
        >>> from mega_gateway.app.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.MEGA_INTERNAL_HOST)
    """
    return Settings()
