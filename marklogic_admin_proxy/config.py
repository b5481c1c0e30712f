"""
Configuration module for the MarkLogic Admin Proxy.

This module uses Pydantic Settings to load and validate environment variables
for the upstream MarkLogic connection, digest-auth credentials, the proxy's
own bind address, CORS and logging.

Environment variables are loaded from .env file or system environment.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a development default so the service starts against a
    local MarkLogic install without any configuration.
    """

    # =========================================================================
    # Upstream MarkLogic Configuration
    # =========================================================================

    MARKLOGIC_HOST: str = Field(
        default="localhost",
        description="MarkLogic host name or address",
        min_length=1,
    )

    MARKLOGIC_SCHEME: str = Field(
        default="http",
        description="Scheme used to reach MarkLogic (http or https)",
    )

    MARKLOGIC_MANAGE_PORT: int = Field(
        default=8002,
        description="Port of the MarkLogic Management REST API",
        ge=1,
        le=65535,
    )

    MARKLOGIC_USERNAME: str = Field(
        default="admin",
        description="User for digest authentication against MarkLogic",
        min_length=1,
    )

    MARKLOGIC_PASSWORD: str = Field(
        default="",
        description="Password for digest authentication against MarkLogic",
    )

    MARKLOGIC_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Timeout applied to every upstream request",
        gt=0,
    )

    # =========================================================================
    # Proxy Server Configuration
    # =========================================================================

    PROXY_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the proxy server",
    )

    PROXY_PORT: int = Field(
        default=8080,
        description="Port to bind the proxy server",
        ge=1,
        le=65535,
    )

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins (empty disables CORS)",
    )

    # =========================================================================
    # Logging
    # =========================================================================

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
    def manage_base_url(self) -> str:
        """
        Base URL of the Management REST API.

        Returns:
            URL such as ``http://localhost:8002`` without trailing slash.
        """
        return f"{self.MARKLOGIC_SCHEME}://{self.MARKLOGIC_HOST}:{self.MARKLOGIC_MANAGE_PORT}"

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

    @field_validator("MARKLOGIC_SCHEME")
    @classmethod
    def validate_scheme(cls, v: str) -> str:
        """
        Validate that the upstream scheme is http or https.

        Raises:
            ValueError: If the scheme is anything else
        """
        scheme = v.strip().lower()
        if scheme not in ("http", "https"):
            raise ValueError(f"MARKLOGIC_SCHEME must be 'http' or 'https', got: {v}")
        return scheme

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        level = v.strip().upper()
        if level not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}, got: {v}")
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

    Raises:
        ValidationError: If an environment variable holds an invalid value.
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def validate_configuration(settings: Settings) -> dict:
    """
    Validate configuration settings and return a status report.

    Called during application startup; errors are logged but never stop the
    service because MarkLogic itself is the authority on credentials.

    Returns:
        Dictionary with validation status, errors and warnings.
    """
    errors = []
    warnings = []

    if not settings.MARKLOGIC_PASSWORD:
        warnings.append("MARKLOGIC_PASSWORD is not set (digest authentication will likely fail)")

    if settings.MARKLOGIC_SCHEME == "http" and settings.MARKLOGIC_HOST not in ("localhost", "127.0.0.1"):
        warnings.append("MarkLogic is reached over plain http on a non-local host")

    if settings.MARKLOGIC_MANAGE_PORT == settings.PROXY_PORT and settings.MARKLOGIC_HOST in ("localhost", "127.0.0.1"):
        errors.append("PROXY_PORT collides with MARKLOGIC_MANAGE_PORT on localhost")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "manage_base_url": settings.manage_base_url,
        "timeout_seconds": settings.MARKLOGIC_TIMEOUT_SECONDS,
    }
