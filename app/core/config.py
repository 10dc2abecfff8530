"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, CORS, pagination limits, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="devserve",
        description="MongoDB database name"
    )
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        default=5000,
        description="How long a store operation waits for a reachable server"
    )
    MONGODB_CONNECT_TIMEOUT_MS: int = Field(
        default=10000,
        description="Socket connect timeout"
    )
    MONGODB_MAX_RETRIES: int = Field(
        default=3,
        description="Connection attempts at startup before giving up"
    )
    MONGODB_RETRY_DELAY: float = Field(
        default=2.0,
        description="Fixed delay in seconds between connection attempts"
    )

    # Users
    BCRYPT_ROUNDS: int = Field(
        default=10,
        description="bcrypt cost factor for password hashes"
    )
    DEFAULT_PAGE_SIZE: int = Field(
        default=10,
        description="Page size used by /filter when no limit is given"
    )
    MAX_PAGE_SIZE: int = Field(
        default=100,
        description="Largest page size accepted by /filter"
    )
    ID_ALLOCATION_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        description="Insert attempts when an allocated ID collides with an existing one"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    PORT: int = Field(
        default=5000,
        description="Port the HTTP server listens on"
    )
    API_PREFIX: str = Field(
        default="/api/users",
        description="User route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt only accepts cost factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if settings.MONGODB_MAX_RETRIES < 1:
        errors.append("MONGODB_MAX_RETRIES must be at least 1")

    if settings.DEFAULT_PAGE_SIZE < 1 or settings.DEFAULT_PAGE_SIZE > settings.MAX_PAGE_SIZE:
        errors.append("DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE")

    # Production-specific validations
    if settings.is_production and "*" in settings.CORS_ORIGINS:
        errors.append("CORS_ORIGINS must list explicit origins in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
