"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    # Database
    # Production runs on PostgreSQL (postgresql+psycopg://...), development on a local file
    database_url: str = "sqlite:///./restaurant_orders.db"
    database_echo: bool = False

    # JWT verification (tokens are issued by the auth service)
    jwt_secret: str = "dev-secret-change-me-in-production"
    jwt_issuer: str = "restaurant-auth"
    jwt_audience: str = "restaurant-users"
    jwt_access_token_expire_minutes: int = 15

    # Comma-separated list of allowed origins (empty uses default localhost list)
    allowed_origins: str = ""

    # Server
    api_port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True

    # Order engine
    # "permissive" accepts any status from any status, "strict" enforces the adjacency table
    order_transition_policy: Literal["permissive", "strict"] = "permissive"
    # Prefix for generated order numbers: ORD + yymmdd + daily sequence
    order_number_prefix: str = "ORD"
    order_number_sequence_digits: int = 4

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_production_secrets(self) -> list[str]:
        """
        Validate that secrets are properly configured for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        weak_secrets = {
            "dev-secret-change-me-in-production",
            "secret",
            "password",
            "changeme",
            "default",
        }

        if self.environment == "production":
            if self.jwt_secret in weak_secrets or len(self.jwt_secret) < 32:
                errors.append(
                    "JWT_SECRET must be at least 32 characters and not a default value in production"
                )

            if self.debug:
                errors.append("DEBUG must be False in production")

            if not self.allowed_origins:
                errors.append(
                    "ALLOWED_ORIGINS must be set in production (comma-separated list of allowed domains)"
                )

            if self.is_sqlite:
                errors.append("DATABASE_URL must point to PostgreSQL in production")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

# Direct access to commonly used settings
DATABASE_URL = settings.database_url
JWT_SECRET = settings.jwt_secret
JWT_ISSUER = settings.jwt_issuer
JWT_AUDIENCE = settings.jwt_audience
