"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings shared by the auth, user, property and gateway services.

    Each service runs as its own process and reads the same variables; a service
    simply ignores the settings it has no use for (e.g. the gateway never touches
    the database).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database - falls back to a local SQLite file when DATABASE_URL is unset
    database_url: str = Field(
        default="sqlite+aiosqlite:///./rentals.db",
        validation_alias="DATABASE_URL",
    )

    # Token signing (auth service only)
    jwt_secret: str = Field(default="", validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    jwt_expires_in: int = Field(default=3600, ge=1, validation_alias="JWT_EXPIRES_IN")

    # Downstream service base URLs
    auth_service_url: str = Field(
        default="http://localhost:3000", validation_alias="AUTH_SERVICE_URL",
    )
    user_service_url: str = Field(
        default="http://localhost:3001", validation_alias="USER_SERVICE_URL",
    )
    property_service_url: str = Field(
        default="http://localhost:3002", validation_alias="PROPERTY_SERVICE_URL",
    )

    # Outbound HTTP calls (seconds). Applies to every service-to-service call.
    http_timeout: float = Field(default=5.0, gt=0, validation_alias="HTTP_TIMEOUT")

    # Owner enrichment fan-out for property lists
    enrichment_strategy: Literal["sequential", "concurrent", "cached"] = Field(
        default="sequential", validation_alias="ENRICHMENT_STRATEGY",
    )
    enrichment_concurrency: int = Field(
        default=10, ge=1, validation_alias="ENRICHMENT_CONCURRENCY",
    )

    # Listening ports used by api.run
    auth_port: int = Field(default=3000, validation_alias="AUTH_PORT")
    user_port: int = Field(default=3001, validation_alias="USER_PORT")
    property_port: int = Field(default=3002, validation_alias="PROPERTY_PORT")
    gateway_port: int = Field(default=4000, validation_alias="GATEWAY_PORT")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
