"""
Configuration module for the land registry service.

Settings are loaded from environment variables or a ``.env`` file using
Pydantic settings and validated on instantiation.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for the land registry service.

    Attributes:
        APP_NAME: Display name for the application
        DEBUG: Enable debug mode
        HOST: Server bind address
        PORT: Server port number
        LOG_LEVEL: Logging level
        LOG_JSON: Render logs as JSON instead of console output
        SUPABASE_URL: Supabase project URL
        SUPABASE_SERVICE_ROLE_KEY: Service role key used by the client handle
        STORAGE_BUCKET: Bucket holding uploaded documents
        LAND_TABLE: Table holding land registrations
        TRANSFER_TABLE: Table holding ownership transfers
    """

    APP_NAME: str = Field(
        default="Land Registry Service",
        description="Display name for the application",
    )
    DEBUG: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8020, ge=1, le=65535)

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_JSON: bool = True

    # Supabase (Storage & Postgres)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    STORAGE_BUCKET: str = "documents"
    LAND_TABLE: str = "land"
    TRANSFER_TABLE: str = "transfers"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("SUPABASE_URL")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """
        Validate the Supabase project URL.

        An empty value is allowed so the service can start without
        credentials; the client factory refuses to connect in that case.

        Raises:
            ValueError: If the URL has no http(s) scheme
        """
        value = value.strip().rstrip("/")
        if value and not value.startswith(("http://", "https://")):
            raise ValueError(
                f"SUPABASE_URL must start with http:// or https://, got: {value}"
            )
        return value


# Global settings instance
settings = Settings()
