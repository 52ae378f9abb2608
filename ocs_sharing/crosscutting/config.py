"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for a local gateway deployment

Collaborators:
  - api/main.py: reads settings for CORS, http root and startup validation
  - container.py: reads settings to build the gateway client
  - crosscutting/logger.py: reads log level and format
  - share_mapper: public_url is used to build public link URLs

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic — pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache
"""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/test/production)
        gateway_address: host:port of the storage/sharing gateway (gRPC)
        public_url: Base URL used to build public link URLs
        http_root: Mount point of the OCS API (default: /ocs)
        fake_gateway: Use the in-memory gateway instead of gRPC
        log_level: stdlib logging level name
        log_json: Emit JSON log lines (default: True)
        allowed_origins: Comma-separated CORS origins
    """

    # Environment
    app_env: str = "development"

    # Gateway
    gateway_address: str = "localhost:9142"
    fake_gateway: bool = False

    # HTTP
    public_url: str = "https://localhost:9200"
    http_root: str = "/ocs"
    allowed_origins: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("gateway_address")
    @classmethod
    def gateway_address_not_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("gateway_address must not be empty")
        return v

    @field_validator("http_root")
    @classmethod
    def http_root_normalized(cls, v: str) -> str:
        v = (v or "").strip()
        if not v.startswith("/"):
            raise ValueError("http_root must start with '/'")
        return v.rstrip("/") or "/"

    @field_validator("public_url")
    @classmethod
    def public_url_without_trailing_slash(cls, v: str) -> str:
        return (v or "").strip().rstrip("/")

    @field_validator("log_level")
    @classmethod
    def log_level_valid(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log_level must be a logging level name, got {v!r}")
        return level

    @model_validator(mode="after")
    def validate_gateway_requirements(self):
        if self.is_production() and self.fake_gateway:
            raise ValueError("FAKE_GATEWAY is not allowed in production")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
