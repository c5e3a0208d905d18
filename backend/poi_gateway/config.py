"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.

A single Settings instance is built by create_app() and handed to every
component explicitly. Nothing reads configuration from module globals.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # CORS / origin guard
    # Comma-separated list, e.g. "https://app.example.com,http://localhost:3000"
    allowed_origins: str = ""
    cors_max_age: int = 86400  # Preflight cache TTL in seconds

    # Apillon Storage (write-enabled credentials, never exposed to clients)
    apillon_api_base: str = "https://api.apillon.io"
    apillon_api_key: Optional[str] = None
    apillon_api_secret: Optional[str] = None
    apillon_bucket_uuid: Optional[str] = None
    apillon_list_page_size: int = 100  # Max items per list call

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Batch sync
    sync_batch_limit: int = 50  # Extra identifiers are dropped silently

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def allowed_origin_list(self) -> List[str]:
        """Parsed allow-list with whitespace and empty entries removed."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def storage_configured(self) -> bool:
        """Check if all Apillon credentials are present."""
        return all([
            self.apillon_api_key,
            self.apillon_api_secret,
            self.apillon_bucket_uuid,
        ])
