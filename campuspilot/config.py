"""
Application configuration using Pydantic Settings.

Centralizes all environment variables and app settings.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    List values (cors_allowed_origins) are given as JSON in the environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined here
    )

    # Application
    app_name: str = "CampusPilot API"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    # MongoDB - Motor (async driver)
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "campusPilotDB"
    mongodb_server_selection_timeout_ms: int = 5000
    # False: connect on first use, failures become 500s.
    # True: connect during startup, failure aborts the process.
    mongodb_connect_on_startup: bool = False

    # Identity tokens. RS256 tokens are checked against the JWKS endpoint,
    # HS256 tokens against auth_jwt_secret (local development only).
    firebase_project_id: Optional[str] = None
    auth_jwks_url: str = FIREBASE_JWKS_URL
    auth_jwt_secret: Optional[str] = None

    @field_validator("auth_jwt_secret", "firebase_project_id", mode="before")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not isinstance(v, str):
            return v
        return v.strip() or None

    # CORS allow-list; "*" allows every origin
    cors_allowed_origins: List[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.
    Using lru_cache avoids re-reading .env on every request.
    """
    return Settings()
